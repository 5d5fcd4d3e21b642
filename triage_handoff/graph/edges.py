"""
Graph edge conditions for routing between nodes.
"""

from triage_handoff.models.domain import TurnState
from triage_handoff.utils.logger import get_logger

logger = get_logger(__name__)

BRANCH_NODES = (
    "confirm",
    "decline",
    "reask",
    "answer_prompt",
    "triage",
    "specialist_chat",
    "assistant_chat",
)


def route_after_router(state: TurnState) -> str:
    """
    Maps the router decision to a branch node.
    An unclear answer re-asks first, then falls back to the yes/no reminder,
    alternating while the flag cycles.

    Args:
        state: Current turn state

    Returns:
        Name of the branch node
    """
    route = state.get("route")
    if route == "unclear":
        if state["conversation"].awaiting_confirmation_retry:
            return "answer_prompt"
        return "reask"

    if route not in BRANCH_NODES:
        logger.error(
            "invalid_route",
            route=route,
            fallback="assistant_chat",
        )
        return "assistant_chat"
    return route
