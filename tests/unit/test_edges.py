"""
Unit tests for turn graph routing.
"""

from triage_handoff.graph.edges import route_after_router
from triage_handoff.models.domain import Conversation


def test_unclear_answer_reasks_first(cardiologist):
    state = {
        "conversation": Conversation(pending_specialist=cardiologist),
        "route": "unclear",
    }

    assert route_after_router(state) == "reask"


def test_unclear_answer_after_reask_prompts_yes_or_no(cardiologist):
    state = {
        "conversation": Conversation(
            pending_specialist=cardiologist, awaiting_confirmation_retry=True
        ),
        "route": "unclear",
    }

    assert route_after_router(state) == "answer_prompt"


def test_branch_routes_pass_through():
    conversation = Conversation()
    for route in ("confirm", "decline", "triage", "specialist_chat", "assistant_chat"):
        assert route_after_router({"conversation": conversation, "route": route}) == route


def test_invalid_route_falls_back_to_assistant():
    state = {"conversation": Conversation(), "route": "unknown"}

    assert route_after_router(state) == "assistant_chat"
