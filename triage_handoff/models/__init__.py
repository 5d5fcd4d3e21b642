"""
Models package exports for domain entities and API schemas.
"""

from triage_handoff.models.domain import (
    Conversation,
    ConversationState,
    Message,
    Specialist,
    Specialty,
    TriageRecord,
    TurnState,
)
from triage_handoff.models.schemas import (
    ChatRequest,
    ChatResponse,
    TriageRequest,
    TriageResult,
    TurnResult,
)

__all__ = [
    "Conversation",
    "ConversationState",
    "Message",
    "Specialist",
    "Specialty",
    "TriageRecord",
    "TurnState",
    "ChatRequest",
    "ChatResponse",
    "TriageRequest",
    "TriageResult",
    "TurnResult",
]
