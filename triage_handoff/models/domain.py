"""
Domain models representing the core business entities and turn state.
Conversation is the document persisted per chat; TurnState is the state
object threaded through the LangGraph turn workflow.
"""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from typing_extensions import TypedDict
from pydantic import BaseModel, Field, model_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class Specialty(str, Enum):
    """Specialty taxonomy, one tag per specialist."""

    CARDIOLOGY = "Tim mạch"
    NEUROLOGY = "Thần kinh"
    RESPIRATORY = "Hô hấp"
    GASTROENTEROLOGY = "Tiêu hóa"
    DERMATOLOGY = "Da liễu"
    ENT = "Tai mũi họng"
    MUSCULOSKELETAL = "Cơ xương khớp"
    OPHTHALMOLOGY = "Mắt"
    OBSTETRICS = "Sản phụ khoa"
    PEDIATRICS = "Nhi khoa"
    GENERAL = "Đa khoa"


class ConversationState(str, Enum):
    FREE_CHAT = "free_chat"
    PENDING_CONFIRMATION = "pending_confirmation"
    CONNECTED = "connected"


class Message(BaseModel):
    role: Literal["user", "assistant", "system"]
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)


class Specialist(BaseModel):
    """A doctor that can be matched to a conversation. Never mutated here."""

    id: str = Field(default_factory=_new_id)
    name: str
    specialty: str
    available: bool = True


class TriageRecord(BaseModel):
    """Write-once audit entry of a symptom classification."""

    id: str = Field(default_factory=_new_id)
    symptoms: str
    specialty: str
    conversation_id: str | None = None
    specialist_id: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)


class Conversation(BaseModel):
    """
    A patient's chat thread.

    Attributes:
        messages: Ordered transcript; older turns are dropped by compaction.
        specialist: Bound specialist (Connected state).
        pending_specialist: Suggested specialist awaiting a yes/no answer.
        awaiting_confirmation_retry: Set after one unclear answer while pending.
        summary: Cumulative synopsis of compacted turns.
    """

    id: str = Field(default_factory=_new_id)
    user_id: str | None = None
    messages: list[Message] = Field(default_factory=list)
    specialist: Specialist | None = None
    pending_specialist: Specialist | None = None
    awaiting_confirmation_retry: bool = False
    summary: str = ""
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @model_validator(mode="after")
    def _check_specialist_slots(self) -> "Conversation":
        if self.specialist is not None and self.pending_specialist is not None:
            raise ValueError("a conversation cannot be both connected and pending")
        if self.pending_specialist is None and self.awaiting_confirmation_retry:
            self.awaiting_confirmation_retry = False
        return self

    @property
    def state(self) -> ConversationState:
        if self.specialist is not None:
            return ConversationState.CONNECTED
        if self.pending_specialist is not None:
            return ConversationState.PENDING_CONFIRMATION
        return ConversationState.FREE_CHAT

    def append_message(self, role: str, content: str) -> Message:
        message = Message(role=role, content=content)
        self.messages.append(message)
        self.updated_at = message.timestamp
        return message

    def recent_messages(self, limit: int) -> list[Message]:
        return self.messages[-limit:] if limit > 0 else []

    def suggest(self, specialist: Specialist) -> None:
        """Enters PendingConfirmation with a fresh retry flag."""
        self.pending_specialist = specialist
        self.awaiting_confirmation_retry = False

    def confirm_pending(self) -> Specialist:
        """Binds the pending specialist and returns it."""
        if self.pending_specialist is None:
            raise ValueError("no specialist is pending confirmation")
        self.specialist = self.pending_specialist
        self.pending_specialist = None
        self.awaiting_confirmation_retry = False
        return self.specialist

    def clear_pending(self) -> None:
        self.pending_specialist = None
        self.awaiting_confirmation_retry = False


class TurnState(TypedDict, total=False):
    """
    State of one inbound message travelling through the turn graph.

    Attributes:
        conversation: Conversation loaded (or created) for this turn.
        message: Raw user message.
        route: Decision of the router node.
        reply: Assistant reply produced by the branch node.
        compact: Whether compaction should be dispatched after the save.
        triage_record: Audit entry written by the persist node after the save.
    """

    conversation: Conversation
    message: str
    route: str
    reply: str
    compact: bool
    triage_record: TriageRecord | None
