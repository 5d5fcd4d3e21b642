"""
Request/response schemas for the public operations and the HTTP layer.
All models use Field() with descriptions for clarity.
"""

from pydantic import BaseModel, ConfigDict, Field

from triage_handoff.models.domain import (
    Conversation,
    ConversationState,
    Specialist,
)


class TurnResult(BaseModel):
    """Outcome of one submitted message."""

    reply: str = Field(description="Assistant reply appended for this turn")
    conversation: Conversation = Field(description="Conversation after the turn")

    @property
    def state(self) -> ConversationState:
        return self.conversation.state


class TriageResult(BaseModel):
    """Outcome of a direct symptom submission."""

    specialty: str = Field(description="Matched specialty tag")
    specialist: Specialist | None = Field(
        default=None, description="Available specialist for that specialty, if any"
    )


class ChatRequest(BaseModel):
    message: str = Field(description="Patient message", min_length=1, max_length=4000)
    conversation_id: str | None = Field(
        default=None,
        description="Existing conversation; omitted to start a new one",
    )
    user_id: str | None = Field(default=None, description="Optional user identifier")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "message": "Tôi muốn gặp bác sĩ tim mạch",
                "conversation_id": None,
            }
        }
    )


class ChatResponse(BaseModel):
    conversation_id: str
    reply: str
    state: ConversationState
    pending_specialist: Specialist | None = None
    specialist: Specialist | None = None

    @classmethod
    def from_turn(cls, result: TurnResult) -> "ChatResponse":
        conversation = result.conversation
        return cls(
            conversation_id=conversation.id,
            reply=result.reply,
            state=conversation.state,
            pending_specialist=conversation.pending_specialist,
            specialist=conversation.specialist,
        )


class TriageRequest(BaseModel):
    symptoms: str = Field(
        description="Free-text symptom description", min_length=1, max_length=4000
    )
    conversation_id: str | None = Field(
        default=None, description="Conversation the symptoms came from, if any"
    )

    model_config = ConfigDict(
        json_schema_extra={"example": {"symptoms": "Tôi bị đau đầu và chóng mặt"}}
    )
