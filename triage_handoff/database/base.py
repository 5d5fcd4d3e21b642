"""
Document store contract consumed by the turn workflow.
"""

from typing import Protocol

from triage_handoff.models.domain import Conversation, Specialist, TriageRecord


class DatabaseError(Exception):
    """Raised when database operations fail."""


class DocumentStore(Protocol):
    """
    Persistence capability for conversations, specialists and triage records.
    Implementations must preserve the insertion order of message lists.
    """

    async def get_conversation(self, conversation_id: str) -> Conversation | None: ...

    async def save_conversation(self, conversation: Conversation) -> None: ...

    async def find_available_specialist(self, specialty: str) -> Specialist | None: ...

    async def add_triage_record(self, record: TriageRecord) -> None: ...
