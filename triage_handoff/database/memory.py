"""In-memory document store for local runs and tests"""

import asyncio
from typing import Iterable

from triage_handoff.models.domain import Conversation, Specialist, TriageRecord
from triage_handoff.utils.logger import get_logger

logger = get_logger(__name__)


class InMemoryStore:
    """Lock-guarded dictionaries; documents are copied in and out like a real store"""

    def __init__(self, specialists: Iterable[Specialist] = ()):
        self._conversations: dict[str, Conversation] = {}
        self._specialists: dict[str, Specialist] = {s.id: s for s in specialists}
        self._triage_records: list[TriageRecord] = []
        self._lock = asyncio.Lock()

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        async with self._lock:
            conversation = self._conversations.get(conversation_id)
            return conversation.model_copy(deep=True) if conversation else None

    async def save_conversation(self, conversation: Conversation) -> None:
        async with self._lock:
            self._conversations[conversation.id] = conversation.model_copy(deep=True)
        logger.debug(
            "conversation_saved",
            conversation_id=conversation.id,
            message_count=len(conversation.messages),
        )

    async def add_specialist(self, specialist: Specialist) -> None:
        async with self._lock:
            self._specialists[specialist.id] = specialist

    async def find_available_specialist(self, specialty: str) -> Specialist | None:
        wanted = specialty.casefold()
        async with self._lock:
            for specialist in self._specialists.values():
                if specialist.available and specialist.specialty.casefold() == wanted:
                    return specialist
        return None

    async def add_triage_record(self, record: TriageRecord) -> None:
        async with self._lock:
            self._triage_records.append(record)

    async def list_triage_records(self) -> list[TriageRecord]:
        async with self._lock:
            return list(self._triage_records)
