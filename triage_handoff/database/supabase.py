"""
Supabase document store with fail-fast error handling.
The supabase-py client is synchronous, so every query runs in a worker thread.
"""

import asyncio
from typing import Any

from supabase import Client

from triage_handoff.database.base import DatabaseError
from triage_handoff.models.domain import Conversation, Specialist, TriageRecord
from triage_handoff.utils.logger import get_logger

logger = get_logger(__name__)

CONVERSATIONS_TABLE = "conversations"
SPECIALISTS_TABLE = "specialists"
TRIAGE_TABLE = "triage_records"


class SupabaseStore:
    """
    Document store backed by three Supabase tables.
    Conversation messages and embedded specialists are stored as jsonb.
    """

    def __init__(self, client: Client):
        """
        Initialize the store.

        Args:
            client: Supabase client created with the service key
        """
        self.client = client

    async def _execute(self, operation: str, query: Any) -> list[dict]:
        """
        Runs a prepared query off the event loop.

        Raises:
            DatabaseError: If the query fails for any reason
        """
        try:
            response = await asyncio.to_thread(query.execute)
        except Exception as e:
            logger.error(
                "database_operation_failed",
                exc_info=True,
                operation=operation,
                error=str(e),
            )
            raise DatabaseError(f"Failed to {operation}: {e}") from e
        return response.data or []

    async def get_conversation(self, conversation_id: str) -> Conversation | None:
        rows = await self._execute(
            "load conversation",
            self.client.table(CONVERSATIONS_TABLE)
            .select("*")
            .eq("id", conversation_id)
            .limit(1),
        )
        if not rows:
            logger.info("conversation_not_found", conversation_id=conversation_id)
            return None
        return Conversation.model_validate(rows[0])

    async def save_conversation(self, conversation: Conversation) -> None:
        row = conversation.model_dump(mode="json")
        await self._execute(
            "save conversation",
            self.client.table(CONVERSATIONS_TABLE).upsert(row),
        )
        logger.info(
            "conversation_saved",
            conversation_id=conversation.id,
            message_count=len(conversation.messages),
        )

    async def find_available_specialist(self, specialty: str) -> Specialist | None:
        """
        Finds an available specialist whose specialty equals the tag,
        ignoring case.

        Args:
            specialty: Specialty tag produced by the matcher

        Returns:
            First available specialist or None
        """
        # ilike without wildcards is a case-insensitive equality
        pattern = specialty.replace("%", r"\%").replace("_", r"\_")
        rows = await self._execute(
            "find specialist",
            self.client.table(SPECIALISTS_TABLE)
            .select("*")
            .ilike("specialty", pattern)
            .eq("available", True)
            .limit(1),
        )
        if not rows:
            logger.info("no_available_specialist", specialty=specialty)
            return None
        return Specialist.model_validate(rows[0])

    async def upsert_specialist(self, specialist: Specialist) -> None:
        await self._execute(
            "save specialist",
            self.client.table(SPECIALISTS_TABLE).upsert(
                specialist.model_dump(mode="json")
            ),
        )

    async def add_triage_record(self, record: TriageRecord) -> None:
        await self._execute(
            "insert triage record",
            self.client.table(TRIAGE_TABLE).insert(record.model_dump(mode="json")),
        )
        logger.info(
            "triage_record_written",
            specialty=record.specialty,
            conversation_id=record.conversation_id,
        )
