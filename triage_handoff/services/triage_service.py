"""
Triage service exposing the two public operations: submitting a chat
message to a conversation, and submitting symptoms directly.
"""

import asyncio
from typing import Any

from triage_handoff.database.base import DocumentStore
from triage_handoff.models.domain import Conversation, TriageRecord
from triage_handoff.models.schemas import TriageResult, TurnResult
from triage_handoff.services.memory_service import MemoryService
from triage_handoff.services.specialty_service import match_specialty
from triage_handoff.utils.logger import get_logger, set_correlation_id

logger = get_logger(__name__)


class InvalidRequestError(Exception):
    """Raised when a request lacks a required field. Nothing is mutated."""


class ConversationNotFoundError(Exception):
    """Raised when a conversation id is unknown. Nothing is mutated."""


class TriageService:
    """
    Runs conversation turns through the compiled turn graph and dispatches
    compaction in the background.

    Each turn is a read-modify-write of one conversation document. Turns for
    the same conversation are not serialized, and a background compaction may
    finish before or after the next turn on that conversation. At most one
    compaction per conversation runs at a time.
    """

    def __init__(self, graph: Any, store: DocumentStore, memory_service: MemoryService):
        """
        Initialize triage service.

        Args:
            graph: Compiled turn graph (see build_turn_graph)
            store: Document store
            memory_service: Compactor dispatched after eligible turns
        """
        self.graph = graph
        self.store = store
        self.memory_service = memory_service
        self._background_tasks: set[asyncio.Task] = set()
        self._compacting: set[str] = set()

    async def get_conversation(self, conversation_id: str) -> Conversation:
        conversation = await self.store.get_conversation(conversation_id)
        if conversation is None:
            raise ConversationNotFoundError(f"Conversation {conversation_id} not found")
        return conversation

    async def submit_message(
        self,
        message: str,
        conversation_id: str | None = None,
        user_id: str | None = None,
    ) -> TurnResult:
        """
        Processes one user message end to end.

        Args:
            message: User message text
            conversation_id: Existing conversation, or None to start one
            user_id: Owner recorded on a new conversation

        Returns:
            Reply text and the conversation after the turn

        Raises:
            InvalidRequestError: If the message is blank
            ConversationNotFoundError: If conversation_id is unknown
            DatabaseError: If loading or saving fails
        """
        if not message or not message.strip():
            raise InvalidRequestError("message is required")

        if conversation_id is None:
            conversation = Conversation(user_id=user_id)
            logger.info("conversation_created", conversation_id=conversation.id)
        else:
            conversation = await self.get_conversation(conversation_id)

        set_correlation_id(conversation.id)
        logger.info("turn_started", state=conversation.state.value)

        final_state = await self.graph.ainvoke(
            {"conversation": conversation, "message": message}
        )
        conversation = final_state["conversation"]

        if final_state.get("compact"):
            self._dispatch_compaction(conversation)

        logger.info("turn_completed", state=conversation.state.value)
        return TurnResult(reply=final_state["reply"], conversation=conversation)

    async def submit_symptoms(
        self, symptoms: str, conversation_id: str | None = None
    ) -> TriageResult:
        """
        Classifies symptoms and finds an available specialist without
        touching any conversation state. A triage record is always written.

        Raises:
            InvalidRequestError: If the symptom text is blank
            DatabaseError: If the store fails
        """
        if not symptoms or not symptoms.strip():
            raise InvalidRequestError("symptoms are required")

        specialty = match_specialty(symptoms)
        specialist = await self.store.find_available_specialist(specialty.value)
        await self.store.add_triage_record(
            TriageRecord(
                symptoms=symptoms,
                specialty=specialty.value,
                conversation_id=conversation_id,
                specialist_id=specialist.id if specialist else None,
            )
        )
        logger.info(
            "symptoms_triaged",
            specialty=specialty.value,
            specialist_found=specialist is not None,
        )
        return TriageResult(specialty=specialty.value, specialist=specialist)

    def _dispatch_compaction(self, conversation: Conversation) -> None:
        if not self.memory_service.needs_compaction(conversation):
            return
        if conversation.id in self._compacting:
            logger.info("compaction_already_running")
            return

        snapshot = conversation.model_copy(deep=True)
        self._compacting.add(conversation.id)
        task = asyncio.create_task(self.memory_service.compact_conversation(snapshot))
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        task.add_done_callback(lambda _: self._compacting.discard(snapshot.id))
        logger.info("compaction_dispatched", message_count=len(snapshot.messages))

    async def wait_for_background(self) -> None:
        """Waits for dispatched compactions (shutdown and tests)."""
        if self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)
