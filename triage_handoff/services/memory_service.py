"""
Memory service bounding the transcript fed to the chat model.
Older turns are folded into a cumulative summary once a conversation grows
past a threshold.
"""

from triage_handoff.database.base import DocumentStore
from triage_handoff.models.domain import Conversation
from triage_handoff.services.llm_service import TextGenerator
from triage_handoff.services.prompt_builder import render_transcript
from triage_handoff.utils.prompts import load_prompts
from triage_handoff.utils.logger import get_logger

logger = get_logger(__name__)
PROMPTS = load_prompts()

COMPACTION_THRESHOLD = 30
KEEP_RECENT_MESSAGES = 10
SUMMARY_SEPARATOR = "\n"


class MemoryService:
    """
    Service for conversation compaction: summarize, truncate, persist.
    """

    def __init__(
        self,
        llm_service: TextGenerator,
        store: DocumentStore,
        threshold: int = COMPACTION_THRESHOLD,
        keep_recent: int = KEEP_RECENT_MESSAGES,
    ):
        """
        Initialize memory service.

        Args:
            llm_service: Text generator producing the synopsis
            store: Document store receiving the compacted conversation
            threshold: Message count at which compaction triggers
            keep_recent: Messages kept verbatim after compaction
        """
        self.llm_service = llm_service
        self.store = store
        self.threshold = threshold
        self.keep_recent = keep_recent

    def needs_compaction(self, conversation: Conversation) -> bool:
        return len(conversation.messages) >= self.threshold

    async def compact_conversation(self, conversation: Conversation) -> bool:
        """
        Summarizes all but the most recent messages and truncates the log.
        Failures leave the conversation untouched and are never raised.

        The stored document is re-read before saving so that turns persisted
        while the summary was being generated are kept. Only the summarized
        prefix is dropped, and only if it is still stored unchanged.

        Args:
            conversation: Conversation snapshot taken after the turn was saved

        Returns:
            True if the conversation was compacted and saved
        """
        message_count = len(conversation.messages)
        if not self.needs_compaction(conversation):
            return False

        logger.info(
            "compaction_started",
            conversation_id=conversation.id,
            message_count=message_count,
        )

        older = conversation.messages[: -self.keep_recent]
        prompt = PROMPTS["summarization"]["prompt_template"].format(
            transcript=render_transcript(older)
        )

        try:
            synopsis = (await self.llm_service.generate(prompt) or "").strip()
        except Exception as e:
            logger.error(
                "compaction_failed",
                exc_info=True,
                conversation_id=conversation.id,
                error=str(e),
            )
            return False

        if not synopsis:
            logger.warning("compaction_skipped_empty_summary", conversation_id=conversation.id)
            return False

        try:
            current = await self.store.get_conversation(conversation.id)
            if current is None or current.messages[: len(older)] != older:
                logger.warning(
                    "compaction_skipped_stale_snapshot",
                    conversation_id=conversation.id,
                )
                return False

            summary = (
                current.summary + SUMMARY_SEPARATOR + synopsis
                if current.summary
                else synopsis
            )
            compacted = current.model_copy(
                update={"summary": summary, "messages": current.messages[len(older) :]}
            )
            await self.store.save_conversation(compacted)
        except Exception as e:
            logger.error(
                "compaction_save_failed",
                exc_info=True,
                conversation_id=conversation.id,
                error=str(e),
            )
            return False

        conversation.summary = compacted.summary
        conversation.messages = compacted.messages
        logger.info(
            "compaction_completed",
            conversation_id=conversation.id,
            messages_removed=len(older),
            messages_kept=len(compacted.messages),
        )
        return True
