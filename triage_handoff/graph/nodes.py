"""
Graph nodes implementing one conversation turn.
Each branch node decides the reply and the next conversation state;
the persist node records the turn.
"""

from triage_handoff.database.base import DocumentStore
from triage_handoff.models.domain import TriageRecord, TurnState
from triage_handoff.services.intent_service import (
    IntentService,
    ShortAnswer,
    classify_short_answer,
)
from triage_handoff.services.llm_service import TextGenerator
from triage_handoff.services.prompt_builder import (
    assistant_persona,
    build_prompt,
    specialist_persona,
)
from triage_handoff.services.specialty_service import match_specialty
from triage_handoff.utils.prompts import load_prompts
from triage_handoff.utils.logger import get_logger

logger = get_logger(__name__)
PROMPTS = load_prompts()
REPLIES = PROMPTS["replies"]

_ANSWER_ROUTES = {
    ShortAnswer.AFFIRMATIVE: "confirm",
    ShortAnswer.NEGATIVE: "decline",
    ShortAnswer.UNCLEAR: "unclear",
}


class TurnNodes:
    """
    Container for all turn graph node functions.
    """

    def __init__(
        self,
        intent_service: IntentService,
        chat_llm: TextGenerator,
        store: DocumentStore,
        history_window: int = 10,
    ):
        """
        Initialize turn nodes with required services.

        Args:
            intent_service: Classifier for free-chat messages
            chat_llm: Text generator answering as assistant or specialist
            store: Document store for specialists, triage records and conversations
            history_window: Recent messages rendered into chat prompts
        """
        self.intent_service = intent_service
        self.chat_llm = chat_llm
        self.store = store
        self.history_window = history_window

    async def router_node(self, state: TurnState) -> dict:
        """Entry point: picks the branch for the conversation's current state."""
        conversation = state["conversation"]
        message = state["message"]

        if conversation.pending_specialist is not None:
            answer = classify_short_answer(message)
            logger.info("node_started", node="router", pending_answer=answer.value)
            return {"route": _ANSWER_ROUTES[answer]}

        if conversation.specialist is not None:
            logger.info("node_started", node="router", route="specialist_chat")
            return {"route": "specialist_chat"}

        wants_specialist = await self.intent_service.wants_specialist(message)
        route = "triage" if wants_specialist else "assistant_chat"
        logger.info("node_started", node="router", route=route)
        return {"route": route}

    def confirm_node(self, state: TurnState) -> dict:
        conversation = state["conversation"]
        specialist = conversation.confirm_pending()
        logger.info("specialist_connected", specialist_id=specialist.id)
        reply = REPLIES["confirmed"].format(
            name=specialist.name, specialty=specialist.specialty
        )
        return {"conversation": conversation, "reply": reply, "compact": True}

    def decline_node(self, state: TurnState) -> dict:
        conversation = state["conversation"]
        conversation.clear_pending()
        logger.info("specialist_declined")
        return {"conversation": conversation, "reply": REPLIES["declined"], "compact": True}

    def reask_node(self, state: TurnState) -> dict:
        """First unclear answer: ask the yes/no question again."""
        conversation = state["conversation"]
        conversation.awaiting_confirmation_retry = True
        pending = conversation.pending_specialist
        reply = REPLIES["reask"].format(name=pending.name, specialty=pending.specialty)
        return {"conversation": conversation, "reply": reply, "compact": False}

    def answer_prompt_node(self, state: TurnState) -> dict:
        """Second unclear answer in a row: plain yes/no reminder, flag reset."""
        conversation = state["conversation"]
        conversation.awaiting_confirmation_retry = False
        return {
            "conversation": conversation,
            "reply": REPLIES["answer_yes_or_no"],
            "compact": False,
        }

    async def triage_node(self, state: TurnState) -> dict:
        """
        Matches a specialty and looks for an available specialist.
        Suggests the specialist when one is found. The triage record is
        written by persist_node once the turn is saved.
        """
        conversation = state["conversation"]
        message = state["message"]

        specialty = match_specialty(message)
        specialist = await self.store.find_available_specialist(specialty.value)

        record = TriageRecord(
            symptoms=message,
            specialty=specialty.value,
            conversation_id=conversation.id,
            specialist_id=specialist.id if specialist else None,
        )

        if specialist is None:
            logger.info("triage_no_specialist", specialty=specialty.value)
            reply = REPLIES["no_specialist"].format(specialty=specialty.value)
        else:
            logger.info(
                "triage_specialist_suggested",
                specialty=specialty.value,
                specialist_id=specialist.id,
            )
            conversation.suggest(specialist)
            reply = REPLIES["suggestion"].format(
                name=specialist.name, specialty=specialist.specialty
            )

        return {
            "conversation": conversation,
            "reply": reply,
            "compact": True,
            "triage_record": record,
        }

    async def specialist_chat_node(self, state: TurnState) -> dict:
        conversation = state["conversation"]
        persona = specialist_persona(conversation.specialist)
        reply = await self._generate_reply(state, persona)
        return {"reply": reply, "compact": True}

    async def assistant_chat_node(self, state: TurnState) -> dict:
        reply = await self._generate_reply(state, assistant_persona())
        return {"reply": reply, "compact": True}

    async def persist_node(self, state: TurnState) -> dict:
        """
        Appends the user message and the reply, then saves once.
        A pending triage record is written only after the save succeeds.
        Database errors propagate to the caller.
        """
        conversation = state["conversation"]
        conversation.append_message("user", state["message"])
        conversation.append_message("assistant", state["reply"])
        await self.store.save_conversation(conversation)

        record = state.get("triage_record")
        if record is not None:
            await self.store.add_triage_record(record)

        logger.info(
            "turn_persisted",
            state=conversation.state.value,
            message_count=len(conversation.messages),
        )
        return {"conversation": conversation}

    async def _generate_reply(self, state: TurnState, persona: str) -> str:
        prompt = build_prompt(
            state["conversation"],
            state["message"],
            persona,
            history_window=self.history_window,
        )
        try:
            reply = await self.chat_llm.generate(prompt)
        except Exception as e:
            logger.error("reply_generation_failed", exc_info=True, error=str(e))
            return REPLIES["generation_failure"]
        if not reply:
            logger.warning("reply_generation_empty")
            return REPLIES["generation_failure"]
        return reply
