"""
Shared test fixtures and configuration.
"""

import pytest
from unittest.mock import Mock

from triage_handoff.database.memory import InMemoryStore
from triage_handoff.graph.builder import build_turn_graph
from triage_handoff.graph.nodes import TurnNodes
from triage_handoff.models.domain import Conversation, Specialist, Specialty
from triage_handoff.services.intent_service import IntentService
from triage_handoff.services.llm_service import LLMService
from triage_handoff.services.memory_service import MemoryService
from triage_handoff.services.triage_service import TriageService


@pytest.fixture
def cardiologist() -> Specialist:
    return Specialist(
        id="doc-cardio", name="Nguyễn Văn An", specialty=Specialty.CARDIOLOGY.value
    )


@pytest.fixture
def neurologist() -> Specialist:
    return Specialist(
        id="doc-neuro", name="Trần Thị Bình", specialty=Specialty.NEUROLOGY.value
    )


@pytest.fixture
def store(cardiologist, neurologist) -> InMemoryStore:
    """In-memory store seeded with two available specialists."""
    return InMemoryStore([cardiologist, neurologist])


@pytest.fixture
def chat_llm():
    """Mock chat generator (assistant and specialist replies)."""
    llm = Mock(spec=LLMService)
    llm.generate.return_value = "Mocked reply"
    return llm


@pytest.fixture
def router_llm():
    """Mock router generator (intent fallback and summaries)."""
    llm = Mock(spec=LLMService)
    llm.generate.return_value = "KHÔNG"
    return llm


@pytest.fixture
def triage_service(store, chat_llm, router_llm) -> TriageService:
    """TriageService wired exactly like build_triage_service, minus real LLMs."""
    nodes = TurnNodes(
        intent_service=IntentService(router_llm),
        chat_llm=chat_llm,
        store=store,
    )
    memory_service = MemoryService(router_llm, store)
    return TriageService(
        graph=build_turn_graph(nodes), store=store, memory_service=memory_service
    )


def make_conversation(message_count: int = 0, **fields) -> Conversation:
    """Conversation with alternating user/assistant messages."""
    conversation = Conversation(**fields)
    for i in range(message_count):
        role = "user" if i % 2 == 0 else "assistant"
        conversation.append_message(role, f"message {i}")
    return conversation


@pytest.fixture
def conversation_factory():
    return make_conversation
