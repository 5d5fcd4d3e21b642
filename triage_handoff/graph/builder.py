"""
Graph builder for constructing the turn workflow and the service around it.
Assembles nodes, edges, and collaborators into an executable graph.
"""

from supabase import create_client
from langgraph.graph import StateGraph, END

from triage_handoff import config
from triage_handoff.database.base import DocumentStore
from triage_handoff.database.memory import InMemoryStore
from triage_handoff.database.supabase import SupabaseStore
from triage_handoff.models.domain import TurnState
from triage_handoff.services.intent_service import IntentService
from triage_handoff.services.llm_service import LLMService, create_llm
from triage_handoff.services.memory_service import MemoryService
from triage_handoff.services.triage_service import TriageService
from triage_handoff.graph.nodes import TurnNodes
from triage_handoff.graph.edges import BRANCH_NODES, route_after_router
from triage_handoff.utils.logger import get_logger

logger = get_logger(__name__)


def build_turn_graph(nodes: TurnNodes):
    """
    Builds and compiles the per-turn state machine.

    router -> one branch node -> persist -> END

    Args:
        nodes: Node container wired with its services

    Returns:
        Compiled graph ready for execution
    """
    logger.info("graph_workflow_building")
    workflow = StateGraph(TurnState)

    workflow.add_node("router", nodes.router_node)
    workflow.add_node("confirm", nodes.confirm_node)
    workflow.add_node("decline", nodes.decline_node)
    workflow.add_node("reask", nodes.reask_node)
    workflow.add_node("answer_prompt", nodes.answer_prompt_node)
    workflow.add_node("triage", nodes.triage_node)
    workflow.add_node("specialist_chat", nodes.specialist_chat_node)
    workflow.add_node("assistant_chat", nodes.assistant_chat_node)
    workflow.add_node("persist", nodes.persist_node)

    workflow.set_entry_point("router")

    workflow.add_conditional_edges(
        "router",
        route_after_router,
        {name: name for name in BRANCH_NODES},
    )

    for name in BRANCH_NODES:
        workflow.add_edge(name, "persist")
    workflow.add_edge("persist", END)

    logger.info("graph_compiling")
    return workflow.compile()


def create_store(settings: config.Settings) -> DocumentStore:
    """
    Creates the document store selected by STORE_BACKEND.

    Raises:
        ConfigurationError: If Supabase credentials are missing
    """
    if settings.store_backend == "memory":
        logger.warning("store_backend_in_memory")
        return InMemoryStore()

    if not settings.supabase_url or not settings.supabase_service_key:
        raise config.ConfigurationError(
            "SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the supabase backend"
        )
    client = create_client(settings.supabase_url, settings.supabase_service_key)
    return SupabaseStore(client)


def build_triage_service(
    settings: config.Settings | None = None,
    store: DocumentStore | None = None,
) -> TriageService:
    """
    Wires LLM services, the store and the turn graph into a TriageService.

    Args:
        settings: Settings to use (defaults to get_settings())
        store: Pre-built store, e.g. a seeded InMemoryStore

    Returns:
        Ready-to-use TriageService
    """
    logger.info("service_components_initializing")
    settings = settings or config.get_settings()
    store = store or create_store(settings)

    chat_llm_service = LLMService(
        model=create_llm(
            model_name=settings.chat_model,
            api_key=settings.api_key_for(settings.chat_model),
            temperature=0.3,
        ),
        max_attempts=settings.llm_max_retries,
        timeout=settings.llm_timeout,
        rate_limit=settings.llm_rate_limit,
    )

    router_llm_service = LLMService(
        model=create_llm(
            model_name=settings.router_model,
            api_key=settings.api_key_for(settings.router_model),
        ),
        max_attempts=settings.llm_max_retries,
        timeout=settings.llm_timeout,
        rate_limit=settings.llm_rate_limit,
    )

    nodes = TurnNodes(
        intent_service=IntentService(router_llm_service),
        chat_llm=chat_llm_service,
        store=store,
        history_window=settings.prompt_history_window,
    )
    memory_service = MemoryService(
        router_llm_service,
        store,
        threshold=settings.compaction_threshold,
        keep_recent=settings.compaction_keep_recent,
    )

    return TriageService(
        graph=build_turn_graph(nodes),
        store=store,
        memory_service=memory_service,
    )
