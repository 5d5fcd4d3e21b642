"""
Graph package for the LangGraph turn workflow.
"""

from triage_handoff.graph.builder import (
    build_triage_service,
    build_turn_graph,
    create_store,
)
from triage_handoff.graph.nodes import TurnNodes
from triage_handoff.graph.edges import route_after_router

__all__ = [
    "build_triage_service",
    "build_turn_graph",
    "create_store",
    "TurnNodes",
    "route_after_router",
]
