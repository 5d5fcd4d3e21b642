"""
Database package exports for the document store implementations.
"""

from triage_handoff.database.base import DatabaseError, DocumentStore
from triage_handoff.database.memory import InMemoryStore
from triage_handoff.database.supabase import SupabaseStore

__all__ = ["DatabaseError", "DocumentStore", "InMemoryStore", "SupabaseStore"]
