"""
Specialist-handoff triage chat: conversation state machine, intent and
specialty classification, and transcript compaction.
"""

__version__ = "0.1.0"
