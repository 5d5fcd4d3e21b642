"""
Services package exports for business logic layer.
"""

from triage_handoff.services.llm_service import (
    LLMService,
    TextGenerator,
    create_llm,
    LLMError,
    LLMTimeoutError,
)
from triage_handoff.services.intent_service import (
    IntentService,
    ShortAnswer,
    classify_short_answer,
)
from triage_handoff.services.specialty_service import match_specialty
from triage_handoff.services.prompt_builder import build_prompt
from triage_handoff.services.memory_service import MemoryService
from triage_handoff.services.triage_service import (
    TriageService,
    InvalidRequestError,
    ConversationNotFoundError,
)

__all__ = [
    "LLMService",
    "TextGenerator",
    "create_llm",
    "LLMError",
    "LLMTimeoutError",
    "IntentService",
    "ShortAnswer",
    "classify_short_answer",
    "match_specialty",
    "build_prompt",
    "MemoryService",
    "TriageService",
    "InvalidRequestError",
    "ConversationNotFoundError",
]
