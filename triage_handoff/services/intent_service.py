"""
Intent service deciding whether a patient wants to see a specialist,
and reading short yes/no answers to a handoff suggestion.
"""

import re
from enum import Enum

from triage_handoff.services.llm_service import TextGenerator
from triage_handoff.utils.prompts import load_prompts
from triage_handoff.utils.text import fold_diacritics, lowercase_text, normalize_text
from triage_handoff.utils.logger import get_logger

logger = get_logger(__name__)
PROMPTS = load_prompts()

AFFIRMATIVE_ANSWERS = frozenset({"co", "ok", "yes", "dong y", "d"})
NEGATIVE_ANSWERS = frozenset({"khong", "ko", "no", "k"})

_DOCTOR = r"(bác sĩ|bác sỹ|\bbs\b|chuyên gia|chuyên khoa)"

WANTS_SPECIALIST_PATTERNS = [
    re.compile(r"(gặp|khám|tư vấn|hỏi|nói chuyện với|kết nối|liên hệ|chuyển)\s.{0,20}" + _DOCTOR),
    re.compile(r"\b(muốn|cần)\b.{0,15}" + _DOCTOR),
    re.compile(r"(đặt lịch|hẹn) khám"),
    re.compile(r"\b(see|talk to|speak (to|with)|consult|book)\b.{0,20}\b(doctor|specialist|physician)\b"),
]

DECLINES_SPECIALIST_PATTERNS = [
    re.compile(r"\b(không|chẳng|chưa|khỏi)\b\s*(cần|muốn)\b.{0,20}" + _DOCTOR),
    re.compile(r"\b(không|chưa) (đi )?khám\b"),
    re.compile(r"\b(don't|do not|no need to)\b.{0,20}\b(doctor|specialist|physician)\b"),
]

# Second pass for Vietnamese typed without accents, matched on folded text
_UNACCENTED_DOCTOR = r"(bac si|bac sy|\bbs\b|chuyen gia|chuyen khoa)"

UNACCENTED_WANTS_PATTERNS = [
    re.compile(r"\b(gap|kham|tu van|noi chuyen voi|ket noi|lien he)\s.{0,20}" + _UNACCENTED_DOCTOR),
    re.compile(r"\b(muon|can)\b.{0,15}" + _UNACCENTED_DOCTOR),
    re.compile(r"\b(dat lich|hen) kham\b"),
]

UNACCENTED_DECLINES_PATTERNS = [
    re.compile(r"\b(khong|chang|chua|khoi)\b\s*(can|muon)\b.{0,20}" + _UNACCENTED_DOCTOR),
    re.compile(r"\b(khong|chua) (di )?kham\b"),
]

_LLM_YES = {"có", "co", "yes"}
_LLM_NO = {"không", "khong", "no"}


class ShortAnswer(str, Enum):
    AFFIRMATIVE = "affirmative"
    NEGATIVE = "negative"
    UNCLEAR = "unclear"


def classify_short_answer(message: str) -> ShortAnswer:
    """
    Exact-match lookup of a reply to a yes/no question.

    A sentence merely containing "yes" is UNCLEAR, so only short,
    unambiguous answers move the conversation.
    """
    normalized = normalize_text(message)
    if normalized in AFFIRMATIVE_ANSWERS:
        return ShortAnswer.AFFIRMATIVE
    if normalized in NEGATIVE_ANSWERS:
        return ShortAnswer.NEGATIVE
    return ShortAnswer.UNCLEAR


def _rule_hits(text: str, wants_patterns, declines_patterns) -> tuple[bool, bool]:
    wants = any(p.search(text) for p in wants_patterns)
    declines = any(p.search(text) for p in declines_patterns)
    return wants, declines


def match_intent_rules(message: str) -> bool | None:
    """
    Deterministic first stage of intent detection.

    Accented rules run first. Only when none of them matches are the
    unaccented rules tried on the diacritic-folded text.

    Returns:
        True/False when exactly one rule set matches, None when the
        message is ambiguous (both or neither matched)
    """
    text = lowercase_text(message)
    wants, declines = _rule_hits(
        text, WANTS_SPECIALIST_PATTERNS, DECLINES_SPECIALIST_PATTERNS
    )
    if not (wants or declines):
        wants, declines = _rule_hits(
            fold_diacritics(text),
            UNACCENTED_WANTS_PATTERNS,
            UNACCENTED_DECLINES_PATTERNS,
        )
    if wants == declines:
        return None
    return wants


def parse_yes_no(response: str) -> bool | None:
    """
    Reads the first yes/no token (Vietnamese or English) of a model answer.
    Tokens are compared with their accents, so "nó" is not read as "no".
    """
    for token in re.findall(r"\w+", lowercase_text(response)):
        if token in _LLM_YES:
            return True
        if token in _LLM_NO:
            return False
    return None


class IntentService:
    """
    Two-stage classifier: keyword rules first, text-generator fallback
    only for ambiguous messages.
    """

    def __init__(self, llm_service: TextGenerator):
        """
        Initialize intent service.

        Args:
            llm_service: Text generator used for the fallback classification
        """
        self.llm_service = llm_service

    async def wants_specialist(self, message: str) -> bool:
        """
        Decides whether the message asks for a specialist.
        Never raises: fallback failures resolve to False.

        Args:
            message: Raw user message

        Returns:
            True if the patient wants to be handed off
        """
        if not message or not message.strip():
            return False

        verdict = match_intent_rules(message)
        if verdict is not None:
            logger.info("intent_rules_matched", wants_specialist=verdict)
            return verdict

        return await self._classify_with_llm(message)

    async def _classify_with_llm(self, message: str) -> bool:
        prompt = PROMPTS["intent_classification"]["prompt_template"].format(
            message=message
        )
        try:
            response = await self.llm_service.generate(prompt)
        except Exception as e:
            logger.error(
                "intent_fallback_failed",
                exc_info=True,
                error=str(e),
                default_intent=False,
            )
            return False

        verdict = parse_yes_no(response or "")
        if verdict is None:
            logger.warning("intent_fallback_unparseable", response=response)
            return False

        logger.info("intent_fallback_completed", wants_specialist=verdict)
        return verdict
