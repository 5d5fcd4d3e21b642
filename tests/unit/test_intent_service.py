"""
Unit tests for IntentService and short-answer matching.
Tests normalization, rule fast path, and the generator fallback.
"""

import pytest
from unittest.mock import Mock

from triage_handoff.services.intent_service import (
    IntentService,
    ShortAnswer,
    classify_short_answer,
    match_intent_rules,
    parse_yes_no,
)
from triage_handoff.services.llm_service import LLMService, LLMTimeoutError
from triage_handoff.utils.text import normalize_text


@pytest.fixture
def llm_service():
    """Mock LLM service for testing."""
    return Mock(spec=LLMService)


@pytest.fixture
def intent_service(llm_service):
    return IntentService(llm_service)


class TestNormalization:
    def test_strips_diacritics_and_case(self):
        assert normalize_text("Đồng Ý") == "dong y"

    def test_trims_punctuation_and_whitespace(self):
        assert normalize_text("  Không!  ") == "khong"

    def test_collapses_inner_whitespace(self):
        assert normalize_text("đồng    ý") == "dong y"


class TestShortAnswers:
    """Exact-match vocabulary for yes/no replies."""

    @pytest.mark.parametrize("reply", ["có", "Có", "ok", "OK.", "yes", "Đồng ý", "đ", "d"])
    def test_affirmative(self, reply):
        assert classify_short_answer(reply) == ShortAnswer.AFFIRMATIVE

    @pytest.mark.parametrize("reply", ["không", "Không.", "ko", "no", "k"])
    def test_negative(self, reply):
        assert classify_short_answer(reply) == ShortAnswer.NEGATIVE

    @pytest.mark.parametrize(
        "reply",
        ["yes I think so", "có lẽ vậy", "để tôi suy nghĩ", "maybe", ""],
    )
    def test_anything_else_is_unclear(self, reply):
        assert classify_short_answer(reply) == ShortAnswer.UNCLEAR


class TestIntentRules:
    """Deterministic first stage."""

    def test_wants_specialist(self):
        assert match_intent_rules("tôi muốn gặp bác sĩ tim mạch") is True

    def test_wants_specialist_english(self):
        assert match_intent_rules("I want to see a doctor") is True

    def test_declines_specialist(self):
        assert match_intent_rules("tôi không sao, không đi khám đâu") is False

    def test_declines_specialist_english(self):
        assert match_intent_rules("I don't need a doctor") is False

    def test_neither_set_is_ambiguous(self):
        assert match_intent_rules("hôm nay trời đẹp quá") is None

    def test_both_sets_is_ambiguous(self):
        assert match_intent_rules("tôi không muốn gặp bác sĩ") is None

    def test_unaccented_request(self):
        assert match_intent_rules("toi muon gap bac si tim mach") is True

    def test_unaccented_decline(self):
        assert match_intent_rules("thoi, toi khong di kham dau") is False

    def test_accented_match_skips_folded_rules(self):
        assert match_intent_rules("tôi muốn gặp bác sĩ, khong di kham") is True


class TestParseYesNo:
    @pytest.mark.parametrize("response", ["CÓ", "Có.", "yes", "Yes, they do"])
    def test_affirmative_tokens(self, response):
        assert parse_yes_no(response) is True

    @pytest.mark.parametrize("response", ["KHÔNG", "không.", "No"])
    def test_negative_tokens(self, response):
        assert parse_yes_no(response) is False

    def test_pronoun_no_is_not_english_no(self):
        assert parse_yes_no("Nó có vẻ là có") is True

    def test_unaccented_tokens(self):
        assert parse_yes_no("co") is True
        assert parse_yes_no("khong") is False

    @pytest.mark.parametrize("response", ["unsure", "Xin lỗi, tôi chưa rõ.", ""])
    def test_unparseable(self, response):
        assert parse_yes_no(response) is None


class TestWantsSpecialist:
    """Full two-stage classification."""

    @pytest.mark.asyncio
    async def test_blank_message_short_circuits(self, intent_service, llm_service):
        assert await intent_service.wants_specialist("   ") is False
        llm_service.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_rule_match_skips_generator(self, intent_service, llm_service):
        # Act
        result = await intent_service.wants_specialist("tôi muốn gặp bác sĩ tim mạch")

        # Assert
        assert result is True
        llm_service.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_ambiguous_message_uses_generator(self, intent_service, llm_service):
        # Arrange
        llm_service.generate.return_value = "CÓ"

        # Act
        result = await intent_service.wants_specialist("dạo này tôi hay mệt")

        # Assert
        assert result is True
        llm_service.generate.assert_awaited_once()
        prompt = llm_service.generate.await_args.args[0]
        assert "dạo này tôi hay mệt" in prompt

    @pytest.mark.asyncio
    async def test_generator_negative_answer(self, intent_service, llm_service):
        llm_service.generate.return_value = "Không."
        assert await intent_service.wants_specialist("hôm nay trời đẹp quá") is False

    @pytest.mark.asyncio
    async def test_generator_failure_defaults_to_no_intent(
        self, intent_service, llm_service
    ):
        # Arrange
        llm_service.generate.side_effect = LLMTimeoutError("slow")

        # Act
        result = await intent_service.wants_specialist("dạo này tôi hay mệt")

        # Assert
        assert result is False

    @pytest.mark.asyncio
    async def test_unparseable_answer_defaults_to_no_intent(
        self, intent_service, llm_service
    ):
        llm_service.generate.return_value = "Xin lỗi, tôi chưa rõ."
        assert await intent_service.wants_specialist("dạo này tôi hay mệt") is False
