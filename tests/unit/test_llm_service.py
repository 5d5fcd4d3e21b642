"""
Unit tests for LLMService and the model factory.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, Mock, patch
from langchain_core.messages import AIMessage

from triage_handoff.services.llm_service import (
    LLMError,
    LLMService,
    LLMTimeoutError,
    create_llm,
)


@pytest.fixture
def model():
    model = Mock()
    model.model_name = "test-model"
    model.ainvoke = AsyncMock(return_value=AIMessage(content="  Xin chào  "))
    return model


class TestGenerate:
    @pytest.mark.asyncio
    async def test_returns_stripped_text(self, model):
        service = LLMService(model)

        assert await service.generate("prompt") == "Xin chào"
        model.ainvoke.assert_awaited_once_with("prompt")

    @pytest.mark.asyncio
    async def test_joins_content_blocks(self, model):
        model.ainvoke.return_value = AIMessage(
            content=[{"type": "text", "text": "Có"}, {"type": "text", "text": "."}]
        )

        assert await LLMService(model).generate("prompt") == "Có."

    @pytest.mark.asyncio
    async def test_provider_error_raises_llm_error(self, model):
        # Arrange
        model.ainvoke.side_effect = RuntimeError("quota exceeded")
        service = LLMService(model, max_attempts=1)

        # Act & Assert
        with pytest.raises(LLMError):
            await service.generate("prompt")
        assert model.ainvoke.await_count == 1

    @pytest.mark.asyncio
    async def test_slow_call_raises_timeout(self, model):
        # Arrange
        async def slow(_prompt):
            await asyncio.sleep(1)
            return AIMessage(content="late")

        model.ainvoke.side_effect = slow
        service = LLMService(model, timeout=0.05)

        # Act & Assert
        with pytest.raises(LLMTimeoutError):
            await service.generate("prompt")


class TestCreateLLM:
    @patch("triage_handoff.services.llm_service.ChatGoogleGenerativeAI")
    def test_gemini_model(self, mock_gemini):
        create_llm("gemini-2.5-flash", api_key="key")

        mock_gemini.assert_called_once_with(
            google_api_key="key", model="gemini-2.5-flash", temperature=0
        )

    @patch("triage_handoff.services.llm_service.ChatOpenAI")
    def test_openai_model(self, mock_openai):
        create_llm("gpt-4o-mini", api_key="key", temperature=0.3)

        mock_openai.assert_called_once_with(
            api_key="key", model="gpt-4o-mini", temperature=0.3
        )

    def test_unsupported_model(self):
        with pytest.raises(ValueError):
            create_llm("llama-3", api_key="key")
