"""
LLM service providing the text-generation capability.
Implements timeout, rate limiting, bounded attempts, and usage logging.
"""

import time
import asyncio
from typing import Protocol

from tenacity import (
    AsyncRetrying,
    stop_after_attempt,
    wait_exponential,
    retry_if_exception_type,
)
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import BaseMessage
from langchain_openai import ChatOpenAI
from langchain_google_genai import ChatGoogleGenerativeAI

from triage_handoff.utils.logger import get_logger

logger = get_logger(__name__)


class LLMTimeoutError(Exception):
    """Raised when LLM call exceeds timeout threshold."""


class LLMError(Exception):
    """Base exception for LLM-related errors."""


class TextGenerator(Protocol):
    """Stateless prompt-in, text-out capability. May raise on failure."""

    async def generate(self, prompt: str) -> str: ...


def create_llm(
    model_name: str, api_key: str, temperature: float = 0
) -> BaseChatModel:
    """
    Factory function to create chat model instances.

    Args:
        model_name: Model identifier (e.g., "gpt-4o", "gemini-2.5-flash")
        api_key: API key for the provider
        temperature: Sampling temperature (0 for deterministic)

    Returns:
        Configured chat model instance

    Raises:
        ValueError: If model provider is not supported
    """
    if "gemini" in model_name:
        return ChatGoogleGenerativeAI(
            google_api_key=api_key, model=model_name, temperature=temperature
        )
    elif "gpt" in model_name:
        return ChatOpenAI(
            api_key=api_key, model=model_name, temperature=temperature
        )
    else:
        raise ValueError(
            f"Unsupported model: {model_name}. "
            "Model name must contain 'gpt' or 'gemini'"
        )


def _content_text(response: BaseMessage) -> str:
    content = response.content
    if isinstance(content, str):
        return content
    # Some providers return a list of content blocks
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)


class LLMService:
    """
    Async wrapper around a chat model.
    The service keeps no conversation state; all context travels in the prompt.
    """

    def __init__(
        self,
        model: BaseChatModel,
        max_attempts: int = 1,
        timeout: float = 30,
        rate_limit: int = 3,
    ):
        """
        Initialize async LLM service.

        Args:
            model: Configured chat model instance
            max_attempts: Calls made per prompt before giving up (1 disables retrying)
            timeout: Timeout in seconds for each call
            rate_limit: Maximum concurrent LLM requests (Semaphore)
        """
        self.model = model
        self.model_name = getattr(model, "model_name", None) or getattr(
            model, "model", "unknown"
        )
        self.max_attempts = max_attempts
        self.timeout = timeout
        self.semaphore = asyncio.Semaphore(rate_limit)

    async def generate(self, prompt: str) -> str:
        """
        Returns the stripped text completion of a single prompt.

        Raises:
            LLMTimeoutError: If the last attempt exceeds the timeout
            LLMError: If the last attempt fails
        """
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=1, min=2, max=10),
            retry=retry_if_exception_type((LLMError, LLMTimeoutError)),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self._call(prompt, attempt.retry_state.attempt_number)
        return _content_text(response).strip()

    async def _call(self, prompt: str, attempt_number: int) -> BaseMessage:
        started = time.perf_counter()
        try:
            async with self.semaphore:
                response = await asyncio.wait_for(
                    self.model.ainvoke(prompt), timeout=self.timeout
                )
        except asyncio.TimeoutError as e:
            logger.warning(
                "generation_timeout",
                model=self.model_name,
                attempt=attempt_number,
                timeout=self.timeout,
            )
            raise LLMTimeoutError(
                f"{self.model_name} did not answer within {self.timeout}s"
            ) from e
        except Exception as e:
            logger.warning(
                "generation_failed",
                model=self.model_name,
                attempt=attempt_number,
                error=str(e),
            )
            raise LLMError(f"{self.model_name} call failed: {e}") from e

        usage = getattr(response, "usage_metadata", None) or {}
        logger.info(
            "generation_completed",
            model=self.model_name,
            attempt=attempt_number,
            elapsed=round(time.perf_counter() - started, 3),
            input_tokens=usage.get("input_tokens"),
            output_tokens=usage.get("output_tokens"),
        )
        return response
