"""
Base LLM Provider

Abstract base class defining the interface for all LLM providers.
Ensures consistent API across Google, OpenAI and local model servers.
"""

import logging
from abc import ABC, abstractmethod

from sqlbot.llm.models import LLMRequest, LLMResponse
from sqlbot.llm.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Language-model call failed or returned unusable output."""

    pass


class BaseLLMProvider(ABC):
    """
    Abstract base class for LLM providers.

    All LLM providers must implement ``generate`` so the pipelines can treat
    them interchangeably.

    Attributes:
        provider_name: Unique identifier for this provider
        temperature: Default sampling temperature
        max_tokens: Default maximum tokens to generate
        timeout: Request timeout in seconds
        rate_limiter: Optional limiter awaited before every call
    """

    def __init__(
        self,
        provider_name: str,
        temperature: float = 0.1,
        max_tokens: int = 1024,
        timeout: int = 30,
        rate_limiter: RateLimiter | None = None,
    ):
        """
        Initialize base provider.

        Args:
            provider_name: Provider identifier (e.g., "google", "openai")
            temperature: Default temperature for responses
            max_tokens: Default max tokens for responses
            timeout: Request timeout in seconds
            rate_limiter: Optional rate limiter shared across calls
        """
        self.provider_name = provider_name
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.rate_limiter = rate_limiter

        logger.info(
            f"Initialized {provider_name} provider",
            extra={
                "provider": provider_name,
                "temperature": temperature,
                "max_tokens": max_tokens,
                "rate_limited": rate_limiter is not None,
            },
        )

    @abstractmethod
    async def generate(self, request: LLMRequest) -> LLMResponse:
        """
        Generate a completion from the LLM.

        Args:
            request: LLM request with messages and parameters

        Returns:
            LLMResponse with generated content and usage

        Raises:
            LLMError: On provider API errors or timeouts
        """
        pass  # pragma: no cover - abstract method

    async def complete(self, context: str, question: str, system_prompt: str | None = None) -> str:
        """
        Ask the model a question against a context block and return its text.

        This is the collaborator call used by the pipelines: ``{context,
        question} -> text``. The caller decides whether the text is SQL or a
        JSON payload.
        """
        response = await self.generate(
            LLMRequest.for_question(context, question, system_prompt=system_prompt)
        )
        if response.truncated:
            logger.warning(
                f"{self.provider_name} reply hit the token limit",
                extra={"provider": self.provider_name, "max_tokens": self.max_tokens},
            )
        return response.content

    async def _throttle(self) -> None:
        if self.rate_limiter is not None:
            await self.rate_limiter.acquire()

    def _apply_defaults(self, request: LLMRequest) -> LLMRequest:
        """Apply default values to request if not specified."""
        if request.temperature is None:
            request.temperature = self.temperature
        if request.max_tokens is None:
            request.max_tokens = self.max_tokens
        return request

    def _log_request(self, request: LLMRequest) -> None:
        """Log request details for debugging."""
        logger.debug(
            f"{self.provider_name} request",
            extra={
                "provider": self.provider_name,
                "message_count": len(request.messages),
                "temperature": request.temperature,
                "max_tokens": request.max_tokens,
            },
        )

    def _log_response(self, response: LLMResponse) -> None:
        """Log response details for debugging."""
        logger.debug(
            f"{self.provider_name} response",
            extra={
                "provider": self.provider_name,
                "model": response.model,
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
                "finish_reason": response.finish_reason,
            },
        )
