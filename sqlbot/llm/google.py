"""
Google LLM Provider

Implementation of BaseLLMProvider for Google's Gemini models.
"""

import logging
import warnings
from typing import Any

with warnings.catch_warnings():
    warnings.simplefilter("ignore", FutureWarning)
    import google.generativeai as genai

from sqlbot.llm.base import BaseLLMProvider, LLMError
from sqlbot.llm.models import (
    LLMRequest,
    LLMResponse,
    LLMUsage,
)
from sqlbot.llm.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


class GoogleProvider(BaseLLMProvider):
    """
    Google (Gemini) LLM provider implementation.

    Uses the google-generativeai Python SDK. Gemini has no separate system
    role in this API, so messages are flattened into one prompt.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-flash-latest",
        temperature: float = 0.1,
        max_tokens: int = 1024,
        timeout: int = 30,
        rate_limiter: RateLimiter | None = None,
    ):
        """Initialize Google provider."""
        super().__init__(
            provider_name="google",
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            rate_limiter=rate_limiter,
        )

        self.model = model
        self.api_key = api_key
        self.genai = genai
        genai.configure(api_key=api_key)

        logger.info(f"Google provider initialized with model: {model}", extra={"model": model})

    async def generate(self, request: LLMRequest) -> LLMResponse:
        """Generate completion using Google Gemini API."""
        request = self._apply_defaults(request)
        self._log_request(request)
        await self._throttle()

        model_name = self.model
        client = self.genai.GenerativeModel(model_name)
        prompt = self._build_prompt(request)

        try:
            response = await client.generate_content_async(
                prompt,
                generation_config=self.genai.types.GenerationConfig(
                    temperature=request.temperature,
                    max_output_tokens=request.max_tokens,
                ),
                request_options={"timeout": self.timeout},
            )
        except Exception as e:
            logger.error(f"Google API error: {e}")
            raise LLMError(f"Google API error: {e}") from e

        response_text = self._extract_response_text(response)
        finish_reason = self._extract_finish_reason(response)

        # Gemini does not always report usage; estimate
        prompt_tokens = self.count_tokens(prompt)
        completion_tokens = self.count_tokens(response_text)

        llm_response = LLMResponse(
            content=response_text,
            model=model_name,
            usage=LLMUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
            ),
            finish_reason=finish_reason,
            provider="google",
        )

        self._log_response(llm_response)
        return llm_response

    def count_tokens(self, text: str) -> int:
        """Count tokens for Google models."""
        # Rough approximation
        return len(text) // 4

    @staticmethod
    def _build_prompt(request: LLMRequest) -> str:
        # Gemini takes one prompt; system rules lead, then the user turn
        return "\n\n".join(msg.content for msg in request.messages)

    def _extract_response_text(self, response: Any) -> str:
        try:
            text = getattr(response, "text", "")
        except ValueError:
            # Raised by the SDK when the candidate was blocked and has no parts
            return ""
        if isinstance(text, str):
            return text
        if text is None:
            return ""
        return str(text)

    def _extract_raw_finish_reason(self, response: Any) -> str:
        candidates = getattr(response, "candidates", None)
        if not candidates:
            return ""
        reason = getattr(candidates[0], "finish_reason", "")
        return str(reason or "")

    def _extract_finish_reason(self, response: Any) -> str:
        raw_reason = self._extract_raw_finish_reason(response).lower()
        if any(token in raw_reason for token in ("max_tokens", "length")):
            return "length"
        if any(token in raw_reason for token in ("safety", "blocked", "recitation")):
            return "content_filter"
        if "error" in raw_reason:
            return "error"
        return "stop"
