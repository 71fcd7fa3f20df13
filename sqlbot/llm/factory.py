"""
LLM Provider Factory

Creates LLM provider instances from configuration.
"""

import logging
from typing import Literal

from sqlbot.config import LLMSettings
from sqlbot.llm.base import BaseLLMProvider
from sqlbot.llm.google import GoogleProvider
from sqlbot.llm.local import LocalProvider
from sqlbot.llm.openai import OpenAIProvider
from sqlbot.llm.rate_limit import RateLimiter

logger = logging.getLogger(__name__)


class LLMProviderFactory:
    """
    Factory for creating LLM provider instances.

    Handles provider selection and rate limiter wiring.
    """

    PROVIDERS = {
        "google": GoogleProvider,
        "openai": OpenAIProvider,
        "local": LocalProvider,
    }

    @staticmethod
    def create_provider(
        provider_type: Literal["google", "openai", "local"],
        config: LLMSettings,
        rate_limiter: RateLimiter | None = None,
    ) -> BaseLLMProvider:
        """
        Create an LLM provider instance.

        Args:
            provider_type: Type of provider to create
            config: LLM configuration settings
            rate_limiter: Optional limiter passed to the provider

        Returns:
            Configured provider instance

        Raises:
            ValueError: If provider type is unknown or required config is missing
        """
        if provider_type not in LLMProviderFactory.PROVIDERS:
            raise ValueError(
                f"Unknown provider type: {provider_type}. "
                f"Available providers: {list(LLMProviderFactory.PROVIDERS.keys())}"
            )

        logger.info(f"Creating {provider_type} provider", extra={"provider": provider_type})

        if provider_type == "google":
            if not config.google_api_key:
                raise ValueError("Google API key is required but not configured")
            return GoogleProvider(
                api_key=config.google_api_key,
                model=config.google_model,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout=config.timeout,
                rate_limiter=rate_limiter,
            )
        if provider_type == "openai":
            if not config.openai_api_key:
                raise ValueError("OpenAI API key is required but not configured")
            return OpenAIProvider(
                api_key=config.openai_api_key,
                model=config.openai_model,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                timeout=config.timeout,
                rate_limiter=rate_limiter,
            )
        return LocalProvider(
            base_url=config.local_base_url,
            model=config.local_model,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.timeout,
            rate_limiter=rate_limiter,
        )

    @staticmethod
    def create_default_provider(config: LLMSettings) -> BaseLLMProvider:
        """
        Create provider using default_provider from config.

        A RateLimiter is attached when ``min_interval_seconds`` is positive.
        """
        rate_limiter = None
        if config.min_interval_seconds > 0:
            rate_limiter = RateLimiter(config.min_interval_seconds)
        return LLMProviderFactory.create_provider(
            config.default_provider,
            config,
            rate_limiter=rate_limiter,
        )
