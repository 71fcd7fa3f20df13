"""
LLM Provider Module

Provider abstraction for Google Gemini, OpenAI and local model servers.

Usage:
    from sqlbot.llm import LLMProviderFactory
    from sqlbot.config import get_settings

    provider = LLMProviderFactory.create_default_provider(get_settings().llm)
    text = await provider.complete(context="TABLE users (id, email)", question="How many users?")
"""

from sqlbot.llm.base import BaseLLMProvider, LLMError
from sqlbot.llm.factory import LLMProviderFactory
from sqlbot.llm.google import GoogleProvider
from sqlbot.llm.local import LocalProvider
from sqlbot.llm.models import LLMMessage, LLMRequest, LLMResponse, LLMUsage
from sqlbot.llm.openai import OpenAIProvider
from sqlbot.llm.parsing import (
    DescriptionParseError,
    extract_sql,
    parse_table_description,
    strip_code_fences,
)
from sqlbot.llm.rate_limit import RateLimiter

__all__ = [
    "BaseLLMProvider",
    "LLMError",
    "LLMMessage",
    "LLMRequest",
    "LLMResponse",
    "LLMUsage",
    "LLMProviderFactory",
    "GoogleProvider",
    "OpenAIProvider",
    "LocalProvider",
    "RateLimiter",
    "DescriptionParseError",
    "extract_sql",
    "parse_table_description",
    "strip_code_fences",
]
