"""
LLM Request and Response Models

Provider-agnostic pydantic models for one question-answering call: a system
rule block, a user turn carrying the schema context and the question, and the
model's text reply.
"""

from typing import Literal

from pydantic import BaseModel, Field

FinishReason = Literal["stop", "length", "content_filter", "error"]


class LLMMessage(BaseModel):
    """Single message sent to the model."""

    role: Literal["system", "user"] = Field(..., description="Message role")
    content: str = Field(..., min_length=1, description="Message content")


class LLMRequest(BaseModel):
    """Request to an LLM provider."""

    messages: list[LLMMessage] = Field(..., min_length=1, description="Messages in order")
    temperature: float | None = Field(
        None, ge=0.0, le=2.0, description="Sampling temperature (None = provider default)"
    )
    max_tokens: int | None = Field(
        None, gt=0, description="Maximum tokens to generate (None = provider default)"
    )

    @classmethod
    def for_question(
        cls, context: str, question: str, system_prompt: str | None = None
    ) -> "LLMRequest":
        """
        Build the request for a ``{context, question} -> text`` call.

        The context block (schema summary or analyst persona) precedes the
        question in a single user turn; the system prompt, if any, comes first.
        """
        messages = []
        if system_prompt:
            messages.append(LLMMessage(role="system", content=system_prompt))
        user_content = f"{context}\n\n{question}" if context else question
        messages.append(LLMMessage(role="user", content=user_content))
        return cls(messages=messages)


class LLMUsage(BaseModel):
    """Token counts for one call (estimated where the provider reports none)."""

    prompt_tokens: int = Field(default=0, ge=0, description="Tokens in the prompt")
    completion_tokens: int = Field(default=0, ge=0, description="Tokens in the reply")

    @property
    def total_tokens(self) -> int:
        return self.prompt_tokens + self.completion_tokens


class LLMResponse(BaseModel):
    """Text reply from an LLM provider."""

    content: str = Field(..., description="Reply text (SQL or a JSON payload)")
    model: str = Field(..., description="Model that produced the reply")
    usage: LLMUsage = Field(default_factory=LLMUsage, description="Token usage")
    finish_reason: FinishReason = Field(..., description="Why generation stopped")
    provider: str = Field(..., description="Provider that handled the call")

    @property
    def truncated(self) -> bool:
        """True when the reply was cut off by the token limit."""
        return self.finish_reason == "length"
