"""
Question and Outcome Models

DTOs passed between the HTTP/CLI surfaces and the pipelines.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ValidationErrorType = Literal["empty", "non_select", "forbidden_keyword"]
ErrorStage = Literal["question", "llm", "validation", "execution", "internal"]


class ValidationVerdict(BaseModel):
    """Result of checking a SQL candidate for read-only safety."""

    is_valid: bool = Field(..., description="Whether the SQL may be executed")
    error: str | None = Field(None, description="Human-readable failure reason")
    error_type: ValidationErrorType | None = Field(
        None, description="Failure class when invalid"
    )
    keyword: str | None = Field(
        None, description="Offending keyword for forbidden_keyword failures"
    )

    model_config = ConfigDict(frozen=True)


class IncomingQuestion(BaseModel):
    """A question received from a chat."""

    chat_id: int = Field(..., description="Telegram chat ID to reply to")
    question: str = Field(..., description="Raw question text")
    message_id: int | None = Field(None, description="Telegram message ID, if known")


class QuestionOutcome(BaseModel):
    """Result of processing one question."""

    success: bool = Field(..., description="Whether the question was answered")
    formatted_response: str = Field(..., description="Reply text sent to the chat (HTML)")
    sql: str | None = Field(None, description="Generated SQL, when available")
    rows: list[dict[str, Any]] = Field(default_factory=list, description="Result rows")
    row_count: int = Field(default=0, ge=0, description="Number of rows returned")
    error: str | None = Field(None, description="Failure reason")
    error_stage: ErrorStage | None = Field(None, description="Stage that failed")
    context_tables: list[str] = Field(
        default_factory=list,
        description="Catalogued tables used to build the prompt context",
    )


class IndexOutcome(BaseModel):
    """Result of one indexer batch."""

    trained: int = Field(..., ge=0, description="Tables described and saved in this run")
    remaining: int = Field(..., ge=0, description="Tables still waiting to be described")
    failed: list[str] = Field(
        default_factory=list,
        description="Tables whose description could not be produced",
    )
