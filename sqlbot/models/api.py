"""
API Request/Response Models

Pydantic models for FastAPI endpoints, including the subset of the Telegram
Update object the webhook consumes.
"""

from pydantic import BaseModel, ConfigDict, Field

from sqlbot.models.query import QuestionOutcome


class TelegramChat(BaseModel):
    """Chat that a message belongs to."""

    id: int = Field(..., description="Chat ID")

    model_config = ConfigDict(extra="ignore")


class TelegramMessage(BaseModel):
    """Incoming Telegram message."""

    message_id: int = Field(..., description="Message ID")
    chat: TelegramChat = Field(..., description="Originating chat")
    text: str | None = Field(None, description="Message text (absent for media)")

    model_config = ConfigDict(extra="ignore")


class TelegramUpdate(BaseModel):
    """Telegram webhook update."""

    update_id: int | None = Field(None, description="Update ID")
    message: TelegramMessage | None = Field(None, description="New incoming message")

    model_config = ConfigDict(extra="ignore")


class WebhookResponse(BaseModel):
    """Response returned to Telegram."""

    ok: bool = Field(..., description="Whether the update was handled")
    result: QuestionOutcome | None = Field(None, description="Pipeline outcome, if any")


class HealthResponse(BaseModel):
    """Response model for health check endpoints."""

    status: str = Field(..., description="Service status: 'healthy' or 'unhealthy'")
    version: str = Field(..., description="API version")
    timestamp: str = Field(..., description="Current timestamp (ISO 8601)")


class ReadinessResponse(BaseModel):
    """Response model for readiness check endpoint."""

    status: str = Field(..., description="Readiness status: 'ready' or 'not_ready'")
    version: str = Field(..., description="API version")
    timestamp: str = Field(..., description="Current timestamp (ISO 8601)")
    checks: dict[str, bool] = Field(
        ..., description="Individual readiness checks (database, catalog, llm, telegram)"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "status": "ready",
                "version": "0.1.0",
                "timestamp": "2026-01-16T12:00:00Z",
                "checks": {
                    "database": True,
                    "catalog": True,
                    "pipeline": True,
                },
            }
        }
    }
