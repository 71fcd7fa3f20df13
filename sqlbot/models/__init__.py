"""
SQLBot Models Module

Pydantic models for type-safe data validation throughout the application.

Usage:
    from sqlbot.models import TableDescriptor, ValidationVerdict
    from sqlbot.models.api import TelegramUpdate
"""

from sqlbot.models.catalog import TableDescriptor
from sqlbot.models.query import (
    IncomingQuestion,
    IndexOutcome,
    QuestionOutcome,
    ValidationVerdict,
)

__all__ = [
    "TableDescriptor",
    "IncomingQuestion",
    "IndexOutcome",
    "QuestionOutcome",
    "ValidationVerdict",
]
