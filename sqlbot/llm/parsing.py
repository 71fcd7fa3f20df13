"""
Parsers for language-model output.

Model output is untrusted text. These helpers turn it into either a SQL
candidate (still to be validated) or a typed TableDescriptor, and never let
loosely-typed JSON leak past this boundary.
"""

import json
import re
from collections.abc import Iterable

from pydantic import BaseModel, ValidationError, field_validator

from sqlbot.llm.base import LLMError
from sqlbot.models.catalog import TableDescriptor

_FENCE_RE = re.compile(r"^```[A-Za-z]*\s*\n?(.*?)\n?```$", re.DOTALL)


class DescriptionParseError(LLMError):
    """Table description payload was not valid."""

    def __init__(self, table_name: str, reason: str):
        self.table_name = table_name
        self.reason = reason
        super().__init__(f"Invalid description for table '{table_name}': {reason}")


class _DescriptionPayload(BaseModel):
    description: str
    keywords: list[str] = []
    relationships: list[str] = []

    @field_validator("description")
    @classmethod
    def require_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("description is empty")
        return v

    @field_validator("keywords", "relationships", mode="before")
    @classmethod
    def null_as_empty(cls, v):
        return [] if v is None else v


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence (```sql, ```json, ```)."""
    stripped = (text or "").strip()
    match = _FENCE_RE.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def extract_sql(text: str) -> str:
    """Return the SQL candidate contained in a model reply."""
    return strip_code_fences(text)


def _dedupe(values: Iterable[str]) -> list[str]:
    seen: set[str] = set()
    result = []
    for value in values:
        cleaned = value.strip()
        key = cleaned.lower()
        if cleaned and key not in seen:
            seen.add(key)
            result.append(cleaned)
    return result


def parse_table_description(
    text: str,
    table_name: str,
    columns: list[str],
    relationships: list[str] | None = None,
) -> TableDescriptor:
    """
    Parse a model's JSON description of a table into a TableDescriptor.

    Expected payload: ``{"description": str, "keywords": [str, ...]}`` with an
    optional ``relationships`` list. Introspected relationships come first.

    Raises:
        DescriptionParseError: If the payload is not JSON, not an object, or
            has the wrong shape
    """
    raw = strip_code_fences(text)
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise DescriptionParseError(table_name, f"not valid JSON ({e.msg})") from e

    if not isinstance(data, dict):
        raise DescriptionParseError(table_name, "payload is not a JSON object")

    try:
        payload = _DescriptionPayload.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "payload"
        raise DescriptionParseError(table_name, f"{location}: {first['msg']}") from e

    return TableDescriptor(
        name=table_name,
        description=payload.description,
        keywords=_dedupe(payload.keywords),
        sample_columns=list(columns),
        relationships=_dedupe([*(relationships or []), *payload.relationships]),
    )
