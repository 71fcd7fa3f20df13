"""
Telegram result formatting.

Renders query results as Telegram HTML: a scalar line for single-value
results, otherwise a fixed-width table inside <pre>, trimmed to fit the
message size limit.
"""

import html
import json
from datetime import date, datetime
from typing import Any

MAX_MESSAGE_LENGTH = 4000  # Telegram limit is 4096
MAX_DISPLAY_ROWS = 20
CELL_WIDTH = 15
TRUNCATION_NOTICE = "\n\n<i>... (truncated)</i>"


def format_query_result(rows: list[dict[str, Any]], row_count: int) -> str:
    """Format result rows for a Telegram HTML message."""
    if not rows:
        return "📭 <b>No results found</b>"

    lines = [f"📊 <b>Results: {row_count} row{'' if row_count == 1 else 's'}</b>\n"]

    first = rows[0]
    if len(rows) == 1 and len(first) == 1:
        key, value = next(iter(first.items()))
        lines.append(f"<b>{html.escape(_fit(str(key), 64).rstrip())}:</b> ")
        prefix = "\n".join(lines)
        return prefix + _escape_within(format_value(value), MAX_MESSAGE_LENGTH - len(prefix))

    headers = list(first.keys())
    lines.append("<pre>")
    lines.append(" | ".join(html.escape(_fit(str(h), CELL_WIDTH)) for h in headers))
    lines.append("-" * min(len(headers) * 18, 60))

    for row in rows[:MAX_DISPLAY_ROWS]:
        cells = [_fit(format_value(row.get(h)), CELL_WIDTH) for h in headers]
        lines.append(html.escape(" | ".join(cells)))
    lines.append("</pre>")

    if len(rows) > MAX_DISPLAY_ROWS:
        lines.append(f"\n<i>... and {len(rows) - MAX_DISPLAY_ROWS} more rows</i>")

    return _limit_length("\n".join(lines))


def format_error(message: str) -> str:
    """Format a failure reply."""
    prefix = "❌ "
    return prefix + _escape_within(message, MAX_MESSAGE_LENGTH - len(prefix))


def format_value(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str, ensure_ascii=False)
    return str(value)


def _fit(text: str, width: int) -> str:
    text = text.replace("\n", " ")
    if len(text) > width:
        return text[: width - 2] + ".."
    return text.ljust(width)


def _limit_length(text: str) -> str:
    if len(text) <= MAX_MESSAGE_LENGTH:
        return text
    # Cut on a line boundary so no tag or entity is split
    cut = text[: MAX_MESSAGE_LENGTH - 50].rsplit("\n", 1)[0]
    if "<pre>" in cut and "</pre>" not in cut:
        cut += "\n</pre>"
    return cut + TRUNCATION_NOTICE


def _escape_within(text: str, budget: int) -> str:
    """HTML-escape ``text``, cutting it so the result plus notice fits ``budget``."""
    escaped = html.escape(text)
    if len(escaped) <= budget:
        return escaped
    cut = escaped[: budget - len(TRUNCATION_NOTICE)]
    # Drop a trailing partial entity such as "&am"
    amp = cut.rfind("&")
    if amp != -1 and ";" not in cut[amp:]:
        cut = cut[:amp]
    return cut + TRUNCATION_NOTICE
