"""Reply formatting."""

from sqlbot.formatting.telegram import format_error, format_query_result, format_value

__all__ = ["format_error", "format_query_result", "format_value"]
