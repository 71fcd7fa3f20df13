"""
Core Module

Pure, synchronous checks used by the pipelines:
    - SQLValidator / validate_sql: read-only safety gate for generated SQL
    - rank_tables: keyword-based relevance ranking of catalogued tables
"""

from sqlbot.core.ranker import DEFAULT_MAX_TABLES, rank_tables, render_context, score_table
from sqlbot.core.validator import FORBIDDEN_KEYWORDS, SQLValidator, validate_sql

__all__ = [
    "DEFAULT_MAX_TABLES",
    "FORBIDDEN_KEYWORDS",
    "SQLValidator",
    "rank_tables",
    "render_context",
    "score_table",
    "validate_sql",
]
