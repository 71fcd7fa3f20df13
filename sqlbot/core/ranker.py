"""
Keyword-based relevance ranking of catalogued tables.

A cheap pre-filter that keeps the SQL prompt small: each table descriptor is
scored against the question by substring containment and the best few are
returned. This is approximate retrieval, not search. Keyword containment is
loose ("team" also matches "steam").

Scoring:
    +2 for each keyword entry contained in the lower-cased question
    +5 if the lower-cased table name is contained in the question

Zero-score tables are dropped; the rest are stable-sorted by descending
score and capped. An empty result means "use the default schema context".
"""

from collections.abc import Sequence
from dataclasses import dataclass

from sqlbot.models.catalog import TableDescriptor

DEFAULT_MAX_TABLES = 5
KEYWORD_WEIGHT = 2
TABLE_NAME_WEIGHT = 5


@dataclass(frozen=True)
class ScoredTable:
    descriptor: TableDescriptor
    score: int


def score_table(question_lower: str, descriptor: TableDescriptor) -> int:
    """Score one descriptor against an already lower-cased question."""
    score = 0
    for keyword in descriptor.keywords or ():
        needle = keyword.lower()
        if needle and needle in question_lower:
            score += KEYWORD_WEIGHT
    if descriptor.name.lower() in question_lower:
        score += TABLE_NAME_WEIGHT
    return score


def rank_tables(
    question: str,
    catalog: Sequence[TableDescriptor],
    limit: int = DEFAULT_MAX_TABLES,
) -> list[TableDescriptor]:
    """
    Select the catalogued tables most relevant to ``question``.

    Args:
        question: Natural-language question
        catalog: Table descriptors in catalog order
        limit: Maximum number of descriptors returned

    Returns:
        Descriptors ordered most-to-least relevant (ties keep catalog order),
        at most ``limit`` long (never more than DEFAULT_MAX_TABLES), each
        table at most once
    """
    limit = min(limit, DEFAULT_MAX_TABLES)
    if limit <= 0 or not catalog:
        return []

    question_lower = (question or "").lower()
    seen: set[str] = set()
    scored: list[ScoredTable] = []
    for descriptor in catalog:
        if descriptor.name in seen:
            continue
        seen.add(descriptor.name)
        score = score_table(question_lower, descriptor)
        if score > 0:
            scored.append(ScoredTable(descriptor=descriptor, score=score))

    # sorted() is stable
    scored = sorted(scored, key=lambda item: item.score, reverse=True)
    return [item.descriptor for item in scored[:limit]]


def render_context(descriptors: Sequence[TableDescriptor]) -> str:
    """Render ranked descriptors as the schema context block for the SQL prompt."""
    blocks = []
    for descriptor in descriptors:
        lines = [f"-- {descriptor.description}" if descriptor.description else f"-- {descriptor.name}"]
        lines.append(f"TABLE {descriptor.name} ({', '.join(descriptor.sample_columns)})")
        for relationship in descriptor.relationships:
            lines.append(f"-- FK: {relationship}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)
