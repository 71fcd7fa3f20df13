"""
SQL safety validation.

Rule-based, read-only gate for SQL produced by the language model:
- Rejects empty input
- Requires a SELECT or WITH prefix
- Rejects mutating / DDL / DCL keywords matched as whole words

This is not a SQL parser. It is the last line of defense in the application
and is paired with a read-only transaction on the database side.
"""

import re

from sqlbot.models.query import ValidationVerdict

FORBIDDEN_KEYWORDS: tuple[str, ...] = (
    "INSERT",
    "UPDATE",
    "DELETE",
    "DROP",
    "TRUNCATE",
    "ALTER",
    "CREATE",
    "GRANT",
    "REVOKE",
    "EXECUTE",
    "EXEC",
)

ALLOWED_PREFIXES: tuple[str, ...] = ("SELECT", "WITH")

# \b treats "_" as a word character, so update_log never matches UPDATE.
_FORBIDDEN_PATTERNS = tuple(
    (keyword, re.compile(rf"\b{keyword}\b", re.IGNORECASE)) for keyword in FORBIDDEN_KEYWORDS
)


class SQLValidator:
    """
    Read-only SQL validator.

    Rules are applied in order and the first failure wins:
    1. Empty or whitespace-only input
    2. Prefix must be SELECT or WITH (upper-cased, trimmed)
    3. No forbidden keyword anywhere in the original text

    Stateless; safe to share between concurrent requests.
    """

    @staticmethod
    def validate(sql: str | None) -> ValidationVerdict:
        """
        Validate that ``sql`` is a read-only statement.

        Args:
            sql: Untrusted SQL candidate

        Returns:
            ValidationVerdict describing success or the first failed rule
        """
        if not sql or not sql.strip():
            return ValidationVerdict(
                is_valid=False,
                error="SQL cannot be empty",
                error_type="empty",
            )

        upper_sql = sql.upper().strip()
        if not upper_sql.startswith(ALLOWED_PREFIXES):
            return ValidationVerdict(
                is_valid=False,
                error="Only SELECT queries are allowed",
                error_type="non_select",
            )

        for keyword, pattern in _FORBIDDEN_PATTERNS:
            if pattern.search(sql):
                return ValidationVerdict(
                    is_valid=False,
                    error=f"Forbidden keyword: {keyword}",
                    error_type="forbidden_keyword",
                    keyword=keyword,
                )

        return ValidationVerdict(is_valid=True)


def validate_sql(sql: str | None) -> ValidationVerdict:
    """Module-level shortcut for :meth:`SQLValidator.validate`."""
    return SQLValidator.validate(sql)
