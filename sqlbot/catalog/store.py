"""Persistence for catalogued table descriptors."""

from __future__ import annotations

import asyncpg

from sqlbot.config import get_settings
from sqlbot.models.catalog import TableDescriptor

CATALOG_TABLE = "bot_table_metadata"

# Raised by the pool when the server or the connection fails
_DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

_CREATE_CATALOG_TABLE = f"""
CREATE TABLE IF NOT EXISTS {CATALOG_TABLE} (
    table_name TEXT PRIMARY KEY,
    keywords TEXT[] NOT NULL DEFAULT '{{}}',
    description TEXT NOT NULL DEFAULT '',
    sample_columns TEXT[] NOT NULL DEFAULT '{{}}',
    relationships TEXT[] NOT NULL DEFAULT '{{}}',
    updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
);
"""

_UPSERT_DESCRIPTOR = f"""
INSERT INTO {CATALOG_TABLE} (
    table_name, keywords, description, sample_columns, relationships, updated_at
) VALUES ($1, $2, $3, $4, $5, now())
ON CONFLICT (table_name) DO UPDATE
SET keywords = EXCLUDED.keywords,
    description = EXCLUDED.description,
    sample_columns = EXCLUDED.sample_columns,
    relationships = EXCLUDED.relationships,
    updated_at = EXCLUDED.updated_at
"""


class CatalogStoreError(Exception):
    """Catalog read or write failed."""

    pass


class CatalogStore:
    """Persist table descriptors in the ``bot_table_metadata`` table."""

    def __init__(self, database_url: str | None = None) -> None:
        if database_url is None:
            database_url = str(get_settings().database.url)
        self._database_url = database_url
        self._pool: asyncpg.Pool | None = None

    async def initialize(self) -> None:
        if self._pool is None:
            dsn = self._normalize_postgres_url(self._database_url)
            self._pool = await asyncpg.create_pool(dsn=dsn, min_size=1, max_size=3)
        await self._pool.execute(_CREATE_CATALOG_TABLE)

    async def close(self) -> None:
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def list_indexed_table_names(self) -> list[str]:
        self._ensure_pool()
        try:
            rows = await self._pool.fetch(
                f"SELECT table_name FROM {CATALOG_TABLE} ORDER BY table_name"
            )
        except _DB_ERRORS as e:
            raise CatalogStoreError(f"Failed to list indexed tables: {e}") from e
        return [row["table_name"] for row in rows]

    async def upsert_descriptors(self, descriptors: list[TableDescriptor]) -> int:
        """Insert or update descriptors keyed by table name. Returns the count written."""
        self._ensure_pool()
        if not descriptors:
            return 0
        records = [
            (
                descriptor.name,
                descriptor.keywords,
                descriptor.description,
                descriptor.sample_columns,
                descriptor.relationships,
            )
            for descriptor in descriptors
        ]
        try:
            await self._pool.executemany(_UPSERT_DESCRIPTOR, records)
        except _DB_ERRORS as e:
            raise CatalogStoreError(f"Failed to save metadata: {e}") from e
        return len(records)

    async def list_descriptors(self) -> list[TableDescriptor]:
        """Return every catalogued descriptor in table-name order."""
        self._ensure_pool()
        try:
            rows = await self._pool.fetch(
                f"""
                SELECT table_name, keywords, description, sample_columns, relationships
                FROM {CATALOG_TABLE}
                ORDER BY table_name
                """
            )
        except _DB_ERRORS as e:
            raise CatalogStoreError(f"Failed to read catalog: {e}") from e
        return [self._row_to_descriptor(row) for row in rows]

    @staticmethod
    def _row_to_descriptor(row: asyncpg.Record) -> TableDescriptor:
        return TableDescriptor(
            name=row["table_name"],
            description=row["description"] or "",
            keywords=row["keywords"],
            sample_columns=row["sample_columns"],
            relationships=row["relationships"],
        )

    @property
    def is_initialized(self) -> bool:
        return self._pool is not None

    def _ensure_pool(self) -> None:
        if self._pool is None:
            raise RuntimeError("CatalogStore is not initialized")

    @staticmethod
    def _normalize_postgres_url(database_url: str) -> str:
        if database_url.startswith("postgresql+asyncpg://"):
            return database_url.replace("postgresql+asyncpg://", "postgresql://", 1)
        return database_url
