"""
Catalog Indexer

Describes live tables that are not catalogued yet, a small batch per run, so
that the relevance ranker has keywords to match questions against.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable

from sqlbot.catalog.store import CATALOG_TABLE, CatalogStore
from sqlbot.connectors.base import BaseConnector, LiveTable
from sqlbot.llm.base import BaseLLMProvider, LLMError
from sqlbot.llm.parsing import parse_table_description
from sqlbot.models.catalog import TableDescriptor
from sqlbot.models.query import IndexOutcome
from sqlbot.prompts.loader import PromptLoader

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 5
DEFAULT_REQUEST_DELAY_SECONDS = 4.0
DEFAULT_EXCLUDED_TABLES = (CATALOG_TABLE, "bot_query_audit_log")
DESCRIPTION_CONTEXT = "Professional Data Analyst Training Mode."
DESCRIPTION_PROMPT = "table_description.md"


class CatalogIndexer:
    """Fill the catalog incrementally from the live schema."""

    def __init__(
        self,
        llm: BaseLLMProvider,
        connector: BaseConnector,
        catalog: CatalogStore,
        prompt_loader: PromptLoader | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        request_delay_seconds: float = DEFAULT_REQUEST_DELAY_SECONDS,
        excluded_tables: Iterable[str] = DEFAULT_EXCLUDED_TABLES,
        schema_name: str | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.llm = llm
        self.connector = connector
        self.catalog = catalog
        self.prompts = prompt_loader or PromptLoader()
        self.batch_size = batch_size
        self.request_delay_seconds = request_delay_seconds
        self.excluded_tables = set(excluded_tables)
        self.schema_name = schema_name
        self._sleep = sleep

    async def run(self) -> IndexOutcome:
        """
        Describe and save one batch of unindexed tables.

        Tables whose description fails are logged and skipped; they stay
        unindexed and are retried on the next run. Catalog write failures
        propagate.

        Returns:
            IndexOutcome with the number saved and the number still pending
        """
        logger.info("Checking catalog status...")
        live_tables = await self.connector.get_live_schema(self.schema_name)
        indexed = set(await self.catalog.list_indexed_table_names())

        to_train = [
            table
            for table in live_tables
            if table.table_name not in indexed and table.table_name not in self.excluded_tables
        ]
        if not to_train:
            logger.info("All tables are already indexed")
            return IndexOutcome(trained=0, remaining=0)

        batch = to_train[: self.batch_size]
        logger.info(
            f"Indexing batch of {len(batch)} tables, {len(to_train) - len(batch)} queued after",
            extra={"batch": [table.table_name for table in batch]},
        )

        descriptors: list[TableDescriptor] = []
        failed: list[str] = []
        for table in batch:
            try:
                descriptors.append(await self._describe(table))
            except LLMError as e:
                logger.error(f"Failed to describe table {table.table_name}: {e}")
                failed.append(table.table_name)

        trained = await self.catalog.upsert_descriptors(descriptors) if descriptors else 0

        outcome = IndexOutcome(trained=trained, remaining=len(to_train) - trained, failed=failed)
        logger.info(
            f"Indexed {outcome.trained} tables, {outcome.remaining} remaining",
            extra={"failed": failed},
        )
        return outcome

    async def _describe(self, table: LiveTable) -> TableDescriptor:
        relationships = [fk.render() for fk in table.foreign_keys]
        prompt = self.prompts.render(
            DESCRIPTION_PROMPT,
            table_name=table.table_name,
            columns=table.columns,
            comment=table.comment,
            relationships=relationships,
        )

        if self.request_delay_seconds > 0:
            await self._sleep(self.request_delay_seconds)

        logger.info(f"Describing table {table.table_name}")
        text = await self.llm.complete(context=DESCRIPTION_CONTEXT, question=prompt)
        return parse_table_description(
            text,
            table_name=table.table_name,
            columns=table.columns,
            relationships=relationships,
        )
