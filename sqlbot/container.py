"""
Service Container

Builds and tears down the collaborators shared by the API server and the CLI:
database connector, catalog store, LLM provider, Telegram gateway and the two
pipelines.
"""

import logging
from dataclasses import dataclass

import asyncpg

from sqlbot.catalog.store import CatalogStore
from sqlbot.config import Settings
from sqlbot.connectors.postgres import PostgresConnector
from sqlbot.llm.base import BaseLLMProvider
from sqlbot.llm.factory import LLMProviderFactory
from sqlbot.messaging.telegram import TelegramGateway
from sqlbot.pipeline.indexer import CatalogIndexer
from sqlbot.pipeline.question import QuestionPipeline
from sqlbot.prompts.loader import PromptLoader

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Wired collaborators for one process."""

    connector: PostgresConnector
    llm: BaseLLMProvider
    pipeline: QuestionPipeline
    catalog: CatalogStore | None = None
    indexer: CatalogIndexer | None = None
    messenger: TelegramGateway | None = None

    async def close(self) -> None:
        """Release pools and HTTP clients."""
        if self.messenger is not None:
            await self.messenger.aclose()
        if self.catalog is not None:
            await self.catalog.close()
        aclose = getattr(self.llm, "aclose", None)
        if aclose is not None:
            await aclose()
        await self.connector.close()
        logger.info("Services closed")


async def build_services(settings: Settings, with_messenger: bool = True) -> Services:
    """
    Connect to the target database and wire the pipelines.

    The catalog is optional: when it cannot be initialized the question
    pipeline falls back to the default schema context and indexing is
    unavailable.

    Raises:
        ValueError: If DATABASE_URL is not configured
        ConnectionError: If the target database is unreachable
    """
    if not settings.database.url:
        raise ValueError("DATABASE_URL is not set")
    database_url = str(settings.database.url)
    llm = LLMProviderFactory.create_default_provider(settings.llm)

    connector = PostgresConnector.from_url(
        database_url,
        pool_size=settings.database.pool_size,
        timeout=settings.database.statement_timeout,
    )
    await connector.connect()

    catalog: CatalogStore | None = None
    messenger: TelegramGateway | None = None
    try:
        catalog = await _open_catalog(database_url)

        if with_messenger:
            if settings.telegram.bot_token:
                messenger = TelegramGateway(
                    bot_token=settings.telegram.bot_token,
                    api_base=settings.telegram.api_base,
                    timeout=settings.telegram.timeout,
                )
            else:
                logger.warning("TELEGRAM_BOT_TOKEN not set; replies will not be delivered.")

        prompts = PromptLoader()

        pipeline = QuestionPipeline(
            llm=llm,
            connector=connector,
            catalog=catalog,
            messenger=messenger,
            prompt_loader=prompts,
            max_tables=settings.ranker.max_tables,
        )
        indexer = None
        if catalog is not None:
            indexer = CatalogIndexer(
                llm=llm,
                connector=connector,
                catalog=catalog,
                prompt_loader=prompts,
                batch_size=settings.indexer.batch_size,
                request_delay_seconds=settings.indexer.request_delay_seconds,
                excluded_tables=settings.indexer.excluded_tables,
                schema_name=settings.database.schema_name,
            )
    except Exception as e:
        logger.error(f"Service wiring failed, releasing connections: {e}")
        if messenger is not None:
            await messenger.aclose()
        if catalog is not None:
            await catalog.close()
        await connector.close()
        raise

    return Services(
        connector=connector,
        llm=llm,
        pipeline=pipeline,
        catalog=catalog,
        indexer=indexer,
        messenger=messenger,
    )


async def _open_catalog(database_url: str) -> CatalogStore | None:
    """Initialize the catalog store, or return None when it is unreachable."""
    catalog = CatalogStore(database_url)
    try:
        await catalog.initialize()
    except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
        logger.warning(f"Catalog store unavailable: {e}")
        await catalog.close()
        return None
    except Exception:
        await catalog.close()
        raise
    return catalog
