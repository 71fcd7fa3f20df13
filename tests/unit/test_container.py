"""
Unit tests for service wiring.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import asyncpg
import pytest

from sqlbot.config import get_settings
from sqlbot.container import build_services


@pytest.fixture
def connector_cls():
    with patch("sqlbot.container.PostgresConnector") as cls:
        connector = MagicMock()
        connector.connect = AsyncMock()
        connector.close = AsyncMock()
        cls.from_url.return_value = connector
        yield cls


@pytest.fixture
def catalog_cls():
    with patch("sqlbot.container.CatalogStore") as cls:
        catalog = MagicMock()
        catalog.initialize = AsyncMock()
        catalog.close = AsyncMock()
        cls.return_value = catalog
        yield cls


@pytest.fixture
def llm():
    with patch("sqlbot.container.LLMProviderFactory") as factory:
        provider = MagicMock()
        provider.provider_name = "mock"
        provider.aclose = AsyncMock()
        factory.create_default_provider.return_value = provider
        yield provider


class TestBuildServices:
    async def test_requires_database_url(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        with pytest.raises(ValueError, match="DATABASE_URL"):
            await build_services(get_settings())

    async def test_wires_pipelines(self, mock_database_url, connector_cls, catalog_cls, llm, monkeypatch):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")

        services = await build_services(get_settings())

        connector_cls.from_url.assert_called_once_with(mock_database_url, pool_size=5, timeout=15)
        services.connector.connect.assert_awaited_once()
        assert services.catalog is catalog_cls.return_value
        assert services.indexer is not None
        assert services.indexer.batch_size == 5
        assert services.messenger is not None
        assert services.pipeline.catalog is services.catalog
        await services.close()

    async def test_catalog_failure_disables_indexer(
        self, mock_database_url, connector_cls, catalog_cls, llm
    ):
        catalog_cls.return_value.initialize.side_effect = OSError("connection refused")

        services = await build_services(get_settings(), with_messenger=False)

        assert services.catalog is None
        assert services.indexer is None
        assert services.pipeline.catalog is None

    async def test_catalog_permission_error(self, mock_database_url, connector_cls, catalog_cls, llm):
        catalog_cls.return_value.initialize.side_effect = asyncpg.InsufficientPrivilegeError(
            "permission denied"
        )

        services = await build_services(get_settings(), with_messenger=False)

        assert services.catalog is None

    async def test_no_bot_token_means_no_messenger(
        self, mock_database_url, connector_cls, catalog_cls, llm, monkeypatch
    ):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)

        services = await build_services(get_settings())

        assert services.messenger is None

    async def test_close_releases_everything(
        self, mock_database_url, connector_cls, catalog_cls, llm
    ):
        services = await build_services(get_settings(), with_messenger=False)

        await services.close()

        services.connector.close.assert_awaited_once()
        catalog_cls.return_value.close.assert_awaited_once()
        llm.aclose.assert_awaited_once()

    async def test_catalog_interface_error_degrades(
        self, mock_database_url, connector_cls, catalog_cls, llm
    ):
        catalog = catalog_cls.return_value
        catalog.initialize.side_effect = asyncpg.InterfaceError("pool is closed")

        services = await build_services(get_settings(), with_messenger=False)

        assert services.catalog is None
        catalog.close.assert_awaited_once()


class TestBuildServicesCleanup:
    """Connections opened before a wiring failure are released."""

    async def test_unexpected_catalog_error_closes_connector(
        self, mock_database_url, connector_cls, catalog_cls, llm
    ):
        catalog_cls.return_value.initialize.side_effect = RuntimeError("event loop closed")

        with pytest.raises(RuntimeError, match="event loop closed"):
            await build_services(get_settings(), with_messenger=False)

        connector_cls.from_url.return_value.close.assert_awaited_once()
        catalog_cls.return_value.close.assert_awaited_once()

    async def test_pipeline_failure_closes_everything(
        self, mock_database_url, connector_cls, catalog_cls, llm, monkeypatch
    ):
        monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")

        with patch("sqlbot.container.TelegramGateway") as gateway_cls, patch(
            "sqlbot.container.QuestionPipeline", side_effect=RuntimeError("bad prompt")
        ):
            gateway_cls.return_value.aclose = AsyncMock()
            with pytest.raises(RuntimeError, match="bad prompt"):
                await build_services(get_settings())

        connector_cls.from_url.return_value.close.assert_awaited_once()
        catalog_cls.return_value.close.assert_awaited_once()
        gateway_cls.return_value.aclose.assert_awaited_once()
