"""
Unit tests for configuration module.

Tests settings loading, validation, nested configuration, and caching.
"""

import pytest
from pydantic import ValidationError

from sqlbot.config import (
    DatabaseSettings,
    IndexerSettings,
    LLMSettings,
    LoggingSettings,
    RankerSettings,
    Settings,
    TelegramSettings,
    clear_settings_cache,
    get_settings,
)


class TestLLMSettings:
    """Test LLM configuration."""

    def test_defaults(self):
        settings = LLMSettings()

        assert settings.default_provider == "google"
        assert settings.google_api_key == "test-google-key-1234567890"
        assert settings.temperature == 0.1
        assert settings.min_interval_seconds == 0.0

    def test_google_requires_key(self, monkeypatch):
        monkeypatch.delenv("LLM_GOOGLE_API_KEY", raising=False)

        with pytest.raises(ValidationError, match="LLM_GOOGLE_API_KEY"):
            LLMSettings()

    def test_openai_key_prefix(self, monkeypatch):
        monkeypatch.setenv("LLM_OPENAI_API_KEY", "invalid-key-1234567890abcdef")

        with pytest.raises(ValidationError, match="must start with 'sk-'"):
            LLMSettings()

    def test_openai_provider(self, monkeypatch):
        monkeypatch.setenv("LLM_DEFAULT_PROVIDER", "openai")
        monkeypatch.setenv("LLM_OPENAI_API_KEY", "sk-test-key-1234567890abcdefghij")

        settings = LLMSettings()

        assert settings.default_provider == "openai"

    def test_local_provider_needs_no_key(self, monkeypatch):
        monkeypatch.delenv("LLM_GOOGLE_API_KEY", raising=False)
        monkeypatch.setenv("LLM_DEFAULT_PROVIDER", "local")

        settings = LLMSettings()

        assert settings.local_base_url == "http://localhost:11434"

    def test_unknown_provider(self, monkeypatch):
        monkeypatch.setenv("LLM_DEFAULT_PROVIDER", "anthropic")

        with pytest.raises(ValidationError):
            LLMSettings()


class TestDatabaseSettings:
    """Test target database configuration."""

    def test_url_optional(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)

        assert DatabaseSettings().url is None

    def test_empty_url_is_missing(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "")

        assert DatabaseSettings().url is None

    def test_postgres_url(self, mock_database_url):
        settings = DatabaseSettings()

        assert str(settings.url) == mock_database_url
        assert settings.pool_size == 5
        assert settings.statement_timeout == 15
        assert settings.schema_name == "public"

    def test_rejects_other_schemes(self, monkeypatch):
        monkeypatch.setenv("DATABASE_URL", "mysql://root@localhost/app")

        with pytest.raises(ValidationError, match="postgresql"):
            DatabaseSettings()

    def test_pool_size_bounds(self, monkeypatch):
        monkeypatch.setenv("DATABASE_POOL_SIZE", "50")

        with pytest.raises(ValidationError):
            DatabaseSettings()


class TestTelegramAndIndexerSettings:
    def test_telegram_defaults(self, monkeypatch):
        monkeypatch.delenv("TELEGRAM_BOT_TOKEN", raising=False)
        monkeypatch.delenv("TELEGRAM_WEBHOOK_SECRET", raising=False)

        settings = TelegramSettings()

        assert settings.bot_token is None
        assert settings.webhook_secret is None
        assert settings.api_base == "https://api.telegram.org"

    def test_indexer_defaults(self):
        settings = IndexerSettings()

        assert settings.batch_size == 5
        assert settings.request_delay_seconds == 4.0
        assert "bot_table_metadata" in settings.excluded_tables

    def test_indexer_excluded_tables_from_json(self, monkeypatch):
        monkeypatch.setenv("INDEXER_EXCLUDED_TABLES", '["audit", "sessions"]')

        assert IndexerSettings().excluded_tables == ["audit", "sessions"]

    def test_ranker_limit_capped(self, monkeypatch):
        monkeypatch.setenv("RANKER_MAX_TABLES", "10")

        with pytest.raises(ValidationError):
            RankerSettings()


class TestLoggingSettings:
    def test_invalid_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "VERBOSE")

        with pytest.raises(ValidationError):
            LoggingSettings()

    def test_log_file_parent_created(self, tmp_path):
        log_file = tmp_path / "logs" / "sqlbot.log"

        LoggingSettings(file=log_file).configure()

        assert log_file.parent.is_dir()


class TestSettings:
    """Test top-level settings and caching."""

    def test_nested_settings(self, mock_database_url):
        settings = Settings()

        assert settings.app_name == "SQLBot"
        assert settings.is_development is True
        assert settings.is_production is False
        assert settings.api_port == 8000
        assert str(settings.database.url) == mock_database_url

    def test_production_environment(self, monkeypatch):
        monkeypatch.setenv("ENVIRONMENT", "production")

        assert Settings().is_production is True

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_clear_settings_cache(self, monkeypatch):
        first = get_settings()
        monkeypatch.setenv("APP_NAME", "OtherBot")
        clear_settings_cache()

        second = get_settings()

        assert second is not first
        assert second.app_name == "OtherBot"
