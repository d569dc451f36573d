"""
Tests for settings and per-provider configuration.
"""

import pytest

from news_aggregator.config import GuardianSettings, NewsAPISettings, Settings
from news_aggregator.providers.config import ProviderConfig


class TestSettings:
    """Application settings."""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.fetch_page_size == 50
        assert settings.insert_chunk_size == 500
        assert settings.http_retry_attempts == 1
        assert settings.database_url.startswith("sqlite+aiosqlite://")

    def test_postgres_url_uses_asyncpg(self):
        settings = Settings(_env_file=None, database_url="postgresql://u:p@db:5432/news")
        assert settings.database_url == "postgresql+asyncpg://u:p@db:5432/news"

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level_rejected(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, log_level="chatty")

    def test_provider_env_prefix(self, monkeypatch):
        monkeypatch.setenv("GUARDIAN_KEY", "guardian-secret")
        monkeypatch.setenv("GUARDIAN_PAGE_SIZE", "20")
        block = GuardianSettings(_env_file=None)
        assert block.key == "guardian-secret"
        assert block.page_size == 20
        assert block.base_url == "https://content.guardianapis.com"

    def test_unknown_provider(self):
        with pytest.raises(KeyError):
            Settings(_env_file=None).provider("reuters")


class TestProviderConfig:
    """Immutable provider configuration."""

    def test_defaults(self):
        config = ProviderConfig(api_key="k", base_url="https://x")
        assert config.timeout == 30
        assert config.page_size == 50
        assert config.language == "en"

    def test_valid_requires_key_and_url(self):
        assert ProviderConfig(api_key="k", base_url="https://x").is_valid()
        assert not ProviderConfig(api_key="", base_url="https://x").is_valid()
        assert not ProviderConfig(api_key="k", base_url="").is_valid()

    def test_from_settings(self):
        settings = Settings(
            _env_file=None,
            newsapi=NewsAPISettings(_env_file=None, key="abc", base_url="https://newsapi.test/v2/", timeout=5),
        )
        config = ProviderConfig.from_settings("newsapi", settings)

        assert config.api_key == "abc"
        assert config.base_url == "https://newsapi.test/v2"
        assert config.timeout == 5
        assert config.is_valid()

    def test_missing_key_is_invalid(self, monkeypatch):
        monkeypatch.delenv("NYTIMES_KEY", raising=False)
        config = ProviderConfig.from_settings("nytimes", Settings(_env_file=None))
        assert not config.is_valid()

    def test_frozen(self):
        config = ProviderConfig(api_key="k", base_url="https://x")
        with pytest.raises(AttributeError):
            config.api_key = "other"
