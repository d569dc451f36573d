"""
Application configuration using Pydantic Settings.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProviderSettings(BaseSettings):
    """Connection settings shared by every news provider."""

    key: str = Field(default="", description="Provider API key")
    base_url: str = Field(default="", description="Provider API root, without trailing slash")
    timeout: int = Field(default=30, ge=1, description="Request timeout (seconds)")
    page_size: int = Field(default=50, ge=1, le=200)
    language: str = Field(default="en")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class NewsAPISettings(ProviderSettings):
    """NewsAPI.org (https://newsapi.org/docs)."""

    model_config = SettingsConfigDict(
        env_prefix="NEWSAPI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(default="https://newsapi.org/v2")


class GuardianSettings(ProviderSettings):
    """The Guardian Open Platform (https://open-platform.theguardian.com)."""

    model_config = SettingsConfigDict(
        env_prefix="GUARDIAN_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(default="https://content.guardianapis.com")


class NYTimesSettings(ProviderSettings):
    """New York Times developer APIs (https://developer.nytimes.com)."""

    model_config = SettingsConfigDict(
        env_prefix="NYTIMES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = Field(default="https://api.nytimes.com/svc")


class Settings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "News Aggregator"
    app_version: str = "0.1.0"
    debug: bool = Field(default=False)
    environment: Literal["development", "staging", "production"] = "development"

    # Logging
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True, description="Render logs as JSON lines")

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./news_aggregator.db",
        description="Async database URL (SQLAlchemy format)",
    )

    # Ingestion
    fetch_page_size: int = Field(default=50, ge=1, le=200)
    insert_chunk_size: int = Field(default=500, ge=1)
    fetch_interval_minutes: int = Field(
        default=60,
        description="Interval between scheduled ingestion runs",
    )
    fetch_concurrently: bool = Field(
        default=False,
        description="Fetch providers in parallel instead of one after another",
    )
    http_retry_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts per outbound request on transport errors (1 = no retry)",
    )

    # Providers (nested, each reads its own env prefix)
    newsapi: NewsAPISettings = Field(default_factory=NewsAPISettings)
    guardian: GuardianSettings = Field(default_factory=GuardianSettings)
    nytimes: NYTimesSettings = Field(default_factory=NYTimesSettings)

    @field_validator("database_url")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// URLs; the engine needs asyncpg."""
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+asyncpg://", 1)
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level

    def provider(self, identifier: str) -> ProviderSettings:
        """Settings block for a provider identifier ("newsapi", "guardian", "nytimes")."""
        block = getattr(self, identifier, None)
        if not isinstance(block, ProviderSettings):
            raise KeyError(f"Unknown provider: {identifier}")
        return block


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
