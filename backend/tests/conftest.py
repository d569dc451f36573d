"""
Shared fixtures: a throwaway SQLite database, fake providers and mocked HTTP.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

import httpx
import pytest
from sqlalchemy import func, select

from news_aggregator.config import Settings
from news_aggregator.models.database import Base, Database
from news_aggregator.models.domain import CanonicalArticle
from news_aggregator.providers import HttpClient, NewsProvider, ProviderConfig

BASE_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


class FakeProvider(NewsProvider):
    """Provider returning canned articles, counting how often it was asked."""

    def __init__(
        self,
        articles: Optional[list[CanonicalArticle]] = None,
        identifier: str = "fake",
        name: str = "Fake News",
        error: Optional[Exception] = None,
    ):
        self.articles = articles or []
        self._identifier = identifier
        self._name = name
        self.error = error
        self.calls = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def identifier(self) -> str:
        return self._identifier

    async def fetch_articles(self, params=None) -> list[CanonicalArticle]:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return list(self.articles)


@pytest.fixture
def make_article() -> Callable[..., CanonicalArticle]:
    """Factory for canonical articles; each call gets a later publish time."""
    counter = {"n": 0}

    def factory(url: Optional[str] = None, **overrides) -> CanonicalArticle:
        counter["n"] += 1
        n = counter["n"]
        fields = {
            "title": f"Article {n}",
            "description": f"Description {n}",
            "content": f"Content {n}",
            "url": f"https://news.example.com/articles/{n}" if url is None else url,
            "author_name": "Jane Doe",
            "published_at": BASE_TIME + timedelta(minutes=n),
            "category": "World",
        }
        fields.update(overrides)
        return CanonicalArticle(**fields)

    return factory


@pytest.fixture
def provider_config() -> ProviderConfig:
    return ProviderConfig(api_key="test-key", base_url="https://api.example.com")


@pytest.fixture
def mock_http() -> Callable[[Callable[[httpx.Request], httpx.Response]], HttpClient]:
    """Build an HttpClient whose requests are answered by ``handler``."""
    def factory(handler, retry_attempts: int = 1) -> HttpClient:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return HttpClient(client=client, retry_attempts=retry_attempts)

    return factory


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, insert_chunk_size=500, fetch_page_size=50)


@pytest.fixture
async def database(tmp_path):
    db = Database(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await db.create_tables()
    yield db
    await db.dispose()


@pytest.fixture
def session_factory(database):
    return database.async_session


@pytest.fixture
async def session(database):
    async with database.async_session() as session:
        yield session


@pytest.fixture
def count_rows(database):
    """Count rows of a model in a fresh session."""

    async def counter(model: type[Base]) -> int:
        async with database.async_session() as session:
            return await session.scalar(select(func.count()).select_from(model))

    return counter
