"""
Article ingestion - turns provider output into stored articles.

For each provider call this resolves the Source, drops articles that cannot
be stored or are already known, resolves authors and categories in bulk
(one select, one insert of the missing, one re-select), and inserts the new
rows in bounded chunks inside a single transaction.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Iterable, Optional, Sequence

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from news_aggregator.core.text import author_key, slugify
from news_aggregator.models.domain import CanonicalArticle, IngestionResult
from news_aggregator.providers.base import NewsProvider, Params
from news_aggregator.repositories import (
    ArticleRepository,
    AuthorRepository,
    CategoryRepository,
    SourceRepository,
)
from news_aggregator.repositories.articles import DEFAULT_CHUNK_SIZE


class ArticleIngestionService:
    """
    Fetches articles from providers and persists the new ones.

    Every call runs in its own session; failures are logged and reported as
    zero stored, never raised.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        logger: Optional[structlog.stdlib.BoundLogger] = None,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ):
        self.session_factory = session_factory
        self.logger = logger or structlog.get_logger(__name__)
        self.chunk_size = chunk_size

    async def fetch_and_store(self, provider: NewsProvider, params: Params = None) -> int:
        """Fetch from ``provider`` and store new articles. Returns the number stored."""
        result = await self.ingest(provider, params)
        return result.stored

    async def ingest(self, provider: NewsProvider, params: Params = None) -> IngestionResult:
        """Like ``fetch_and_store`` but reports the full breakdown."""
        result = IngestionResult(provider=provider.identifier)
        start_time = time.perf_counter()

        try:
            async with self.session_factory() as session:
                await self._ingest(session, provider, params, result)
        except Exception as e:
            result.stored = 0
            result.errors.append(str(e))
            self.logger.error(
                "Failed to fetch and store articles",
                provider=provider.identifier,
                error=str(e),
                exc_info=True,
            )
        finally:
            result.duration_seconds = time.perf_counter() - start_time

        return result

    async def ingest_many(
        self,
        providers: Iterable[NewsProvider],
        params: Params = None,
        concurrent: bool = False,
    ) -> list[IngestionResult]:
        """
        Ingest from several providers.

        Providers run one after another unless ``concurrent`` is set; either
        way each keeps its own session and transaction.
        """
        providers = list(providers)

        if concurrent:
            results = await asyncio.gather(*(self.ingest(p, params) for p in providers))
            return list(results)

        results = []
        for provider in providers:
            results.append(await self.ingest(provider, params))
        return results

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    async def _ingest(
        self,
        session: AsyncSession,
        provider: NewsProvider,
        params: Params,
        result: IngestionResult,
    ) -> None:
        source = await SourceRepository(session, self.logger).first_or_create_by_identifier(
            provider.identifier,
            {"name": provider.name, "is_active": True},
        )

        if not source.is_active:
            self.logger.info("Source is inactive, skipping", provider=provider.identifier)
            return

        articles = await provider.fetch_articles(params)
        result.fetched = len(articles)

        if not articles:
            self.logger.info("No articles fetched", provider=provider.identifier)
            return

        candidates = self._storable(articles)
        result.skipped_invalid = sum(1 for a in articles if not a.url)

        article_repo = ArticleRepository(session, self.logger)
        existing = await article_repo.get_existing_urls(a.url for a in candidates)
        new_articles = [a for a in candidates if a.url not in existing]
        result.skipped_existing = len(articles) - result.skipped_invalid - len(new_articles)

        if not new_articles:
            self.logger.info("No new articles to store", provider=provider.identifier)
            return

        author_ids = await self._resolve_authors(session, new_articles)
        category_ids = await self._resolve_categories(session, new_articles)
        await session.commit()

        rows = self._build_rows(new_articles, source.id, author_ids, category_ids)
        result.stored = await article_repo.bulk_insert(rows, chunk_size=self.chunk_size)

        self.logger.info(
            "Articles stored",
            provider=provider.identifier,
            fetched=result.fetched,
            stored=result.stored,
            skipped_invalid=result.skipped_invalid,
            skipped_existing=result.skipped_existing,
        )

    @staticmethod
    def _storable(articles: Sequence[CanonicalArticle]) -> list[CanonicalArticle]:
        """Articles with a url, first occurrence of each url only."""
        seen: set[str] = set()
        storable = []
        for article in articles:
            if not article.url or article.url in seen:
                continue
            seen.add(article.url)
            storable.append(article)
        return storable

    async def _resolve_authors(
        self,
        session: AsyncSession,
        articles: Sequence[CanonicalArticle],
    ) -> dict[str, int]:
        """Map lower-cased author name to author id, creating missing authors."""
        names: dict[str, str] = {}
        for article in articles:
            name = (article.author_name or "").strip()
            if name:
                names.setdefault(author_key(name), name)

        if not names:
            return {}

        repo = AuthorRepository(session, self.logger)
        known = {a.name_key for a in await repo.get_by_names(names.values())}
        await repo.bulk_insert(
            [{"name": name} for key, name in names.items() if key not in known]
        )

        return {a.name_key: a.id for a in await repo.get_by_names(names.values())}

    async def _resolve_categories(
        self,
        session: AsyncSession,
        articles: Sequence[CanonicalArticle],
    ) -> dict[str, int]:
        """Map category slug to category id, creating missing categories."""
        labels: dict[str, str] = {}
        for article in articles:
            if not article.category:
                continue
            slug = slugify(article.category)
            if slug:
                labels.setdefault(slug, article.category.strip())

        if not labels:
            return {}

        repo = CategoryRepository(session, self.logger)
        known = {c.slug for c in await repo.get_by_slugs(labels)}
        await repo.bulk_insert(
            [{"slug": slug, "name": name} for slug, name in labels.items() if slug not in known]
        )

        return {c.slug: c.id for c in await repo.get_by_slugs(labels)}

    @staticmethod
    def _build_rows(
        articles: Sequence[CanonicalArticle],
        source_id: int,
        author_ids: dict[str, int],
        category_ids: dict[str, int],
    ) -> list[dict[str, Any]]:
        now = datetime.now(timezone.utc)
        rows = []

        for article in articles:
            author_name = (article.author_name or "").strip()
            category_slug = slugify(article.category) if article.category else ""

            rows.append({
                "title": article.title,
                "description": article.description,
                "content": article.content,
                "url": article.url,
                "image_url": article.image_url,
                "published_at": article.published_at,
                "source_id": source_id,
                "category_id": category_ids.get(category_slug),
                "author_id": author_ids.get(author_key(author_name)) if author_name else None,
                "created_at": now,
                "updated_at": now,
            })

        return rows
