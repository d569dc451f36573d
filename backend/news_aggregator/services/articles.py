"""
Article queries: search, lookup and the personalized feed.
"""
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from news_aggregator.exceptions import RepositoryError, ServiceError
from news_aggregator.models.domain import ArticleFilters, ArticleOut, ArticlePage
from news_aggregator.repositories import ArticleRepository, UserPreferenceRepository

NO_PREFERENCES_MESSAGE = "No preferences set. Please set your preferences first."


class ArticleService:
    """Read side of the article catalog."""

    def __init__(
        self,
        session: AsyncSession,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        self.logger = logger or structlog.get_logger(__name__)
        self.articles = ArticleRepository(session, self.logger)
        self.preferences = UserPreferenceRepository(session, self.logger)

    async def search(self, filters: Optional[ArticleFilters] = None) -> ArticlePage:
        filters = filters or ArticleFilters()
        try:
            return await self.articles.search(filters)
        except RepositoryError as e:
            self.logger.error(
                "Article search failed",
                filters=filters.model_dump(exclude_defaults=True),
                error=str(e),
            )
            raise

    async def get_by_id(self, article_id: int) -> ArticleOut:
        try:
            article = await self.articles.find_or_fail(article_id)
        except RepositoryError as e:
            if e.status_code == 404:
                raise ServiceError.not_found("Article not found.") from e
            raise

        return ArticleOut.model_validate(article)

    async def personalized_feed(self, user_id: int, page: int = 1, per_page: int = 15) -> ArticlePage:
        """
        Search restricted to the user's preferred sources, categories and authors.

        Empty preference lists do not restrict. Raises ``ServiceError`` (404)
        when the user has no preferences stored at all.
        """
        try:
            prefs = await self.preferences.find_by_user_id(user_id)
        except RepositoryError as e:
            self.logger.error("Failed to get user preferences", user_id=user_id, error=str(e))
            raise ServiceError.operation_failed("retrieve user preferences") from e

        if prefs is None:
            raise ServiceError.not_found(NO_PREFERENCES_MESSAGE)

        filters = ArticleFilters(
            sources=prefs.preferred_sources or [],
            categories=prefs.preferred_categories or [],
            authors=prefs.preferred_authors or [],
            page=page,
            per_page=per_page,
        )
        return await self.articles.search(filters)
