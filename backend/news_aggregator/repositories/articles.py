"""
Article persistence: existence checks, chunked bulk insert, search.
"""
from typing import Any, Iterable, Sequence

from sqlalchemy import ColumnElement, func, insert, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from news_aggregator.exceptions import RepositoryError
from news_aggregator.models.database import DBArticle
from news_aggregator.models.domain import ArticleFilters, ArticleOut, ArticlePage
from news_aggregator.repositories.base import BaseRepository, chunked

# Rows per INSERT statement; all chunks of one call share a transaction
DEFAULT_CHUNK_SIZE = 500


class ArticleRepository(BaseRepository):
    """Repository for the ``articles`` table."""

    async def get_existing_urls(self, urls: Iterable[str]) -> set[str]:
        """Return the subset of ``urls`` already stored, in one query."""
        url_list = list(set(urls))
        if not url_list:
            return set()

        try:
            result = await self.session.execute(
                select(DBArticle.url).where(DBArticle.url.in_(url_list))
            )
            return set(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error("Failed to get existing URLs", count=len(url_list), error=str(e))
            raise RepositoryError.query_failed("ArticleRepository", "get_existing_urls") from e

    async def bulk_insert(
        self,
        rows: Sequence[dict[str, Any]],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> int:
        """
        Insert ``rows`` in chunks inside a single transaction.

        Either every row is committed or, on any failure, none are.

        Returns:
            Number of rows inserted
        """
        if not rows:
            return 0

        try:
            for chunk in chunked(rows, chunk_size):
                await self.session.execute(insert(DBArticle), list(chunk))
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error("Failed to bulk insert articles", count=len(rows), error=str(e))
            raise RepositoryError.create_failed("Articles (bulk)") from e

        return len(rows)

    async def find_or_fail(self, article_id: int) -> DBArticle:
        """Load an article with its source, category and author."""
        try:
            result = await self.session.execute(
                select(DBArticle)
                .options(
                    selectinload(DBArticle.source),
                    selectinload(DBArticle.category),
                    selectinload(DBArticle.author),
                )
                .where(DBArticle.id == article_id)
            )
            article = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error("Failed to find article", id=article_id, error=str(e))
            raise RepositoryError.query_failed("ArticleRepository", "find_or_fail") from e

        if article is None:
            raise RepositoryError.not_found("Article", article_id)
        return article

    async def search(self, filters: ArticleFilters) -> ArticlePage:
        """Filter, order (newest first) and paginate stored articles."""
        conditions = self._conditions(filters)

        try:
            total = await self.session.scalar(
                select(func.count()).select_from(DBArticle).where(*conditions)
            )

            result = await self.session.execute(
                select(DBArticle)
                .options(
                    selectinload(DBArticle.source),
                    selectinload(DBArticle.category),
                    selectinload(DBArticle.author),
                )
                .where(*conditions)
                .order_by(DBArticle.published_at.desc(), DBArticle.id.desc())
                .limit(filters.per_page)
                .offset((filters.page - 1) * filters.per_page)
            )
            articles = result.scalars().all()
        except SQLAlchemyError as e:
            self.logger.error(
                "Failed to search articles",
                filters=filters.model_dump(exclude_none=True),
                error=str(e),
            )
            raise RepositoryError.query_failed("ArticleRepository", "search") from e

        return ArticlePage(
            items=[ArticleOut.model_validate(article) for article in articles],
            total=total or 0,
            page=filters.page,
            per_page=filters.per_page,
        )

    def _conditions(self, filters: ArticleFilters) -> list[ColumnElement[bool]]:
        conditions: list[ColumnElement[bool]] = []

        if filters.keyword:
            conditions.append(self._keyword_clause(filters.keyword))
        if filters.from_date:
            conditions.append(DBArticle.published_at >= filters.from_date)
        if filters.to_date:
            conditions.append(DBArticle.published_at <= filters.to_date)
        if filters.sources:
            conditions.append(DBArticle.source_id.in_(filters.sources))
        if filters.categories:
            conditions.append(DBArticle.category_id.in_(filters.categories))
        if filters.authors:
            conditions.append(DBArticle.author_id.in_(filters.authors))

        return conditions

    def _keyword_clause(self, keyword: str) -> ColumnElement[bool]:
        if self.dialect == "postgresql":
            document = func.to_tsvector(
                "english",
                func.coalesce(DBArticle.title, "")
                + " "
                + func.coalesce(DBArticle.description, "")
                + " "
                + func.coalesce(DBArticle.content, ""),
            )
            return document.bool_op("@@")(func.plainto_tsquery("english", keyword))

        return or_(
            DBArticle.title.icontains(keyword, autoescape=True),
            DBArticle.description.icontains(keyword, autoescape=True),
            DBArticle.content.icontains(keyword, autoescape=True),
        )
