"""
Category persistence keyed by slug.
"""
from typing import Any, Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from news_aggregator.exceptions import RepositoryError
from news_aggregator.models.database import DBCategory
from news_aggregator.repositories.base import BaseRepository


class CategoryRepository(BaseRepository):
    """Repository for the ``categories`` table."""

    async def all(self) -> list[DBCategory]:
        try:
            result = await self.session.execute(select(DBCategory).order_by(DBCategory.name))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error("Failed to fetch all categories", error=str(e))
            raise RepositoryError.query_failed("CategoryRepository", "all") from e

    async def find_or_fail(self, category_id: int) -> DBCategory:
        try:
            category = await self.session.get(DBCategory, category_id)
        except SQLAlchemyError as e:
            self.logger.error("Failed to find category", id=category_id, error=str(e))
            raise RepositoryError.query_failed("CategoryRepository", "find_or_fail") from e

        if category is None:
            raise RepositoryError.not_found("Category", category_id)
        return category

    async def get_by_slugs(self, slugs: Iterable[str]) -> list[DBCategory]:
        slug_list = sorted(set(slugs))
        if not slug_list:
            return []

        try:
            result = await self.session.execute(
                select(DBCategory).where(DBCategory.slug.in_(slug_list))
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error("Failed to get categories by slugs", count=len(slug_list), error=str(e))
            raise RepositoryError.query_failed("CategoryRepository", "get_by_slugs") from e

    async def bulk_insert(self, rows: Sequence[dict[str, Any]]) -> None:
        """Insert categories in one statement; slugs that already exist are skipped."""
        if not rows:
            return

        try:
            await self.session.execute(self.insert_ignoring_conflicts(DBCategory), list(rows))
        except SQLAlchemyError as e:
            self.logger.error("Failed to bulk insert categories", count=len(rows), error=str(e))
            raise RepositoryError.create_failed("Categories (bulk)") from e

    async def first_or_create(self, slug: str, name: str) -> DBCategory:
        """Fetch the category for ``slug``, creating it with ``name`` if missing."""
        try:
            existing = await self.get_by_slugs([slug])
            if existing:
                return existing[0]

            category = DBCategory(slug=slug, name=name)
            self.session.add(category)
            try:
                await self.session.commit()
            except IntegrityError:
                # Created concurrently between our select and insert
                await self.session.rollback()
                existing = await self.get_by_slugs([slug])
                if not existing:
                    raise
                return existing[0]
            return category
        except SQLAlchemyError as e:
            self.logger.error("Failed to firstOrCreate category", slug=slug, name=name, error=str(e))
            raise RepositoryError.create_failed("Category") from e
