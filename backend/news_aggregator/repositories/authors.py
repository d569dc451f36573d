"""
Author persistence with case-insensitive name matching.

Names are compared through ``author_key`` on the Python side only and the
result is stored in ``name_key``, so matching does not depend on how the
database folds case.
"""
from typing import Any, Iterable, Sequence

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from news_aggregator.core.text import author_key
from news_aggregator.exceptions import RepositoryError
from news_aggregator.models.database import DBAuthor
from news_aggregator.repositories.base import BaseRepository


class AuthorRepository(BaseRepository):
    """Repository for the ``authors`` table."""

    async def get_by_names(self, names: Iterable[str]) -> list[DBAuthor]:
        """Authors whose name matches any of ``names``, ignoring case."""
        keys = sorted({author_key(name) for name in names if name and name.strip()})
        if not keys:
            return []

        try:
            result = await self.session.execute(
                select(DBAuthor).where(DBAuthor.name_key.in_(keys))
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error("Failed to get authors by names", count=len(keys), error=str(e))
            raise RepositoryError.query_failed("AuthorRepository", "get_by_names") from e

    async def bulk_insert(self, rows: Sequence[dict[str, Any]]) -> None:
        """Insert authors in one statement; names that already exist are skipped."""
        if not rows:
            return

        values = [{**row, "name_key": author_key(row["name"])} for row in rows]
        try:
            await self.session.execute(self.insert_ignoring_conflicts(DBAuthor), values)
        except SQLAlchemyError as e:
            self.logger.error("Failed to bulk insert authors", count=len(rows), error=str(e))
            raise RepositoryError.create_failed("Authors (bulk)") from e
