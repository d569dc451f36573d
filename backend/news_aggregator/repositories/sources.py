"""
Source persistence keyed by provider identifier.
"""
from typing import Any, Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from news_aggregator.exceptions import RepositoryError
from news_aggregator.models.database import DBSource
from news_aggregator.repositories.base import BaseRepository


class SourceRepository(BaseRepository):
    """Repository for the ``sources`` table."""

    async def get_by_identifier(self, identifier: str) -> Optional[DBSource]:
        result = await self.session.execute(
            select(DBSource).where(DBSource.api_identifier == identifier)
        )
        return result.scalar_one_or_none()

    async def first_or_create_by_identifier(self, identifier: str, defaults: dict[str, Any]) -> DBSource:
        """
        Get the source for ``identifier``, creating it from ``defaults`` if missing.

        Safe against a concurrent creator: a unique violation is resolved by
        re-reading the row the other writer committed.
        """
        try:
            source = await self.get_by_identifier(identifier)
            if source is not None:
                return source

            source = DBSource(api_identifier=identifier, **defaults)
            self.session.add(source)
            try:
                await self.session.commit()
            except IntegrityError:
                await self.session.rollback()
                source = await self.get_by_identifier(identifier)
                if source is None:
                    raise
            return source
        except SQLAlchemyError as e:
            self.logger.error(
                "Failed to firstOrCreate source",
                identifier=identifier,
                defaults=defaults,
                error=str(e),
            )
            raise RepositoryError.create_failed("Source") from e

    async def find_or_fail(self, source_id: int) -> DBSource:
        try:
            source = await self.session.get(DBSource, source_id)
        except SQLAlchemyError as e:
            self.logger.error("Failed to find source", id=source_id, error=str(e))
            raise RepositoryError.query_failed("SourceRepository", "find_or_fail") from e

        if source is None:
            raise RepositoryError.not_found("Source", source_id)
        return source

    async def get_active(self) -> list[DBSource]:
        try:
            result = await self.session.execute(
                select(DBSource).where(DBSource.is_active.is_(True)).order_by(DBSource.name)
            )
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error("Failed to fetch active sources", error=str(e))
            raise RepositoryError.query_failed("SourceRepository", "get_active") from e

    async def all(self) -> list[DBSource]:
        try:
            result = await self.session.execute(select(DBSource).order_by(DBSource.name))
            return list(result.scalars().all())
        except SQLAlchemyError as e:
            self.logger.error("Failed to fetch sources", error=str(e))
            raise RepositoryError.query_failed("SourceRepository", "all") from e

    async def set_active(self, identifier: str, active: bool) -> bool:
        """Enable or disable ingestion for a source. Returns False if no such source."""
        try:
            result = await self.session.execute(
                update(DBSource)
                .where(DBSource.api_identifier == identifier)
                .values(is_active=active)
            )
            await self.session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error("Failed to update source", identifier=identifier, error=str(e))
            raise RepositoryError.update_failed("Source", identifier) from e
