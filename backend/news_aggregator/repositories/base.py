"""
Shared repository plumbing.
"""
from typing import Any, Iterator, Optional, Sequence

import structlog
from sqlalchemy import Insert, insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from news_aggregator.models.database import Base


def chunked(rows: Sequence[Any], size: int) -> Iterator[Sequence[Any]]:
    """Yield consecutive slices of at most ``size`` rows."""
    for start in range(0, len(rows), size):
        yield rows[start:start + size]


class BaseRepository:
    """Holds the session and logger every repository needs."""

    def __init__(
        self,
        session: AsyncSession,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        self.session = session
        self.logger = logger or structlog.get_logger(__name__)

    @property
    def dialect(self) -> str:
        return self.session.get_bind().dialect.name

    def insert_ignoring_conflicts(self, model: type[Base]) -> Insert:
        """
        INSERT that silently skips rows violating a unique index.

        Supported on PostgreSQL and SQLite; other backends get a plain
        INSERT and surface the IntegrityError.
        """
        if self.dialect == "postgresql":
            return postgresql.insert(model).on_conflict_do_nothing()
        if self.dialect == "sqlite":
            return sqlite.insert(model).on_conflict_do_nothing()
        return insert(model)
