"""
Source and category lookups.
"""
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from news_aggregator.core.text import slugify
from news_aggregator.exceptions import RepositoryError, ServiceError
from news_aggregator.models.domain import CategoryOut, SourceOut
from news_aggregator.repositories import CategoryRepository, SourceRepository


class CatalogService:
    """Sources and categories as exposed to readers."""

    def __init__(
        self,
        session: AsyncSession,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        self.logger = logger or structlog.get_logger(__name__)
        self.sources = SourceRepository(session, self.logger)
        self.categories = CategoryRepository(session, self.logger)

    async def get_sources(self) -> list[SourceOut]:
        """Active sources, ordered by name."""
        return [SourceOut.model_validate(s) for s in await self.sources.get_active()]

    async def get_source(self, source_id: int) -> SourceOut:
        try:
            return SourceOut.model_validate(await self.sources.find_or_fail(source_id))
        except RepositoryError as e:
            if e.status_code == 404:
                raise ServiceError.not_found("Source not found.") from e
            raise

    async def get_categories(self) -> list[CategoryOut]:
        return [CategoryOut.model_validate(c) for c in await self.categories.all()]

    async def get_category(self, category_id: int) -> CategoryOut:
        try:
            return CategoryOut.model_validate(await self.categories.find_or_fail(category_id))
        except RepositoryError as e:
            if e.status_code == 404:
                raise ServiceError.not_found("Category not found.") from e
            raise

    async def get_or_create_source(self, identifier: str, name: str) -> SourceOut:
        source = await self.sources.first_or_create_by_identifier(
            identifier, {"name": name, "is_active": True}
        )
        return SourceOut.model_validate(source)

    async def get_or_create_category(self, slug: str, name: str) -> CategoryOut:
        normalized = slugify(slug)
        if not normalized:
            raise ServiceError.invalid_data("Category slug must contain letters or digits.")

        category = await self.categories.first_or_create(normalized, name)
        return CategoryOut.model_validate(category)
