"""
User feed preferences.
"""
from typing import Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from news_aggregator.exceptions import RepositoryError, ServiceError
from news_aggregator.models.domain import UserPreferences, UserPreferencesUpdate
from news_aggregator.repositories import UserPreferenceRepository


class PreferenceService:
    def __init__(
        self,
        session: AsyncSession,
        logger: Optional[structlog.stdlib.BoundLogger] = None,
    ):
        self.logger = logger or structlog.get_logger(__name__)
        self.preferences = UserPreferenceRepository(session, self.logger)

    async def get_preferences(self, user_id: int) -> Optional[UserPreferences]:
        try:
            prefs = await self.preferences.find_by_user_id(user_id)
        except RepositoryError as e:
            self.logger.error("Failed to get user preferences", user_id=user_id, error=str(e))
            raise ServiceError.operation_failed("retrieve user preferences") from e

        return UserPreferences.model_validate(prefs) if prefs is not None else None

    async def update_preferences(self, user_id: int, update: UserPreferencesUpdate) -> UserPreferences:
        """Create or update preferences; lists left unset keep their stored value."""
        values = update.model_dump(exclude_none=True)

        try:
            prefs = await self.preferences.update_or_create(user_id, values)
        except RepositoryError as e:
            self.logger.error("Failed to update user preferences", user_id=user_id, error=str(e))
            raise ServiceError.operation_failed("update user preferences") from e

        return UserPreferences.model_validate(prefs)

    async def delete_preferences(self, user_id: int) -> bool:
        try:
            return await self.preferences.delete(user_id)
        except RepositoryError as e:
            self.logger.error("Failed to delete user preferences", user_id=user_id, error=str(e))
            raise ServiceError.operation_failed("delete user preferences") from e
