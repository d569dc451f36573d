"""
User preference persistence.
"""
from typing import Any, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from news_aggregator.exceptions import RepositoryError
from news_aggregator.models.database import DBUserPreferences
from news_aggregator.repositories.base import BaseRepository


class UserPreferenceRepository(BaseRepository):
    """Repository for the ``user_preferences`` table."""

    async def find_by_user_id(self, user_id: int) -> Optional[DBUserPreferences]:
        try:
            result = await self.session.execute(
                select(DBUserPreferences).where(DBUserPreferences.user_id == user_id)
            )
            return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            self.logger.error("Failed to find user preferences", user_id=user_id, error=str(e))
            raise RepositoryError.query_failed("UserPreferenceRepository", "find_by_user_id") from e

    async def update_or_create(self, user_id: int, values: dict[str, Any]) -> DBUserPreferences:
        try:
            prefs = await self.find_by_user_id(user_id)
            if prefs is None:
                prefs = DBUserPreferences(user_id=user_id, **values)
                self.session.add(prefs)
            else:
                for key, value in values.items():
                    setattr(prefs, key, value)

            await self.session.commit()
            await self.session.refresh(prefs)
            return prefs
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error("Failed to updateOrCreate user preferences", user_id=user_id, error=str(e))
            raise RepositoryError.create_failed("UserPreference") from e

    async def delete(self, user_id: int) -> bool:
        try:
            result = await self.session.execute(
                delete(DBUserPreferences).where(DBUserPreferences.user_id == user_id)
            )
            await self.session.commit()
            return result.rowcount > 0
        except SQLAlchemyError as e:
            await self.session.rollback()
            self.logger.error("Failed to delete user preferences", user_id=user_id, error=str(e))
            raise RepositoryError.delete_failed("UserPreference", user_id) from e
