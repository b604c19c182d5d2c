"""
Stored weather CRUD operations.
"""

from typing import List, Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from weather_backend.crud.base import CRUDBase
from weather_backend.models.stored_weather import StoredWeather
from weather_backend.schemas.weather import StoredWeatherCreate


class CRUDStoredWeather(CRUDBase[StoredWeather, StoredWeatherCreate]):
    """
    CRUD operations for StoredWeather model.
    """

    async def get_latest_for_city(self, db: AsyncSession, *, city: str) -> Optional[StoredWeather]:
        """
        Get the most recent snapshot stored for a city.

        City names are matched case-insensitively.
        """
        result = await db.execute(
            select(StoredWeather)
            .where(StoredWeather.city.ilike(city))
            .order_by(StoredWeather.created_at.desc(), StoredWeather.id.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def get_by_city(
        self,
        db: AsyncSession,
        *,
        city: str,
        skip: int = 0,
        limit: int = 100
    ) -> List[StoredWeather]:
        """All snapshots for a city, newest first."""
        result = await db.execute(
            select(StoredWeather)
            .where(StoredWeather.city.ilike(city))
            .order_by(StoredWeather.created_at.desc(), StoredWeather.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())


stored_weather = CRUDStoredWeather(StoredWeather)
