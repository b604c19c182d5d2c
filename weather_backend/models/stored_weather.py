"""
Stored weather model.

Snapshot of a city's daily forecast kept for later reuse. No endpoint
reads or writes it yet.
"""

from sqlalchemy import Column, JSON, String

from weather_backend.models.base import BaseModel


class StoredWeather(BaseModel):
    """
    Forecast snapshot for one city.

    ``forecast`` holds a list of ``{date, temperature, weather,
    wind_speed, humidity}`` objects.
    """

    __tablename__ = "stored_weather"

    city = Column(String(100), index=True, nullable=False)
    country = Column(String(10), nullable=True)
    forecast = Column(JSON, nullable=False, default=list)
