"""
Weather schemas.

Response shapes for the current-weather and forecast endpoints, and the
stored forecast snapshot.
"""

from datetime import datetime
from typing import List, Optional, Union

from pydantic import Field

from weather_backend.schemas.base import BaseSchema, CamelSchema

# Placeholder used when the provider omits an optional reading
NOT_AVAILABLE = "N/A"


class WeatherReport(CamelSchema):
    """Current conditions for one location, enriched with derived fields."""
    city: str
    temperature: float = Field(..., description="Temperature in °C")
    feels_like: float = Field(..., description="Apparent temperature in °C")
    humidity: float = Field(..., description="Relative humidity in %")
    pressure: float = Field(..., description="Sea-level pressure in hPa")
    visibility: Optional[float] = Field(None, description="Visibility in metres")
    wind_speed: float = Field(..., description="Wind speed in m/s")
    wind_direction: Optional[float] = Field(None, description="Wind direction in degrees")
    gust: Union[float, str] = Field(NOT_AVAILABLE, description="Wind gust in m/s or 'N/A'")
    sunrise: str = Field(..., description="Local time of sunrise (HH:MM:SS)")
    sunset: str = Field(..., description="Local time of sunset (HH:MM:SS)")
    uvi: Union[float, str] = Field(NOT_AVAILABLE, description="UV index or 'N/A'")
    precipitation: float = Field(0, description="Rain over the last hour in mm")
    description: str
    aqi: str = Field(..., description="Air quality label")
    alert: str
    recommendation: str


class ForecastEntry(CamelSchema):
    """One 3-hour forecast interval."""
    date_time: str = Field(..., description="Provider timestamp text (UTC)")
    temperature: float
    feels_like: float
    humidity: float
    wind_speed: float
    wind_direction: Optional[float] = None
    description: str
    precipitation: float = Field(0, description="Rain over the 3-hour interval in mm")
    alert: str
    recommendation: str


class ForecastResponse(BaseSchema):
    """Five-day forecast for one city."""
    city: str
    forecast: List[ForecastEntry]


# Stored weather schemas

class ForecastDay(BaseSchema):
    """Daily summary kept in a stored forecast snapshot."""
    date: str
    temperature: float
    weather: str
    wind_speed: float
    humidity: float


class StoredWeatherCreate(BaseSchema):
    """Schema for storing a forecast snapshot."""
    city: str = Field(..., min_length=1, max_length=100)
    country: Optional[str] = Field(None, max_length=10)
    forecast: List[ForecastDay] = Field(default_factory=list)


class StoredWeather(StoredWeatherCreate):
    """Stored forecast snapshot as read back from the database."""
    id: int
    created_at: datetime
