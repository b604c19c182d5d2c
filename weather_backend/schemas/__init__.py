# Pydantic schemas package

from weather_backend.schemas.base import BaseSchema, CamelSchema, TimestampSchema, MessageResponse
from weather_backend.schemas.auth import SignupRequest, SigninRequest, SigninResponse, User
from weather_backend.schemas.weather import (
    WeatherReport, ForecastEntry, ForecastResponse,
    ForecastDay, StoredWeatherCreate, StoredWeather,
)

__all__ = [
    # Base schemas
    "BaseSchema", "CamelSchema", "TimestampSchema", "MessageResponse",

    # Auth schemas
    "SignupRequest", "SigninRequest", "SigninResponse", "User",

    # Weather schemas
    "WeatherReport", "ForecastEntry", "ForecastResponse",
    "ForecastDay", "StoredWeatherCreate", "StoredWeather",
]
