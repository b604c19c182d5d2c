# Database models package

from weather_backend.models.base import BaseModel
from weather_backend.models.user import User
from weather_backend.models.stored_weather import StoredWeather

__all__ = [
    "BaseModel",
    "User",
    "StoredWeather",
]
