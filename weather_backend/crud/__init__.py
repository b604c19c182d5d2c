# CRUD operations package

from weather_backend.crud.base import CRUDBase
from weather_backend.crud.user import CRUDUser, user
from weather_backend.crud.stored_weather import CRUDStoredWeather, stored_weather

__all__ = [
    "CRUDBase",
    "CRUDUser", "user",
    "CRUDStoredWeather", "stored_weather",
]
