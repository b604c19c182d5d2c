# API routers package

from weather_backend.routers.auth import router as auth_router
from weather_backend.routers.weather import router as weather_router

# Re-export for easy importing
auth = auth_router
weather = weather_router
