"""
Weather router.

This module contains the current-weather and 5-day forecast endpoints,
both proxied from OpenWeatherMap and enriched with alert,
recommendation and air-quality text.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from weather_backend.config import get_settings
from weather_backend.dependencies.weather import get_weather_gateway
from weather_backend.schemas.base import MessageResponse
from weather_backend.schemas.weather import ForecastResponse, WeatherReport
from weather_backend.services.weather import WeatherGateway

settings = get_settings()

router = APIRouter(
    tags=["weather"],
    responses={
        400: {"model": MessageResponse, "description": "City or coordinates are required"},
        500: {"description": "Weather provider error"},
    },
)

limiter = Limiter(key_func=get_remote_address, enabled=settings.RATE_LIMIT_ENABLED)
WEATHER_RATE_LIMIT = f"{settings.RATE_LIMIT_REQUESTS}/{settings.RATE_LIMIT_WINDOW}seconds"


@router.get("/current-weather", response_model=WeatherReport)
@limiter.limit(WEATHER_RATE_LIMIT)
async def get_current_weather(
    request: Request,
    city: Optional[str] = Query(None, description="City name, e.g. 'London' or 'London,GB'"),
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180, le=180, description="Longitude"),
    gateway: WeatherGateway = Depends(get_weather_gateway),
):
    """
    Get current conditions for a city or a latitude/longitude pair.

    `city` takes precedence when both are given. The response adds an
    air-quality label, an alert and a recommendation.
    """
    return await gateway.current_weather(city=city, lat=lat, lon=lon)


@router.get("/5-day-forecast", response_model=ForecastResponse)
@limiter.limit(WEATHER_RATE_LIMIT)
async def get_five_day_forecast(
    request: Request,
    city: Optional[str] = Query(None, description="City name, e.g. 'London' or 'London,GB'"),
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Latitude"),
    lon: Optional[float] = Query(None, ge=-180, le=180, description="Longitude"),
    gateway: WeatherGateway = Depends(get_weather_gateway),
):
    """
    Get the 5-day forecast in 3-hour steps for a city or coordinates.

    Each entry carries its own alert and recommendation.
    """
    return await gateway.five_day_forecast(city=city, lat=lat, lon=lon)
