"""
Weather dependencies.

This module contains dependency injection functions for the weather gateway.
"""

import httpx
from fastapi import Depends, Request

from weather_backend.config import Settings, get_settings
from weather_backend.services.weather import WeatherGateway


def get_http_client(request: Request) -> httpx.AsyncClient:
    """
    Shared outbound HTTP client.

    Created in the application lifespan and stored on ``app.state``.
    """
    return request.app.state.http_client


def get_weather_gateway(
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
) -> WeatherGateway:
    """
    Build the weather gateway for the current request.

    Args:
        settings: Application settings
        client: Shared outbound HTTP client

    Returns:
        WeatherGateway bound to the provider configuration
    """
    return WeatherGateway(settings, client)
