"""
Authentication dependencies.

This module contains dependency injection functions for the auth service.
"""

from fastapi import Depends

from weather_backend.config import Settings, get_settings
from weather_backend.services.auth import AuthService


def get_auth_service(settings: Settings = Depends(get_settings)) -> AuthService:
    """
    Build the auth service for the current request.

    Args:
        settings: Application settings

    Returns:
        AuthService bound to the application settings
    """
    return AuthService(settings)
