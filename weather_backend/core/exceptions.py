"""
Application error taxonomy.

Services raise these errors; the HTTP boundary converts each one into a
JSON body with a human-readable ``message`` (and, for server-side
failures, the underlying ``error`` text) under the matching status code.
"""

from typing import Any, Dict, Optional

from fastapi import status


class WeatherBackendError(Exception):
    """Base class for all errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, error: Optional[str] = None):
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message}
        if self.error is not None:
            body["error"] = self.error
        return body


class ValidationError(WeatherBackendError):
    """Missing or malformed request parameters."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class DuplicateEmailError(WeatherBackendError):
    """Signup attempted with an email that is already registered."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Email already exists"


class InvalidCredentialsError(WeatherBackendError):
    """
    Signin failed.

    Raised for both an unknown email and a wrong password so that the
    response never reveals which accounts exist.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class ProviderError(WeatherBackendError):
    """Upstream weather provider or network failure."""

    default_message = "Error fetching weather data"

    def __init__(
        self,
        message: Optional[str] = None,
        error: Optional[str] = None,
        upstream_status: Optional[int] = None,
    ):
        super().__init__(message, error)
        self.upstream_status = upstream_status


class PersistenceError(WeatherBackendError):
    """Database unavailable or write failure."""

    default_message = "Database error"
