"""
Weather gateway.

Fetches current conditions, air quality and the 5-day / 3-hour forecast
from OpenWeatherMap and hands the payloads to the enrichment functions.
"""

from typing import Any, Dict, Optional

import httpx

from weather_backend.config import Settings
from weather_backend.core.exceptions import ProviderError, ValidationError
from weather_backend.schemas.weather import ForecastResponse, WeatherReport
from weather_backend.utils.enrichment import build_forecast, build_weather_report
from weather_backend.utils.logging_config import get_logger

logger = get_logger(__name__)

LOCATION_REQUIRED = "City or coordinates are required"
WEATHER_FETCH_FAILED = "Error fetching weather data"
FORECAST_FETCH_FAILED = "Error fetching forecast data"


def location_params(
    city: Optional[str] = None,
    lat: Optional[float] = None,
    lon: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Build the provider's location query.

    A city name wins over coordinates when both are given.

    Raises:
        ValidationError: If neither a city nor both coordinates are supplied
    """
    if city:
        return {"q": city}
    if lat is None or lon is None:
        raise ValidationError(LOCATION_REQUIRED)
    return {"lat": lat, "lon": lon}


def _upstream_message(exc: httpx.HTTPStatusError) -> str:
    """Prefer the provider's own ``message`` field over the generic status text."""
    try:
        body = exc.response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Request failed with status code {exc.response.status_code}"


class WeatherGateway:
    """
    OpenWeatherMap client for a single request.

    Calls are made one after another with no retries; the first failure
    ends the request with a ProviderError.
    """

    def __init__(self, settings: Settings, client: httpx.AsyncClient):
        self.api_key = settings.OPENWEATHER_API_KEY
        self.base_url = settings.OPENWEATHER_BASE_URL.rstrip("/")
        self.client = client

    async def _get(self, path: str, params: Dict[str, Any]) -> Dict[str, Any]:
        response = await self.client.get(
            f"{self.base_url}/{path}",
            params={**params, "appid": self.api_key},
        )
        response.raise_for_status()
        return response.json()

    async def _fetch(self, path: str, params: Dict[str, Any], failure_message: str) -> Dict[str, Any]:
        try:
            return await self._get(path, params)
        except httpx.HTTPStatusError as exc:
            detail = _upstream_message(exc)
            logger.error(f"Provider returned {exc.response.status_code} for /{path}: {detail}")
            raise ProviderError(failure_message, detail, upstream_status=exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            logger.error(f"Provider request to /{path} failed: {exc!r}")
            raise ProviderError(failure_message, str(exc) or exc.__class__.__name__) from exc
        except ValueError as exc:
            logger.error(f"Provider sent invalid JSON for /{path}: {exc}")
            raise ProviderError(failure_message, str(exc)) from exc

    async def current_weather(
        self,
        city: Optional[str] = None,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
    ) -> WeatherReport:
        """
        Current conditions plus air quality for a city or coordinates.

        Air quality is requested with the coordinates the provider resolved
        in the current-weather response, so the two calls run in sequence.

        Raises:
            ValidationError: If no usable location is given (no call is made)
            ProviderError: On any network, HTTP or payload failure
        """
        params = location_params(city, lat, lon)

        current = await self._fetch("weather", {**params, "units": "metric"}, WEATHER_FETCH_FAILED)
        try:
            coord = current["coord"]
            air_params = {"lat": coord["lat"], "lon": coord["lon"]}
        except (KeyError, TypeError) as exc:
            raise ProviderError(WEATHER_FETCH_FAILED, f"Missing coordinates in provider response: {exc}") from exc

        air = await self._fetch("air_pollution", air_params, WEATHER_FETCH_FAILED)

        try:
            return build_weather_report(current, air)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
            logger.error(f"Unexpected current-weather payload: {exc!r}")
            raise ProviderError(WEATHER_FETCH_FAILED, f"Unexpected provider response: {exc!r}") from exc

    async def five_day_forecast(
        self,
        city: Optional[str] = None,
        lat: Optional[float] = None,
        lon: Optional[float] = None,
    ) -> ForecastResponse:
        """
        Enriched 5-day / 3-hour forecast for a city or coordinates.

        Raises:
            ValidationError: If no usable location is given (no call is made)
            ProviderError: On any network, HTTP or payload failure
        """
        params = location_params(city, lat, lon)

        payload = await self._fetch("forecast", {**params, "units": "metric"}, FORECAST_FETCH_FAILED)

        try:
            return build_forecast(payload)
        except (AttributeError, KeyError, IndexError, TypeError, ValueError) as exc:
            logger.error(f"Unexpected forecast payload: {exc!r}")
            raise ProviderError(FORECAST_FETCH_FAILED, f"Unexpected provider response: {exc!r}") from exc
