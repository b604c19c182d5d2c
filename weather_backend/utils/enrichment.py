"""
Weather enrichment functions for the Weather Backend.

This module turns raw OpenWeatherMap payloads into the service's response
shapes and derives the human-readable fields:
- Air quality label from the provider's 1-5 AQI index
- Weather alert text from the provider's condition code
- Recommendation text from temperature, wind speed and condition code

Condition code groups follow https://openweathermap.org/weather-conditions
(2xx thunderstorm, 3xx drizzle, 5xx rain, 6xx snow, 7xx atmosphere,
800 clear, 80x clouds). All functions are pure.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from weather_backend.schemas.weather import (
    NOT_AVAILABLE,
    ForecastEntry,
    ForecastResponse,
    WeatherReport,
)
from weather_backend.utils.logging_config import get_logger

logger = get_logger(__name__)

AQI_LEVELS = {
    1: "Good",
    2: "Fair",
    3: "Moderate",
    4: "Poor",
    5: "Very Poor",
}
AQI_UNKNOWN = "Unknown"

# (lower bound inclusive, upper bound exclusive, alert)
ALERT_RANGES = [
    (200, 300, "Thunderstorm warning!"),
    (300, 600, "Rain alert! Carry an umbrella."),
    (600, 700, "Snowfall expected."),
    (700, 800, "Low visibility due to fog."),
]
CLEAR_SKY_CODE = 800
CLEAR_SKY_ALERT = "Clear sky. Have a great day!"
CLOUDY_ALERT = "Cloudy weather."
NO_ALERT = "No alerts."

HEAT_THRESHOLD_C = 35.0
WIND_THRESHOLD_MS = 10.0
HEAT_ADVICE = "It's hot! Stay hydrated and avoid sun exposure."
WIND_ADVICE = "High winds! Secure loose items."
UMBRELLA_ADVICE = "Carry an umbrella!"
DEFAULT_ADVICE = "Weather looks good! Enjoy your day."


def aqi_description(aqi_index: Any) -> str:
    """
    Map the provider's AQI index (1-5) to its label.

    Any value outside the table, including non-integers, yields "Unknown".
    """
    if isinstance(aqi_index, bool):
        label = None
    else:
        label = AQI_LEVELS.get(aqi_index)
    if label is None:
        logger.warning(f"AQI index outside 1-5 from provider: {aqi_index!r}")
        return AQI_UNKNOWN
    return label


def weather_alert(condition_code: int) -> str:
    """
    Alert text for a provider condition code.

    Ranges are half-open and checked in order; 800 (clear) is distinct
    from the cloud codes above it.
    """
    for lower, upper, alert in ALERT_RANGES:
        if lower <= condition_code < upper:
            return alert
    if condition_code == CLEAR_SKY_CODE:
        return CLEAR_SKY_ALERT
    if condition_code > CLEAR_SKY_CODE:
        return CLOUDY_ALERT
    return NO_ALERT


def recommendation(temperature: float, wind_speed: float, condition_code: int) -> str:
    """
    Recommendation text; the first matching rule wins.

    Args:
        temperature: Air temperature in °C
        wind_speed: Wind speed in m/s
        condition_code: Provider condition code

    Returns:
        Heat advice above 35 °C, else wind advice above 10 m/s, else
        umbrella advice for drizzle/rain codes, else a generic message.
    """
    if temperature > HEAT_THRESHOLD_C:
        return HEAT_ADVICE
    if wind_speed > WIND_THRESHOLD_MS:
        return WIND_ADVICE
    if 300 <= condition_code < 600:
        return UMBRELLA_ADVICE
    return DEFAULT_ADVICE


def local_time_of_day(timestamp: int, utc_offset_seconds: Optional[int] = None) -> str:
    """
    Format a Unix timestamp as ``HH:MM:SS`` wall-clock time.

    The provider reports each location's offset from UTC in seconds;
    without it the time is rendered in UTC.
    """
    tz = timezone(timedelta(seconds=utc_offset_seconds or 0))
    return datetime.fromtimestamp(timestamp, tz=tz).strftime("%H:%M:%S")


def _precipitation(item: Dict[str, Any], window: str) -> float:
    rain = item.get("rain") or {}
    return rain.get(window) or 0


def _optional_reading(value: Any) -> Any:
    return NOT_AVAILABLE if value is None else value


def build_weather_report(current: Dict[str, Any], air: Dict[str, Any]) -> WeatherReport:
    """
    Merge a current-weather payload and an air-pollution payload.

    Args:
        current: Body of the provider's ``/weather`` response (metric units)
        air: Body of the provider's ``/air_pollution`` response

    Returns:
        Enriched WeatherReport

    Raises:
        KeyError, IndexError, TypeError, AttributeError: If a required field
            is missing or has the wrong shape
    """
    main = current["main"]
    wind = current["wind"]
    sys_info = current["sys"]
    condition = current["weather"][0]
    offset = current.get("timezone")

    aqi_index = air["list"][0]["main"]["aqi"]

    return WeatherReport(
        city=current["name"],
        temperature=main["temp"],
        feels_like=main["feels_like"],
        humidity=main["humidity"],
        pressure=main["pressure"],
        visibility=current.get("visibility"),
        wind_speed=wind["speed"],
        wind_direction=wind.get("deg"),
        gust=_optional_reading(wind.get("gust")),
        sunrise=local_time_of_day(sys_info["sunrise"], offset),
        sunset=local_time_of_day(sys_info["sunset"], offset),
        uvi=_optional_reading(current.get("uvi")),
        precipitation=_precipitation(current, "1h"),
        description=condition["description"],
        aqi=aqi_description(aqi_index),
        alert=weather_alert(condition["id"]),
        recommendation=recommendation(main["temp"], wind["speed"], condition["id"]),
    )


def build_forecast_entry(item: Dict[str, Any]) -> ForecastEntry:
    """Enrich one 3-hour item of the provider's ``/forecast`` list."""
    main = item["main"]
    wind = item["wind"]
    condition = item["weather"][0]

    return ForecastEntry(
        date_time=item["dt_txt"],
        temperature=main["temp"],
        feels_like=main["feels_like"],
        humidity=main["humidity"],
        wind_speed=wind["speed"],
        wind_direction=wind.get("deg"),
        description=condition["description"],
        precipitation=_precipitation(item, "3h"),
        alert=weather_alert(condition["id"]),
        recommendation=recommendation(main["temp"], wind["speed"], condition["id"]),
    )


def build_forecast(payload: Dict[str, Any]) -> ForecastResponse:
    """Enrich a full ``/forecast`` response, keeping the provider's order."""
    entries: List[ForecastEntry] = [build_forecast_entry(item) for item in payload["list"]]
    return ForecastResponse(city=payload["city"]["name"], forecast=entries)
