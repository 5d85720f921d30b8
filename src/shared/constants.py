"""Core constants for the Weather 360 forecast service.

This module defines the constants shared by the forecast pipeline, the
OpenWeatherMap client and the fetch service.
"""

from typing import Final

# OpenWeatherMap endpoints (relative to the configured base URL)
OPENWEATHER_BASE_URL: Final[str] = "https://api.openweathermap.org/data/2.5"
CURRENT_WEATHER_ENDPOINT: Final[str] = "/weather"
FORECAST_ENDPOINT: Final[str] = "/forecast"
AIR_QUALITY_ENDPOINT: Final[str] = "/air_pollution"

# Timeouts (seconds)
API_TIMEOUT_SECONDS: Final[int] = 30

# Real-world UTC offsets span UTC-14:00 to UTC+14:00
MIN_UTC_OFFSET_SECONDS: Final[int] = -50400
MAX_UTC_OFFSET_SECONDS: Final[int] = 50400

# Forecast shaping
DAILY_FORECAST_DAYS: Final[int] = 5
HOURLY_WINDOW_HOURS: Final[int] = 24
THREE_HOUR_CADENCE: Final[int] = 3  # 5-day/3-hour provider
ONE_HOUR_CADENCE: Final[int] = 1  # hourly provider variant

# Sunset heuristic window, local hours inclusive
SUNSET_WINDOW_START_HOUR: Final[int] = 18
SUNSET_WINDOW_END_HOUR: Final[int] = 20

# Air quality index (1-5 scale)
AQI_MIN: Final[int] = 1
AQI_MAX: Final[int] = 5
DEFAULT_AIR_QUALITY_INDEX: Final[int] = 3  # "Moderate"

TODAY_LABEL: Final[str] = "Today"
NOW_LABEL: Final[str] = "Now"

# Fixed English weekday abbreviations, indexed by date.weekday()
WEEKDAY_ABBREVIATIONS: Final[tuple[str, ...]] = (
    "Mon",
    "Tue",
    "Wed",
    "Thu",
    "Fri",
    "Sat",
    "Sun",
)

COMPASS_POINTS: Final[tuple[str, ...]] = (
    "N", "NNE", "NE", "ENE",
    "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW",
    "W", "WNW", "NW", "NNW",
)

AIR_QUALITY_LABELS: Final[dict[int, str]] = {
    1: "Good",
    2: "Fair",
    3: "Moderate",
    4: "Poor",
    5: "Very Poor",
}
