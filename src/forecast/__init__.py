"""Forecast pipeline: decoding, local-day bucketing, aggregation and display assembly."""

from src.forecast.bucketizer import (
    bucketize_by_local_day,
    is_local_today,
    local_date,
    local_datetime,
)
from src.forecast.daily import aggregate_buckets, aggregate_daily, build_daily_forecasts
from src.forecast.decoder import (
    PayloadKind,
    decode,
    decode_error_message,
    samples_from_forecast,
)
from src.forecast.display import assemble_display, normalize_air_quality_index
from src.forecast.errors import EmptyInputError
from src.forecast.hourly import project_hourly, sample_count_for_cadence
from src.forecast.models import (
    DailyForecast,
    ForecastSample,
    HourlyForecast,
    LocationContext,
    WeatherDisplay,
)
from src.forecast.service import ErrorKind, FetchState, FetchStatus, WeatherService

__all__ = [
    # Values
    "ForecastSample",
    "LocationContext",
    "DailyForecast",
    "HourlyForecast",
    "WeatherDisplay",
    # Decoding
    "PayloadKind",
    "decode",
    "decode_error_message",
    "samples_from_forecast",
    # Bucketing and aggregation
    "local_date",
    "local_datetime",
    "is_local_today",
    "bucketize_by_local_day",
    "aggregate_daily",
    "aggregate_buckets",
    "build_daily_forecasts",
    "project_hourly",
    "sample_count_for_cadence",
    # Display
    "assemble_display",
    "normalize_air_quality_index",
    # Errors
    "EmptyInputError",
    # Service
    "WeatherService",
    "FetchState",
    "FetchStatus",
    "ErrorKind",
]
