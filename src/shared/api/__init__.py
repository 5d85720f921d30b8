"""API client and payload models for OpenWeatherMap."""

from src.shared.api.errors import (
    APIError,
    AuthenticationError,
    ConnectionError,
    DataError,
    DecodeError,
    EnrichmentUnavailable,
    ErrorCode,
    HTTPError,
    NetworkError,
    RateLimitError,
    TimeoutError,
    classify_error,
)
from src.shared.api.openweather import OpenWeatherClient

__all__ = [
    "OpenWeatherClient",
    "APIError",
    "NetworkError",
    "TimeoutError",
    "ConnectionError",
    "HTTPError",
    "AuthenticationError",
    "RateLimitError",
    "DataError",
    "DecodeError",
    "EnrichmentUnavailable",
    "ErrorCode",
    "classify_error",
]
