"""Weather fetch service.

Drives one fetch cycle (current conditions, forecast, air quality) through
the forecast pipeline and returns an explicit FetchState value. State
transitions are published to an optional listener instead of being exposed
as mutable fields.

Every fetch takes a monotonic sequence number. A fetch that completes after
a newer one has started is not published, so a slow response can never
overwrite fresher state.
"""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from src.forecast.bucketizer import bucketize_by_local_day, local_date
from src.forecast.daily import aggregate_buckets
from src.forecast.decoder import PayloadKind, decode, decode_error_message, samples_from_forecast
from src.forecast.display import assemble_display
from src.forecast.errors import EmptyInputError
from src.forecast.hourly import project_hourly
from src.forecast.models import (
    DailyForecast,
    ForecastSample,
    HourlyForecast,
    LocationContext,
    WeatherDisplay,
)
from src.shared.api.errors import (
    APIError,
    AuthenticationError,
    DataError,
    DecodeError,
    EnrichmentUnavailable,
    HTTPError,
    NetworkError,
)
from src.shared.api.openweather import OpenWeatherClient
from src.shared.config.logging import fetch_context, get_logger
from src.shared.config.settings import Settings, get_settings

logger = get_logger(__name__)


class FetchStatus(Enum):
    """Fetch lifecycle states."""

    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    FAILED = "failed"


VALID_TRANSITIONS: dict[FetchStatus, set[FetchStatus]] = {
    FetchStatus.IDLE: {FetchStatus.LOADING},
    # A newer request may start while one is still loading
    FetchStatus.LOADING: {FetchStatus.LOADING, FetchStatus.SUCCESS, FetchStatus.FAILED},
    FetchStatus.SUCCESS: {FetchStatus.IDLE, FetchStatus.LOADING},
    FetchStatus.FAILED: {FetchStatus.IDLE, FetchStatus.LOADING},
}


class ErrorKind(Enum):
    """Why a fetch failed, for the presentation layer."""

    INVALID_REQUEST = "invalid_request"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    SERVICE_UNAVAILABLE = "service_unavailable"
    NETWORK = "network"
    DECODE = "decode"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FetchState:
    """Snapshot of the fetch lifecycle, produced once per transition."""

    status: FetchStatus
    sequence: int = 0
    location: LocationContext | None = None
    display: WeatherDisplay | None = None
    hourly: tuple[HourlyForecast, ...] = ()
    daily: tuple[DailyForecast, ...] = ()
    error_kind: ErrorKind | None = None
    error_message: str | None = None

    @property
    def is_loading(self) -> bool:
        """Whether a fetch is in flight."""
        return self.status is FetchStatus.LOADING

    @property
    def succeeded(self) -> bool:
        """Whether the fetch produced a display."""
        return self.status is FetchStatus.SUCCESS


@dataclass(frozen=True)
class ForecastBundle:
    """Forecast-derived outputs of one fetch."""

    hourly: tuple[HourlyForecast, ...] = ()
    daily: tuple[DailyForecast, ...] = ()
    today_bucket: tuple[ForecastSample, ...] | None = None


def describe_error(error: APIError) -> tuple[ErrorKind, str]:
    """Map an API error to an ErrorKind and a human-readable message.

    Args:
        error: Classified API error

    Returns:
        Tuple of (kind, message)
    """
    if isinstance(error, AuthenticationError):
        return ErrorKind.UNAUTHORIZED, "API key is invalid or expired"
    if isinstance(error, HTTPError):
        status = error.status_code
        if status == 404:
            return ErrorKind.NOT_FOUND, "City not found"
        if status == 429:
            return ErrorKind.RATE_LIMITED, "API rate limit exceeded"
        if 500 <= status <= 599:
            return ErrorKind.SERVICE_UNAVAILABLE, "Weather service is temporarily unavailable"
        return ErrorKind.UNKNOWN, error.message
    if isinstance(error, NetworkError):
        return ErrorKind.NETWORK, f"Network error: {error.message}"
    if isinstance(error, DataError):
        return ErrorKind.DECODE, "Failed to parse weather data"
    return ErrorKind.UNKNOWN, error.message


class WeatherService:
    """Fetches weather for a location and returns FetchState values.

    Each call runs Loading -> Success/Failed synchronously. Calls from several
    threads may overlap; only the most recently started fetch publishes its
    completion.
    """

    def __init__(
        self,
        client: OpenWeatherClient | None = None,
        settings: Settings | None = None,
        listener: Callable[[FetchState], None] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize weather service.

        Args:
            client: OpenWeatherMap client (created if not provided)
            settings: Application settings (global settings if not provided)
            listener: Called with every published FetchState
            clock: Returns the current UTC unix time
        """
        self.settings = settings or get_settings()
        self.client = client or OpenWeatherClient()
        self.listener = listener
        self._clock = clock
        self._lock = threading.RLock()
        self._sequence = 0
        self._state = FetchState(status=FetchStatus.IDLE)

        logger.info(
            "weather_service_initialized",
            hourly_samples=self.settings.hourly_sample_count,
            daily_days=self.settings.daily_forecast_days,
        )

    @property
    def state(self) -> FetchState:
        """Most recently published state."""
        with self._lock:
            return self._state

    def reset(self) -> FetchState:
        """Return to Idle after a completed fetch."""
        with self._lock:
            self._publish(FetchState(status=FetchStatus.IDLE, sequence=self._sequence))
            return self._state

    def fetch_weather(self, city: str) -> FetchState:
        """Fetch current conditions and forecasts for a city name.

        Args:
            city: City name, e.g. "London"

        Returns:
            Final FetchState of this fetch (Success or Failed)
        """
        return self._run_fetch({"city": city.strip() if city else city})

    def fetch_weather_by_coordinates(self, lat: float, lon: float) -> FetchState:
        """Fetch current conditions and forecasts for coordinates.

        Args:
            lat: Latitude
            lon: Longitude

        Returns:
            Final FetchState of this fetch (Success or Failed)
        """
        return self._run_fetch({"lat": lat, "lon": lon})

    def _can_transition(self, current: FetchStatus, new: FetchStatus) -> bool:
        return new in VALID_TRANSITIONS.get(current, set())

    def _publish(self, state: FetchState) -> None:
        """Record and emit a state. Caller holds the lock."""
        if not self._can_transition(self._state.status, state.status):
            logger.warning(
                "invalid_fetch_transition",
                from_status=self._state.status.value,
                to_status=state.status.value,
                sequence=state.sequence,
            )
            return

        self._state = state
        logger.debug("fetch_state_published", status=state.status.value, sequence=state.sequence)
        if self.listener is not None:
            self.listener(state)

    def _begin(self) -> int:
        with self._lock:
            self._sequence += 1
            sequence = self._sequence
            self._publish(FetchState(status=FetchStatus.LOADING, sequence=sequence))
            return sequence

    def _complete(self, state: FetchState) -> FetchState:
        with self._lock:
            if state.sequence != self._sequence:
                logger.warning(
                    "stale_fetch_dropped",
                    sequence=state.sequence,
                    latest_sequence=self._sequence,
                    status=state.status.value,
                )
                return state
            self._publish(state)
            return state

    def _run_fetch(self, locator: dict[str, Any]) -> FetchState:
        sequence = self._begin()

        with fetch_context(sequence, **locator):
            logger.info("weather_fetch_started")
            try:
                state = self._fetch(sequence, locator)
            except APIError as e:
                kind, message = describe_error(e)
                state = self._failed(sequence, kind, message)
            except Exception as e:
                # Leave Loading before propagating
                self._complete(self._failed(sequence, ErrorKind.UNKNOWN, f"Unexpected error: {e}"))
                raise

            return self._complete(state)

    def _failed(self, sequence: int, kind: ErrorKind, message: str) -> FetchState:
        logger.error("weather_fetch_failed", sequence=sequence, error_kind=kind.value, message=message)
        return FetchState(
            status=FetchStatus.FAILED,
            sequence=sequence,
            error_kind=kind,
            error_message=message,
        )

    def _fetch(self, sequence: int, locator: dict[str, Any]) -> FetchState:
        now_epoch = self._clock()
        now = datetime.fromtimestamp(now_epoch, tz=timezone.utc)

        try:
            raw_current = self.client.get_current_weather(**locator)
        except ValueError as e:
            message = "Invalid city name" if "city" in locator else str(e)
            return self._failed(sequence, ErrorKind.INVALID_REQUEST, message)

        try:
            current = decode(raw_current, PayloadKind.CURRENT)
        except DecodeError:
            message = decode_error_message(raw_current) or "Failed to parse weather data"
            return self._failed(sequence, ErrorKind.DECODE, message)

        location = LocationContext(city_name=current.name, utc_offset_seconds=current.timezone)
        bundle = self._fetch_forecast(locator, now_epoch)
        air_quality_index = self._lookup_air_quality(current.coord.lat, current.coord.lon)

        display = assemble_display(
            current,
            daily_bucket=bundle.today_bucket,
            air_quality_index=air_quality_index,
            now=now,
        )

        logger.info(
            "weather_fetch_succeeded",
            sequence=sequence,
            city=location.city_name,
            hourly=len(bundle.hourly),
            daily=len(bundle.daily),
        )
        return FetchState(
            status=FetchStatus.SUCCESS,
            sequence=sequence,
            location=location,
            display=display,
            hourly=bundle.hourly,
            daily=bundle.daily,
        )

    def _fetch_forecast(self, locator: dict[str, Any], now_epoch: float) -> ForecastBundle:
        """Fetch and shape the forecast; failures leave the forecasts empty."""
        try:
            forecast = decode(self.client.get_forecast(**locator), PayloadKind.FORECAST)
            samples = samples_from_forecast(forecast)
            offset = forecast.city.timezone
            buckets = bucketize_by_local_day(samples, offset)
        except (APIError, EmptyInputError) as e:
            logger.warning("forecast_unavailable", error=str(e), error_type=type(e).__name__)
            return ForecastBundle()

        hourly = project_hourly(samples, self.settings.hourly_sample_count, offset)
        daily = aggregate_buckets(buckets, offset, now_epoch, self.settings.daily_forecast_days)
        today = buckets.get(local_date(int(now_epoch), offset))

        return ForecastBundle(
            hourly=tuple(hourly),
            daily=tuple(daily),
            today_bucket=tuple(today) if today else None,
        )

    def _fetch_air_quality(self, lat: float, lon: float) -> int:
        """Look up the AQI, raising EnrichmentUnavailable on any failure."""
        try:
            response = decode(self.client.get_air_quality(lat, lon), PayloadKind.AIR_QUALITY)
        except APIError as e:
            raise EnrichmentUnavailable(
                "Air quality lookup failed",
                endpoint=e.endpoint,
                details={"cause": e.error_code.name},
            ) from e

        if response.current_index is None:
            raise EnrichmentUnavailable("Air quality response has no readings")
        return response.current_index

    def _lookup_air_quality(self, lat: float, lon: float) -> int | None:
        """AQI for the location, or None so that assembly falls back to 3."""
        try:
            return self._fetch_air_quality(lat, lon)
        except EnrichmentUnavailable:
            return None

