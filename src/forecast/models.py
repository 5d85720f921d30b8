"""Domain values produced by the forecast pipeline.

All values are immutable and rebuilt on every fetch. Timestamps are carried
as aware datetimes; local times use a fixed-offset timezone built from the
location's UTC offset, never the host timezone.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from src.forecast.units import air_quality_label, wind_direction_label
from src.shared.constants import (
    MAX_UTC_OFFSET_SECONDS,
    MIN_UTC_OFFSET_SECONDS,
    NOW_LABEL,
    SUNSET_WINDOW_END_HOUR,
    SUNSET_WINDOW_START_HOUR,
)


def validate_utc_offset(utc_offset_seconds: int) -> int:
    """Check that a UTC offset lies within real-world bounds.

    Args:
        utc_offset_seconds: Offset from UTC in seconds

    Returns:
        The offset, unchanged

    Raises:
        ValueError: If the offset is outside [-50400, 50400]
    """
    if not MIN_UTC_OFFSET_SECONDS <= utc_offset_seconds <= MAX_UTC_OFFSET_SECONDS:
        raise ValueError(
            f"utc_offset_seconds must be between {MIN_UTC_OFFSET_SECONDS} and "
            f"{MAX_UTC_OFFSET_SECONDS}, got {utc_offset_seconds}"
        )
    return utc_offset_seconds


def fixed_offset(utc_offset_seconds: int) -> timezone:
    """Build a fixed-offset tzinfo for a location."""
    return timezone(timedelta(seconds=validate_utc_offset(utc_offset_seconds)))


def is_near_sunset_hour(hour: int) -> bool:
    """Fixed 18:00-20:59 heuristic window, independent of date and latitude."""
    return SUNSET_WINDOW_START_HOUR <= hour <= SUNSET_WINDOW_END_HOUR


def format_hour_label(hour: int) -> str:
    """Format an hour of day as a fixed-locale '3 PM' label."""
    suffix = "AM" if hour < 12 else "PM"
    return f"{hour % 12 or 12} {suffix}"


@dataclass(frozen=True)
class ForecastSample:
    """One forecast sample decoded from the provider's forecast list.

    Temperatures are in the unit requested from the provider (Celsius for
    metric requests, Kelvin for standard ones).
    """

    epoch_seconds: int
    temperature: float
    temperature_min: float
    temperature_max: float
    condition_code: str
    condition_description: str
    icon_id: str

    @property
    def instant(self) -> datetime:
        """Sample time as an aware UTC datetime."""
        return datetime.fromtimestamp(self.epoch_seconds, tz=timezone.utc)


@dataclass(frozen=True)
class LocationContext:
    """City name and UTC offset for one fetch."""

    city_name: str
    utc_offset_seconds: int

    def __post_init__(self) -> None:
        """Validate offset after initialization."""
        validate_utc_offset(self.utc_offset_seconds)

    @property
    def tzinfo(self) -> timezone:
        """Fixed-offset tzinfo of the location."""
        return fixed_offset(self.utc_offset_seconds)


@dataclass(frozen=True)
class DailyForecast:
    """Aggregated forecast for one local calendar day."""

    calendar_date: date
    day_label: str  # "Today" or a weekday abbreviation
    icon_id: str
    low_temp: float
    high_temp: float
    description: str


@dataclass(frozen=True)
class HourlyForecast:
    """Forecast entry for the hourly strip."""

    local_time: datetime
    temperature: float
    icon_id: str
    description: str
    is_near_sunset: bool

    def time_label(self, now: datetime) -> str:
        """Label for display: 'Now' for the current local hour, else '3 PM'.

        Args:
            now: Current instant (aware); converted to the sample's offset

        Returns:
            Hour label
        """
        local_now = now.astimezone(self.local_time.tzinfo)
        if local_now.hour == self.local_time.hour:
            return NOW_LABEL
        return format_hour_label(self.local_time.hour)


@dataclass(frozen=True, eq=False)
class WeatherDisplay:
    """Headline card for one location.

    Equality and hashing use only (city_name, temperature, humidity_pct):
    two fetches of the same city with the same reading are the same value
    for display-refresh purposes, even if the air quality or wind changed.
    """

    city_name: str
    temperature: float
    feels_like: float
    high_temp: float
    low_temp: float
    humidity_pct: int
    air_quality_index: int
    wind_speed: float
    wind_direction_deg: int
    description: str
    icon_id: str
    sunrise: datetime
    sunset: datetime
    utc_offset_seconds: int = 0
    assembled_at: datetime | None = field(default=None, repr=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WeatherDisplay):
            return NotImplemented
        return (
            self.city_name == other.city_name
            and self.temperature == other.temperature
            and self.humidity_pct == other.humidity_pct
        )

    def __hash__(self) -> int:
        return hash((self.city_name, self.temperature, self.humidity_pct))

    @property
    def sunrise_unknown(self) -> bool:
        """True when sunrise is the assembly-time placeholder."""
        return self.assembled_at is not None and self.sunrise == self.assembled_at

    @property
    def sunset_unknown(self) -> bool:
        """True when sunset is the assembly-time placeholder."""
        return self.assembled_at is not None and self.sunset == self.assembled_at

    @property
    def local_sunrise(self) -> datetime:
        """Sunrise in the location's local time."""
        return self.sunrise.astimezone(fixed_offset(self.utc_offset_seconds))

    @property
    def local_sunset(self) -> datetime:
        """Sunset in the location's local time."""
        return self.sunset.astimezone(fixed_offset(self.utc_offset_seconds))

    @property
    def air_quality_label(self) -> str:
        """Human label for the air quality index."""
        return air_quality_label(self.air_quality_index)

    @property
    def wind_direction_label(self) -> str:
        """16-point compass label of the wind bearing."""
        return wind_direction_label(self.wind_direction_deg)
