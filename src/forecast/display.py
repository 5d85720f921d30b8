"""Display assembly for the headline weather card.

Merges current conditions, the matching daily bucket and the air quality
index into one WeatherDisplay.
"""

from collections.abc import Sequence
from datetime import datetime, timezone

from src.forecast.models import ForecastSample, WeatherDisplay
from src.shared.api.response_models import CurrentWeather
from src.shared.config.logging import get_logger
from src.shared.constants import AQI_MAX, AQI_MIN, DEFAULT_AIR_QUALITY_INDEX

logger = get_logger(__name__)


def normalize_air_quality_index(air_quality_index: int | None) -> int:
    """Fall back to 3 ("Moderate") when the index is missing or out of range."""
    if air_quality_index is None or not AQI_MIN <= air_quality_index <= AQI_MAX:
        return DEFAULT_AIR_QUALITY_INDEX
    return air_quality_index


def assemble_display(
    current: CurrentWeather,
    daily_bucket: Sequence[ForecastSample] | None = None,
    air_quality_index: int | None = None,
    now: datetime | None = None,
) -> WeatherDisplay:
    """Build the headline card from current conditions.

    With a daily bucket, high/low come from the bucket's forecast min/max and
    sunrise/sunset from the current conditions. Without one, high and low both
    equal the current temperature and sunrise/sunset are set to ``now``;
    callers treat a sun time equal to ``assembled_at`` as unknown.

    Args:
        current: Decoded current conditions
        daily_bucket: Samples of the location's current local day, if any
        air_quality_index: AQI from the optional lookup, or None if it failed
        now: Assembly timestamp (defaults to the current UTC time)

    Returns:
        Assembled WeatherDisplay
    """
    now = now or datetime.now(timezone.utc)
    condition = current.primary_condition

    if daily_bucket:
        high_temp = max(sample.temperature_max for sample in daily_bucket)
        low_temp = min(sample.temperature_min for sample in daily_bucket)
        sunrise = datetime.fromtimestamp(current.sys.sunrise, tz=timezone.utc)
        sunset = datetime.fromtimestamp(current.sys.sunset, tz=timezone.utc)
    else:
        logger.debug("display_without_daily_bucket", city=current.name)
        high_temp = low_temp = current.main.temp
        sunrise = sunset = now

    display = WeatherDisplay(
        city_name=current.name,
        temperature=current.main.temp,
        feels_like=current.main.feels_like,
        high_temp=high_temp,
        low_temp=low_temp,
        humidity_pct=current.main.humidity,
        air_quality_index=normalize_air_quality_index(air_quality_index),
        wind_speed=current.wind.speed,
        wind_direction_deg=current.wind.deg,
        description=condition.description if condition else "",
        icon_id=condition.icon if condition else "",
        sunrise=sunrise,
        sunset=sunset,
        utc_offset_seconds=current.timezone,
        assembled_at=now,
    )

    logger.info(
        "display_assembled",
        city=display.city_name,
        temperature=display.temperature,
        air_quality_index=display.air_quality_index,
        has_daily_bucket=bool(daily_bucket),
    )
    return display
