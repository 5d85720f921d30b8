"""Hourly forecast projection.

Takes a fixed prefix of the forecast samples (8 for the 3-hour provider,
24 for the hourly one) and tags each with the fixed-window sunset flag.
"""

from collections.abc import Sequence

from src.forecast.bucketizer import local_datetime
from src.forecast.models import ForecastSample, HourlyForecast, is_near_sunset_hour
from src.shared.config.logging import get_logger
from src.shared.constants import HOURLY_WINDOW_HOURS

logger = get_logger(__name__)


def sample_count_for_cadence(cadence_hours: int) -> int:
    """Number of samples covering the next 24 hours at a given cadence."""
    return HOURLY_WINDOW_HOURS // cadence_hours


def project_hourly(
    samples: Sequence[ForecastSample],
    count: int,
    utc_offset_seconds: int,
) -> list[HourlyForecast]:
    """Project the first ``count`` samples into hourly entries.

    The near-sunset flag is true for local hours 18, 19 and 20 regardless of
    date or latitude; actual sun times are not consulted.

    Args:
        samples: Forecast samples in chronological order
        count: Maximum number of entries to return
        utc_offset_seconds: Location offset from UTC

    Returns:
        HourlyForecast entries for a contiguous prefix of samples

    Raises:
        ValueError: If count is negative or the offset is out of range
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")

    hourly = []
    for sample in samples[:count]:
        local_time = local_datetime(sample.epoch_seconds, utc_offset_seconds)
        hourly.append(
            HourlyForecast(
                local_time=local_time,
                temperature=sample.temperature,
                icon_id=sample.icon_id,
                description=sample.condition_description,
                is_near_sunset=is_near_sunset_hour(local_time.hour),
            )
        )

    logger.debug("hourly_forecasts_projected", requested=count, returned=len(hourly))
    return hourly
