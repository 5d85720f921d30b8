"""Daily forecast aggregation.

Reduces each local-day bucket to a single DailyForecast. The icon and
description are taken from the day's first sample only; intra-day changes in
conditions are not reflected. Low/high use each sample's own forecast
min/max, not the point temperature.
"""

from collections.abc import Mapping, Sequence
from datetime import date

from src.forecast.bucketizer import bucketize_by_local_day, is_local_today, local_date
from src.forecast.errors import EmptyInputError
from src.forecast.models import DailyForecast, ForecastSample
from src.shared.config.logging import get_logger
from src.shared.constants import DAILY_FORECAST_DAYS, TODAY_LABEL, WEEKDAY_ABBREVIATIONS

logger = get_logger(__name__)


def weekday_label(sample: ForecastSample, utc_offset_seconds: int) -> str:
    """Fixed English weekday abbreviation of a sample's local date."""
    return WEEKDAY_ABBREVIATIONS[local_date(sample.epoch_seconds, utc_offset_seconds).weekday()]


def aggregate_daily(
    bucket: Sequence[ForecastSample],
    utc_offset_seconds: int,
    is_today: bool,
) -> DailyForecast:
    """Aggregate one day's samples into a DailyForecast.

    Args:
        bucket: Non-empty samples of one local day, in chronological order
        utc_offset_seconds: Location offset from UTC
        is_today: Whether the bucket's date is the location's current date

    Returns:
        DailyForecast for the bucket

    Raises:
        EmptyInputError: If bucket is empty
    """
    if not bucket:
        raise EmptyInputError("aggregate_daily")

    first = bucket[0]
    low_temp = min(sample.temperature_min for sample in bucket)
    high_temp = max(sample.temperature_max for sample in bucket)

    return DailyForecast(
        calendar_date=local_date(first.epoch_seconds, utc_offset_seconds),
        day_label=TODAY_LABEL if is_today else weekday_label(first, utc_offset_seconds),
        icon_id=first.icon_id,
        low_temp=low_temp,
        high_temp=high_temp,
        description=first.condition_description,
    )


def aggregate_buckets(
    buckets: Mapping[date, Sequence[ForecastSample]],
    utc_offset_seconds: int,
    now_epoch: float,
    limit: int = DAILY_FORECAST_DAYS,
) -> list[DailyForecast]:
    """Aggregate the first ``limit`` buckets (at most 5) in ascending date order.

    Args:
        buckets: Output of bucketize_by_local_day
        utc_offset_seconds: Location offset from UTC
        now_epoch: Current UTC unix timestamp, used for the "Today" label
        limit: Maximum number of days to keep

    Returns:
        Up to ``limit`` DailyForecast entries, ascending by date

    Raises:
        ValueError: If limit is less than 1
    """
    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    limit = min(limit, DAILY_FORECAST_DAYS)
    days = sorted(buckets)[:limit]

    daily = [
        aggregate_daily(
            buckets[day],
            utc_offset_seconds,
            is_today=is_local_today(day, now_epoch, utc_offset_seconds),
        )
        for day in days
    ]

    logger.info(
        "daily_forecasts_built",
        num_days=len(daily),
        dropped_days=max(len(buckets) - limit, 0),
    )
    return daily


def build_daily_forecasts(
    samples: Sequence[ForecastSample],
    utc_offset_seconds: int,
    now_epoch: float,
    limit: int = DAILY_FORECAST_DAYS,
) -> list[DailyForecast]:
    """Bucketize samples by local day and aggregate the first days.

    Args:
        samples: Forecast samples, ascending by epoch_seconds
        utc_offset_seconds: Location offset from UTC
        now_epoch: Current UTC unix timestamp, used for the "Today" label
        limit: Maximum number of days to keep (at most 5)

    Returns:
        Up to ``limit`` DailyForecast entries, ascending by date

    Raises:
        EmptyInputError: If samples is empty
        ValueError: If limit is less than 1
    """
    buckets = bucketize_by_local_day(samples, utc_offset_seconds)
    return aggregate_buckets(buckets, utc_offset_seconds, now_epoch, limit)
