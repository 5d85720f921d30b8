"""Timezone-aware grouping of forecast samples into local calendar days.

Local dates are computed by shifting the UTC instant by the location's
offset and reading the date on a UTC-anchored proleptic Gregorian calendar.
The host timezone is never consulted.
"""

from collections.abc import Iterable
from datetime import date, datetime, timezone

from src.forecast.errors import EmptyInputError
from src.forecast.models import ForecastSample, fixed_offset, validate_utc_offset
from src.shared.config.logging import get_logger

logger = get_logger(__name__)


def local_date(epoch_seconds: int, utc_offset_seconds: int) -> date:
    """Calendar date of an instant at the location.

    Args:
        epoch_seconds: UTC unix timestamp
        utc_offset_seconds: Location offset from UTC

    Returns:
        Local calendar date

    Example:
        >>> local_date(1704150000, -28800)  # 2024-01-01T23:00Z, UTC-8
        datetime.date(2024, 1, 1)
    """
    validate_utc_offset(utc_offset_seconds)
    return datetime.fromtimestamp(epoch_seconds + utc_offset_seconds, tz=timezone.utc).date()


def local_datetime(epoch_seconds: int, utc_offset_seconds: int) -> datetime:
    """Aware local datetime of an instant at the location."""
    return datetime.fromtimestamp(epoch_seconds, tz=fixed_offset(utc_offset_seconds))


def is_local_today(calendar_date: date, now_epoch: float, utc_offset_seconds: int) -> bool:
    """Whether a date is 'today' at the location, judged under the same offset.

    Args:
        calendar_date: Local date to test
        now_epoch: Current UTC unix timestamp
        utc_offset_seconds: Location offset from UTC

    Returns:
        True if the location's current local date equals calendar_date
    """
    return local_date(int(now_epoch), utc_offset_seconds) == calendar_date


def bucketize_by_local_day(
    samples: Iterable[ForecastSample],
    utc_offset_seconds: int,
) -> dict[date, list[ForecastSample]]:
    """Group samples by the location's local calendar date.

    Each sample lands in exactly one bucket and keeps its input order within
    the bucket. Only dates present in the input get a bucket. The returned
    mapping iterates in ascending date order.

    Args:
        samples: Forecast samples, ascending by epoch_seconds
        utc_offset_seconds: Location offset from UTC

    Returns:
        Ordered mapping of local date to samples

    Raises:
        EmptyInputError: If samples is empty
        ValueError: If the offset is out of range
    """
    validate_utc_offset(utc_offset_seconds)

    buckets: dict[date, list[ForecastSample]] = {}
    count = 0
    for sample in samples:
        day = local_date(sample.epoch_seconds, utc_offset_seconds)
        buckets.setdefault(day, []).append(sample)
        count += 1

    if not buckets:
        raise EmptyInputError("bucketize_by_local_day")

    # Ascending input already yields ascending keys; sort anyway so that
    # out-of-order provider lists still produce ordered buckets.
    ordered = {day: buckets[day] for day in sorted(buckets)}

    logger.debug(
        "samples_bucketized",
        num_samples=count,
        num_days=len(ordered),
        utc_offset_seconds=utc_offset_seconds,
    )
    return ordered
