"""Validación de calidad de datos antes de mostrar un A1C estimado."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo
from enum import Enum

from a1c_tool.model import MIN_READINGS, GlucoseReading

logger = logging.getLogger(__name__)

MIN_SPAN_DAYS = 7

# [start, end) hours, local wall clock. 23-5 belongs to no bucket.
TIME_OF_DAY_BUCKETS: dict[str, tuple[int, int]] = {
    "morning": (5, 11),
    "afternoon": (11, 17),
    "evening": (17, 23),
}


class InvalidReason(str, Enum):
    """Why a reading set cannot back a trustworthy estimate."""

    INSUFFICIENT_DATA = "Insufficient data. At least 3 readings are required."
    SHORT_SPAN = "Readings should span at least 7 days for a reliable estimate."
    MISSING_TIME_OF_DAY = (
        "Readings should include different times of day "
        "(morning, afternoon, evening)."
    )


@dataclass(frozen=True)
class ValidationVerdict:
    """Validity of an estimate; reason is None when valid."""

    is_valid: bool
    reason: InvalidReason | None = None


def time_of_day(timestamp: datetime, tz: tzinfo | None = None) -> str | None:
    """Return the bucket name for a timestamp, None for late night.

    Args:
        timestamp: Reading time.
        tz: Zone to read the hour in; only applied to aware timestamps.
    """
    if tz is not None and timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone(tz)
    hour = timestamp.hour
    for name, (start, end) in TIME_OF_DAY_BUCKETS.items():
        if start <= hour < end:
            return name
    return None


def time_of_day_counts(
    readings: Sequence[GlucoseReading], tz: tzinfo | None = None
) -> dict[str, int]:
    """Count readings per time-of-day bucket (late night not counted)."""
    counts = {name: 0 for name in TIME_OF_DAY_BUCKETS}
    for r in readings:
        bucket = time_of_day(r.timestamp, tz)
        if bucket is not None:
            counts[bucket] += 1
    return counts


def validate_estimate(
    readings: Sequence[GlucoseReading], tz: tzinfo | None = None
) -> ValidationVerdict:
    """Check whether readings can support a reliable A1C estimate.

    Checks run in order and the first failure is reported: reading
    count, then span between first and last reading, then coverage of
    morning, afternoon and evening.

    Args:
        readings: Glucose readings, any order.
        tz: Optional zone for the time-of-day check.

    Returns:
        Verdict with the failing reason, if any.
    """
    if len(readings) < MIN_READINGS:
        return _invalid(InvalidReason.INSUFFICIENT_DATA)

    timestamps = [r.timestamp for r in readings]
    span = max(timestamps) - min(timestamps)
    if span / timedelta(days=1) < MIN_SPAN_DAYS:
        return _invalid(InvalidReason.SHORT_SPAN)

    counts = time_of_day_counts(readings, tz)
    if not all(counts.values()):
        return _invalid(InvalidReason.MISSING_TIME_OF_DAY)

    return ValidationVerdict(is_valid=True)


def _invalid(reason: InvalidReason) -> ValidationVerdict:
    logger.debug("Estimate rejected: %s", reason.name)
    return ValidationVerdict(is_valid=False, reason=reason)
