"""Estimación de A1C a partir de lecturas (fórmula ADAG)."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import cast

import pandas as pd

from a1c_tool.model import MIN_READINGS, GlucoseReading

logger = logging.getLogger(__name__)

ADAG_INTERCEPT = 46.7
ADAG_SLOPE = 28.7


def round_half_away(value: float, places: int = 0) -> float:
    """Round to ``places`` decimals, halves away from zero.

    Goes through the shortest decimal repr so 6.45 rounds to 6.5
    instead of following the binary float.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def mean_glucose(readings: Sequence[GlucoseReading]) -> float | None:
    """Arithmetic mean of the reading values, None for no readings."""
    if not readings:
        return None
    values = pd.Series([r.value for r in readings], dtype="float64")
    return float(values.mean())


def compute_a1c(readings: Sequence[GlucoseReading]) -> float | None:
    """Estimate A1C (%) from a run's readings.

    Every reading weighs the same regardless of time or meal context.

    Args:
        readings: Glucose readings, any order.

    Returns:
        A1C rounded to one decimal, or None when there are fewer than
        three readings.
    """
    if len(readings) < MIN_READINGS:
        logger.debug("A1C not computed: %d readings", len(readings))
        return None
    avg = cast(float, mean_glucose(readings))
    return round_half_away((avg + ADAG_INTERCEPT) / ADAG_SLOPE, 1)


def estimate_average_glucose(a1c: float) -> int:
    """Estimated average glucose (mg/dL) for an A1C value.

    The input range is not checked.
    """
    return int(round_half_away(a1c * ADAG_SLOPE - ADAG_INTERCEPT))
