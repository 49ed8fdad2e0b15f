"""Resumen de una corrida: estimación, validez, riesgo y tablas diarias."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import datetime, tzinfo

import pandas as pd

from a1c_tool.estimator import (
    compute_a1c,
    estimate_average_glucose,
    mean_glucose,
    round_half_away,
)
from a1c_tool.model import GlucoseReading, Run
from a1c_tool.quality import ValidationVerdict, time_of_day, validate_estimate
from a1c_tool.risk import RiskClassification, interpret_a1c

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "datetime",
    "date",
    "time",
    "glucose_mg_dl",
    "meal_context",
    "time_of_day",
    "notes",
]


@dataclass(frozen=True)
class RunEstimate:
    """Everything a display layer needs for one run."""

    readings_count: int
    mean_glucose: float | None
    estimated_a1c: float | None
    estimated_average_glucose: int | None
    verdict: ValidationVerdict
    risk: RiskClassification | None

    @property
    def should_display(self) -> bool:
        """True when there is a number and the data backs it."""
        return self.estimated_a1c is not None and self.verdict.is_valid


def estimate_run(
    readings: Sequence[GlucoseReading], tz: tzinfo | None = None
) -> RunEstimate:
    """Validate and estimate a run's readings.

    The validator and the estimator are independent: an estimate is
    returned even when the verdict is invalid, so the caller decides
    whether to show it.
    """
    verdict = validate_estimate(readings, tz)
    a1c = compute_a1c(readings)
    avg = mean_glucose(readings)
    logger.debug(
        "Run estimate: n=%d a1c=%s valid=%s", len(readings), a1c, verdict.is_valid
    )
    return RunEstimate(
        readings_count=len(readings),
        mean_glucose=round_half_away(avg, 1) if avg is not None else None,
        estimated_a1c=a1c,
        estimated_average_glucose=(
            estimate_average_glucose(a1c) if a1c is not None else None
        ),
        verdict=verdict,
        risk=interpret_a1c(a1c) if a1c is not None else None,
    )


def complete_run(run: Run, at: datetime, tz: tzinfo | None = None) -> Run:
    """Close a run and store its estimated A1C.

    Args:
        run: Open run.
        at: End date of the run.
        tz: Optional zone for the time-of-day check.

    Returns:
        A new Run with end_date and estimated_a1c set.

    Raises:
        ValueError: If the run is already completed.
    """
    if run.is_completed:
        raise ValueError(
            f"Run started {run.start_date:%Y-%m-%d} is already completed"
        )
    estimate = estimate_run(run.readings, tz)
    reason = estimate.verdict.reason
    if reason is not None:
        logger.info("Completing run with unreliable data: %s", reason.value)
    return replace(run, end_date=at, estimated_a1c=estimate.estimated_a1c)


def readings_to_frame(
    readings: Sequence[GlucoseReading], tz: tzinfo | None = None
) -> pd.DataFrame:
    """Convert glucose readings to DataFrame with date/time and context."""
    rows = [
        {
            "datetime": r.timestamp,
            "date": r.timestamp.date(),
            "time": r.timestamp.time().replace(second=0, microsecond=0),
            "glucose_mg_dl": r.value,
            "meal_context": r.meal_context.value if r.meal_context else None,
            "time_of_day": time_of_day(r.timestamp, tz),
            "notes": r.notes,
        }
        for r in readings
    ]
    df = pd.DataFrame(rows, columns=FRAME_COLUMNS)
    if df.empty:
        return df
    return df.sort_values("datetime").reset_index(drop=True)


def daily_glucose_summary(glucose_events: pd.DataFrame) -> pd.DataFrame:
    """Aggregate glucose by day (count/min/max/avg)."""
    if glucose_events.empty:
        return pd.DataFrame(
            columns=[
                "date",
                "glucose_count",
                "glucose_min",
                "glucose_max",
                "glucose_avg",
            ]
        )
    g = glucose_events.groupby("date", as_index=False).agg(
        glucose_count=("glucose_mg_dl", "count"),
        glucose_min=("glucose_mg_dl", "min"),
        glucose_max=("glucose_mg_dl", "max"),
        glucose_avg=("glucose_mg_dl", "mean"),
    )
    g["glucose_avg"] = g["glucose_avg"].round(2)
    return g.sort_values("date").reset_index(drop=True)
