"""Modelos tipados para lecturas de glucosa y corridas (runs)."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

GLUCOSE_MIN_MG_DL = 20.0
GLUCOSE_MAX_MG_DL = 600.0
MIN_READINGS = 3


class MealContext(str, Enum):
    """Relation of a reading to a meal."""

    BEFORE_MEAL = "Before meal"
    AFTER_MEAL = "After meal"
    FASTING = "Fasting"
    BEDTIME = "Bedtime"
    OTHER = "Other"

    @classmethod
    def parse(cls, text: object) -> MealContext | None:
        """Map free text to a meal context.

        Empty or missing text gives None, unknown labels give OTHER.
        """
        if text is None:
            return None
        key = str(text).strip().lower().replace("_", " ").replace("-", " ")
        if not key or key == "nan":
            return None
        for member in cls:
            if key in (member.value.lower(), member.name.lower().replace("_", " ")):
                return member
        return cls.OTHER


@dataclass(frozen=True)
class GlucoseReading:
    """One glucose measurement event (timestamped, mg/dL)."""

    timestamp: datetime
    value: float
    meal_context: MealContext | None = None
    notes: str | None = None


@dataclass(frozen=True)
class Run:
    """Monitoring period grouping a set of readings."""

    start_date: datetime
    end_date: datetime | None = None
    readings: tuple[GlucoseReading, ...] = ()
    estimated_a1c: float | None = None
    notes: str = ""

    @property
    def is_completed(self) -> bool:
        return self.end_date is not None


def check_glucose_value(value: float) -> float:
    """Validate a glucose value before it becomes a reading.

    Raises:
        ValueError: If the value is outside 20-600 mg/dL.
    """
    if not GLUCOSE_MIN_MG_DL <= value <= GLUCOSE_MAX_MG_DL:
        raise ValueError(
            f"Glucose value must be between {GLUCOSE_MIN_MG_DL:g} and "
            f"{GLUCOSE_MAX_MG_DL:g} mg/dL (got {value:g})"
        )
    return value
