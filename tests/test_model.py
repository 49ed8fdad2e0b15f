from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import datetime

import pytest

from a1c_tool.model import GlucoseReading, MealContext, check_glucose_value


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("Fasting", MealContext.FASTING),
        ("before meal", MealContext.BEFORE_MEAL),
        ("BEFORE_MEAL", MealContext.BEFORE_MEAL),
        ("after-meal", MealContext.AFTER_MEAL),
        (" Bedtime ", MealContext.BEDTIME),
        ("snack", MealContext.OTHER),
        ("", None),
        (None, None),
        (float("nan"), None),
    ],
)
def test_meal_context_parse(text: object, expected: MealContext | None) -> None:
    assert MealContext.parse(text) is expected


def test_reading_is_immutable() -> None:
    r = GlucoseReading(timestamp=datetime(2025, 1, 1, 8), value=100.0)
    with pytest.raises(FrozenInstanceError):
        r.value = 120.0  # type: ignore[misc]


@pytest.mark.parametrize("value", [20.0, 110.0, 600.0])
def test_check_glucose_value_accepts_range(value: float) -> None:
    assert check_glucose_value(value) == value


@pytest.mark.parametrize("value", [0.0, 19.9, 600.1])
def test_check_glucose_value_rejects_out_of_range(value: float) -> None:
    with pytest.raises(ValueError, match="between 20 and 600"):
        check_glucose_value(value)
