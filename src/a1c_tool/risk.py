"""Interpretación clínica de un valor de A1C."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

PREDIABETES_THRESHOLD = 5.7
DIABETES_THRESHOLD = 6.5


class RiskLevel(str, Enum):
    NORMAL = "normal"
    PREDIABETES = "prediabetes"
    DIABETES = "diabetes"


@dataclass(frozen=True)
class RiskClassification:
    """Interpretation text and risk band for an A1C value."""

    interpretation: str
    risk_level: RiskLevel


def interpret_a1c(a1c: float) -> RiskClassification:
    """Classify an A1C percentage.

    Lower bounds are inclusive: 5.7 is prediabetes and 6.5 is diabetes.
    """
    if a1c < PREDIABETES_THRESHOLD:
        return RiskClassification("Normal A1C level", RiskLevel.NORMAL)
    if a1c < DIABETES_THRESHOLD:
        return RiskClassification("Prediabetes range", RiskLevel.PREDIABETES)
    return RiskClassification("Diabetes range", RiskLevel.DIABETES)
