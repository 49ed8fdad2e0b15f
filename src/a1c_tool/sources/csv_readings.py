"""Lectura de lecturas de glucosa desde CSV genérico."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import pandas as pd
from dateutil import parser

from a1c_tool.model import GlucoseReading, MealContext, check_glucose_value
from a1c_tool.sources.base import DataSource, SourcePaths

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("timestamp", "value")


@dataclass(frozen=True)
class CsvReadingsPaths(SourcePaths):
    """Paths for CSV reading exports."""

    # root: folder containing *.csv


class CsvReadingsSource(DataSource):
    """CSV reader with columns timestamp, value[, meal_context, notes]."""

    def load_readings(self, path: Path) -> list[GlucoseReading]:
        """Load readings from one CSV file.

        Raises:
            ValueError: If required columns are missing, a timestamp is
                not ISO-8601 or a value is out of range.
        """
        df = pd.read_csv(path)
        df.columns = [str(c).strip().lower() for c in df.columns]
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise ValueError(f"{path.name}: missing columns {', '.join(missing)}")

        df = df.dropna(subset=["value"])

        out: list[GlucoseReading] = []
        for _, row in df.iterrows():
            out.append(
                GlucoseReading(
                    timestamp=self._localize(_parse_timestamp(row["timestamp"])),
                    value=check_glucose_value(float(row["value"])),
                    meal_context=MealContext.parse(row.get("meal_context")),
                    notes=_clean_note(row.get("notes")),
                )
            )
        out.sort(key=lambda r: r.timestamp)
        logger.info("Loaded %d readings from %s", len(out), path)
        return out


def _parse_timestamp(value: object) -> datetime:
    """Parse an ISO-8601 cell, keeping its own UTC offset if present."""
    return parser.isoparse(str(value).strip())


def _clean_note(value: object) -> str | None:
    if value is None or pd.isna(value):
        return None
    text = str(value).strip()
    return text or None
