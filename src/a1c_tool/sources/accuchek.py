"""Lectura de exportaciones JSON de Accu-Chek."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path
from typing import Any

from a1c_tool.model import GlucoseReading, MealContext, check_glucose_value
from a1c_tool.sources.base import DataSource, SourcePaths

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AccuChekPaths(SourcePaths):
    """Paths for Accu-Chek JSON exports."""

    # root: folder containing accuchek_*.json


class AccuChekSource(DataSource):
    """Accu-Chek JSON reading source."""

    def load_readings(self, path: Path) -> list[GlucoseReading]:
        """Parse Accu-Chek JSON into typed readings.

        Args:
            path: Path to JSON file.

        Returns:
            List of glucose readings sorted by timestamp.

        Raises:
            ValueError: If JSON shape or a glucose value is invalid.
        """
        text = path.read_text(encoding="utf-8")
        raw = _extract_json_list(text)
        if not isinstance(raw, list):
            raise ValueError("Accu-Chek JSON must be a list")

        out: list[GlucoseReading] = []
        for item in raw:
            reading = _item_to_reading(item, self._tz)
            if reading is None:
                logger.debug("Skipping Accu-Chek item without value: %r", item)
                continue
            out.append(reading)
        out.sort(key=lambda r: r.timestamp)
        logger.info("Loaded %d readings from %s", len(out), path)
        return out


def _item_to_reading(item: Any, local_tz: tzinfo) -> GlucoseReading | None:
    """Convierte un ítem dict en GlucoseReading; None si falta mg/dL."""
    if not isinstance(item, dict):
        return None
    mg_dl = item.get("mg/dL")
    if mg_dl is None:
        return None
    ts = _parse_timestamp(item.get("timestamp"), item.get("epoch"), local_tz)
    return GlucoseReading(
        timestamp=ts,
        value=check_glucose_value(float(mg_dl)),
        meal_context=MealContext.parse(item.get("tag")),
        notes=_parse_note(item),
    )


def _parse_note(item: dict[str, Any]) -> str | None:
    """Extrae la nota de un ítem (vacío -> None)."""
    note = item.get("note")
    if note is None:
        return None
    text = str(note).strip()
    return text or None


def _extract_json_list(text: str) -> Any:
    """Extract JSON array from text, tolerating leading non-JSON (e.g. log lines)."""
    start = text.find("[")
    if start >= 0:
        return json.loads(text[start:])
    return json.loads(text)


def _parse_timestamp(ts_str: Any, epoch: Any, local_tz: tzinfo) -> datetime:
    """Parses meter wall-clock time, falling back to epoch seconds."""
    if isinstance(ts_str, str) and ts_str.strip():
        dt = datetime.strptime(ts_str, "%Y/%m/%d %H:%M")
        return dt.replace(tzinfo=local_tz)

    if epoch is not None:
        return datetime.fromtimestamp(int(epoch), tz=local_tz)

    raise ValueError("Missing timestamp and epoch")
