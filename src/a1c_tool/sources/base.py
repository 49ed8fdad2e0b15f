"""Clases base para fuentes de lecturas."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, tzinfo
from pathlib import Path

from dateutil import tz as dateutil_tz

from a1c_tool.model import GlucoseReading


@dataclass(frozen=True)
class SourcePaths:
    """Container for a source file or directory."""

    root: Path


class DataSource(ABC):
    """Abstract glucose reading source."""

    def __init__(self, paths: SourcePaths, tz: tzinfo | None = None) -> None:
        """Create a data source.

        Args:
            paths: Source paths configuration.
            tz: Zone assigned to naive timestamps (default UTC).
        """
        self._paths = paths
        self._tz = tz or dateutil_tz.UTC

    def validate(self) -> None:
        """Validate that the source path exists.

        Raises:
            FileNotFoundError: If the path is missing.
        """
        if not self._paths.root.exists():
            raise FileNotFoundError(str(self._paths.root))

    @abstractmethod
    def load_readings(self, path: Path) -> list[GlucoseReading]:
        """Parse a file into readings sorted by timestamp."""

    def _localize(self, dt: datetime) -> datetime:
        if dt.tzinfo is None:
            return dt.replace(tzinfo=self._tz)
        return dt
