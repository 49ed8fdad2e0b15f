"""Configuración de la herramienta (entorno + flags de CLI)."""

from __future__ import annotations

from datetime import tzinfo
from pathlib import Path

from dateutil import tz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def resolve_timezone(name: str) -> tzinfo:
    """Resolve an IANA zone name.

    Raises:
        ValueError: If the zone is unknown.
    """
    zone = tz.gettz(name)
    if zone is None:
        raise ValueError(f"Unknown timezone: {name}")
    return zone


class AppConfig(BaseSettings):
    """Runtime configuration loaded from A1C_TOOL_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="A1C_TOOL_",
        frozen=True,
        populate_by_name=True,
    )

    timezone: str = Field(default="UTC", validation_alias="A1C_TOOL_TZ")
    output_dir: Path = Path.home() / "a1c_reports"
    log_level: str = "INFO"

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: str) -> str:
        resolve_timezone(value)
        return value

    @field_validator("output_dir")
    @classmethod
    def _expand_output_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()

    @property
    def tzinfo(self) -> tzinfo:
        """Resolved zone for naive timestamps and time-of-day buckets."""
        return resolve_timezone(self.timezone)

    def with_overrides(self, **overrides: object) -> AppConfig:
        """Return a copy with the non-None overrides applied.

        Raises:
            ValueError: If an overridden timezone is unknown.
        """
        values = {k: v for k, v in overrides.items() if v is not None}
        if "output_dir" in values:
            values["output_dir"] = Path(str(values["output_dir"])).expanduser()
        if "log_level" in values:
            values["log_level"] = str(values["log_level"]).upper()
        updated = self.model_copy(update=values)
        resolve_timezone(updated.timezone)
        return updated


def load_config() -> AppConfig:
    """Build config from the environment."""
    return AppConfig()
