"""CLI para estimar A1C de una corrida a partir de una exportación de lecturas."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from a1c_tool.config import AppConfig, load_config
from a1c_tool.excel_writer import ExcelLayout, write_run_xlsx
from a1c_tool.logging_config import configure_logging
from a1c_tool.model import GlucoseReading
from a1c_tool.quality import time_of_day_counts
from a1c_tool.sources.accuchek import AccuChekPaths, AccuChekSource
from a1c_tool.sources.base import DataSource
from a1c_tool.sources.csv_readings import CsvReadingsPaths, CsvReadingsSource
from a1c_tool.summary import RunEstimate, estimate_run, readings_to_frame

logger = logging.getLogger(__name__)

FORMATS = ("accuchek", "csv")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed argparse namespace.
    """
    parser = argparse.ArgumentParser(
        description="Estimated A1C and data quality for a run of glucose readings."
    )
    parser.add_argument(
        "--file",
        required=True,
        help="Reading export (Accu-Chek JSON or CSV).",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default=None,
        help="Export format (default: from file suffix).",
    )
    parser.add_argument(
        "--tz",
        default=None,
        help="IANA timezone for readings (env A1C_TOOL_TZ).",
    )
    parser.add_argument(
        "--xlsx",
        nargs="?",
        const="",
        default=None,
        help="Write an Excel report; without a path, goes to the output dir.",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (env A1C_TOOL_LOG_LEVEL).",
    )
    return parser.parse_args(argv)


def detect_format(path: Path, explicit: str | None) -> str:
    """Pick the export format from the flag or the file suffix."""
    if explicit:
        return explicit
    if path.suffix.lower() == ".csv":
        return "csv"
    if path.suffix.lower() == ".json":
        return "accuchek"
    raise ValueError(f"Cannot detect format of {path.name}; use --format")


def build_source(path: Path, fmt: str, cfg: AppConfig) -> DataSource:
    if fmt == "csv":
        return CsvReadingsSource(CsvReadingsPaths(root=path), tz=cfg.tzinfo)
    return AccuChekSource(AccuChekPaths(root=path), tz=cfg.tzinfo)


def format_report(
    readings: Sequence[GlucoseReading], estimate: RunEstimate, cfg: AppConfig
) -> list[str]:
    """Human-readable lines for the terminal."""
    lines = [f"Readings: {estimate.readings_count}"]
    if estimate.estimated_a1c is None:
        lines.append("Estimated A1C: not enough readings")
    else:
        lines.append(f"Mean glucose: {estimate.mean_glucose} mg/dL")
        lines.append(f"Estimated A1C: {estimate.estimated_a1c}%")
        lines.append(
            f"Estimated average glucose: {estimate.estimated_average_glucose} mg/dL"
        )
    if estimate.risk is not None:
        lines.append(
            f"Risk: {estimate.risk.risk_level.value} ({estimate.risk.interpretation})"
        )
    counts = time_of_day_counts(readings, cfg.tzinfo)
    lines.append(
        "Time of day: " + ", ".join(f"{k}={v}" for k, v in counts.items())
    )
    if estimate.verdict.reason is not None:
        lines.append(f"Not reliable: {estimate.verdict.reason.value}")
    else:
        lines.append("Reliable estimate: yes")
    return lines


def main(argv: Sequence[str] | None = None) -> int:
    """Run the estimation CLI.

    Returns:
        Exit code (0 on success).
    """
    ns = parse_args(argv)
    try:
        cfg = load_config().with_overrides(timezone=ns.tz, log_level=ns.log_level)
        configure_logging(cfg.log_level)

        path = Path(ns.file).expanduser().resolve()
        source = build_source(path, detect_format(path, ns.format), cfg)
        source.validate()
        readings = source.load_readings(path)
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        print(f"ERROR: {exc}")
        return 1

    estimate = estimate_run(readings, cfg.tzinfo)
    for line in format_report(readings, estimate, cfg):
        print(line)

    if ns.xlsx is not None:
        if ns.xlsx:
            out_path = Path(ns.xlsx).expanduser()
        else:
            ts = datetime.now(tz=cfg.tzinfo).strftime("%Y-%m-%d_%H-%M-%S")
            out_path = cfg.output_dir / f"a1c_run_{ts}.xlsx"
        frame = readings_to_frame(readings, cfg.tzinfo)
        write_run_xlsx(frame, estimate, out_path, ExcelLayout())
        logger.info("Report written to %s", out_path)
        print(f"OK: Output: {out_path}")
    return 0
