"""Generación de Excel formateado con lecturas y estimación de A1C."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import pandas as pd
from openpyxl.styles import Alignment, Border, Font, Side

from a1c_tool.summary import RunEstimate, daily_glucose_summary

_WEEKDAYS: tuple[str, ...] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

_HEADER_MAP: dict[str, str] = {
    "weekday": "Day",
    "datetime": "Date / Time",
    "glucose_mg_dl": "Glucose (mg/dL)",
    "meal_context": "Meal context",
    "time_of_day": "Time of day",
    "notes": "Notes",
}

_DAILY_HEADER_MAP: dict[str, str] = {
    "date": "Date",
    "glucose_count": "Count",
    "glucose_min": "Min (mg/dL)",
    "glucose_max": "Max (mg/dL)",
    "glucose_avg": "Average (mg/dL)",
}

_COLUMN_WIDTHS: tuple[tuple[str, int], ...] = (
    ("Day", 6),
    ("Date / Time", 18),
    ("Glucose (mg/dL)", 14),
    ("Meal context", 14),
    ("Time of day", 12),
    ("Notes", 30),
    ("Metric", 28),
    ("Value", 60),
    ("Date", 12),
    ("Count", 8),
    ("Min (mg/dL)", 12),
    ("Max (mg/dL)", 12),
    ("Average (mg/dL)", 16),
)

_NUMBER_FORMATS: dict[str, str] = {
    "Date / Time": "dd/mm/yyyy hh:mm",
    "Glucose (mg/dL)": "0",
    "Date": "dd/mm/yyyy",
    "Average (mg/dL)": "0.00",
}


@dataclass(frozen=True)
class ExcelLayout:
    """Layout/formatting configuration for the run report."""

    readings_sheet: str = "Readings"
    summary_sheet: str = "A1C estimate"
    daily_sheet: str = "Daily"


def _weekday_label(i: object) -> str:
    """Convierte índice 0-6 (lunes-domingo) a etiqueta de 3 letras."""
    try:
        if i is None or (isinstance(i, float) and pd.isna(i)):
            return ""
        if isinstance(i, int | float):
            idx = int(i)
            return _WEEKDAYS[idx] if 0 <= idx < 7 else ""
        return ""
    except (ValueError, TypeError):
        return ""


def _strip_tz(dt: Any) -> Any:
    if isinstance(dt, datetime) and dt.tzinfo is not None:
        return dt.replace(tzinfo=None)
    return dt


def _prepare_readings(frame: pd.DataFrame) -> pd.DataFrame:
    """Añade día de semana, quita timezone y columnas redundantes."""
    export_df = frame.copy()
    if "datetime" in export_df.columns and not export_df.empty:
        # Excel has no timezones: keep each reading's wall-clock time.
        stamps = pd.to_datetime(
            export_df["datetime"].map(_strip_tz), errors="coerce"
        )
        export_df["datetime"] = stamps
        export_df.insert(0, "weekday", stamps.dt.weekday.map(_weekday_label))
    export_df = export_df.drop(
        columns=[c for c in ("date", "time") if c in export_df.columns]
    )
    return export_df.rename(columns=_HEADER_MAP)


def summary_rows(estimate: RunEstimate) -> list[tuple[str, object]]:
    """Rows (metric, value) for the summary sheet."""
    verdict = estimate.verdict
    return [
        ("Readings", estimate.readings_count),
        ("Mean glucose (mg/dL)", estimate.mean_glucose),
        ("Estimated A1C (%)", estimate.estimated_a1c),
        ("Estimated average glucose (mg/dL)", estimate.estimated_average_glucose),
        ("Risk level", estimate.risk.risk_level.value if estimate.risk else None),
        ("Interpretation", estimate.risk.interpretation if estimate.risk else None),
        ("Reliable estimate", "yes" if verdict.is_valid else "no"),
        ("Reason", verdict.reason.value if verdict.reason else None),
    ]


def write_run_xlsx(
    frame: pd.DataFrame,
    estimate: RunEstimate,
    out_path: Path,
    layout: ExcelLayout,
) -> None:
    """Write the run report: estimate, readings and per-day aggregates.

    Args:
        frame: Readings DataFrame from ``readings_to_frame``.
        estimate: Run estimate to put in the summary sheet.
        out_path: Output path for the XLSX file.
        layout: Excel layout parameters.
    """
    out_path.parent.mkdir(parents=True, exist_ok=True)

    readings_df = _prepare_readings(frame)
    summary_df = pd.DataFrame(summary_rows(estimate), columns=["Metric", "Value"])
    daily_df = daily_glucose_summary(frame).rename(columns=_DAILY_HEADER_MAP)

    with pd.ExcelWriter(out_path, engine="openpyxl") as writer:
        summary_df.to_excel(writer, index=False, sheet_name=layout.summary_sheet)
        readings_df.to_excel(writer, index=False, sheet_name=layout.readings_sheet)
        daily_df.to_excel(writer, index=False, sheet_name=layout.daily_sheet)
        _format_sheet(writer.book[layout.summary_sheet])
        _format_sheet(writer.book[layout.readings_sheet])
        _format_sheet(writer.book[layout.daily_sheet])


def _style_header_row(ws: Any) -> None:
    """Aplica fuente negrita, alineación y borde a la fila de cabecera."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    header_font = Font(bold=True)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for cell in ws[1]:
        cell.font = header_font
        cell.alignment = center
        cell.border = border


def _style_body_rows(ws: Any) -> None:
    """Aplica alineación y borde a las filas de datos."""
    thin = Side(style="thin")
    border = Border(left=thin, right=thin, top=thin, bottom=thin)
    center = Alignment(horizontal="center", vertical="center", wrap_text=True)
    for row in ws.iter_rows(min_row=2):
        for cell in row:
            cell.alignment = center
            cell.border = border


def _get_header_col_index(ws: Any) -> dict[str, int]:
    """Devuelve mapa nombre de cabecera -> índice de columna (1-based)."""
    headers = [str(cell.value) for cell in ws[1]]
    return {name: idx + 1 for idx, name in enumerate(headers)}


def _apply_column_widths(ws: Any, col_index: dict[str, int]) -> None:
    """Establece anchos de columna para evitar ###."""
    for header, width in _COLUMN_WIDTHS:
        idx = col_index.get(header)
        if idx is not None:
            letter = ws.cell(row=1, column=idx).column_letter
            ws.column_dimensions[letter].width = width


def _apply_number_formats(ws: Any, col_index: dict[str, int]) -> None:
    for row in ws.iter_rows(min_row=2):
        for header, fmt in _NUMBER_FORMATS.items():
            idx = col_index.get(header)
            if idx is not None:
                row[idx - 1].number_format = fmt


def _format_sheet(ws: Any) -> None:
    """Apply borders, widths and number formats to a worksheet.

    Args:
        ws: openpyxl worksheet.
    """
    _style_header_row(ws)
    _style_body_rows(ws)
    col_index = _get_header_col_index(ws)
    _apply_column_widths(ws, col_index)
    _apply_number_formats(ws, col_index)
