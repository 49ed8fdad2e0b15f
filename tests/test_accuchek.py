from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

import pytest
from dateutil import tz

from a1c_tool.model import MealContext
from a1c_tool.sources.accuchek import (
    AccuChekPaths,
    AccuChekSource,
    _extract_json_list,
    _parse_timestamp,
)

_BA = tz.gettz("America/Argentina/Buenos_Aires")


def _write(path: Path, data: object) -> Path:
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_accuchek_parses_list(tmp_path: Path) -> None:
    p = _write(
        tmp_path / "accuchek_2026-01-31_11-57-00.json",
        [
            {"timestamp": "2026/01/31 11:57", "mg/dL": 119, "mmol/L": 6.611111},
            {"epoch": 1769774400, "mg/dL": 118, "mmol/L": 6.555556},
        ],
    )
    readings = AccuChekSource(AccuChekPaths(root=tmp_path)).load_readings(p)
    assert len(readings) == 2
    assert {r.value for r in readings} == {118.0, 119.0}


def test_validate_raises_when_root_missing(tmp_path: Path) -> None:
    missing = tmp_path / "noexiste"
    src = AccuChekSource(AccuChekPaths(root=missing))
    with pytest.raises(FileNotFoundError, match=str(missing)):
        src.validate()


def test_validate_accepts_a_single_file(tmp_path: Path) -> None:
    p = _write(tmp_path / "export.json", [])
    AccuChekSource(AccuChekPaths(root=p)).validate()


def test_load_readings_invalid_json_raises(tmp_path: Path) -> None:
    p = tmp_path / "bad.json"
    p.write_text("not json", encoding="utf-8")
    src = AccuChekSource(AccuChekPaths(root=tmp_path))
    with pytest.raises(json.JSONDecodeError):
        src.load_readings(p)


def test_load_readings_not_list_raises(tmp_path: Path) -> None:
    p = tmp_path / "obj.json"
    p.write_text('{"a": 1}', encoding="utf-8")
    src = AccuChekSource(AccuChekPaths(root=tmp_path))
    with pytest.raises(ValueError, match="must be a list"):
        src.load_readings(p)


def test_load_readings_skips_non_dict_and_missing_value(tmp_path: Path) -> None:
    p = _write(
        tmp_path / "mixed.json",
        [
            {"timestamp": "2026/01/31 08:00", "mg/dL": 100, "mmol/L": 5.55},
            {"timestamp": "2026/01/31 09:00", "mmol/L": 5.55},
            "string",
            42,
            None,
        ],
    )
    readings = AccuChekSource(AccuChekPaths(root=tmp_path)).load_readings(p)
    assert len(readings) == 1
    assert readings[0].value == 100.0


def test_load_readings_out_of_range_raises(tmp_path: Path) -> None:
    p = _write(tmp_path / "hi.json", [{"timestamp": "2026/01/31 08:00", "mg/dL": 650}])
    src = AccuChekSource(AccuChekPaths(root=tmp_path))
    with pytest.raises(ValueError, match="between 20 and 600"):
        src.load_readings(p)


def test_load_readings_missing_timestamp_and_epoch_raises(tmp_path: Path) -> None:
    p = _write(tmp_path / "no_ts.json", [{"mg/dL": 100}])
    src = AccuChekSource(AccuChekPaths(root=tmp_path))
    with pytest.raises(ValueError, match="Missing timestamp"):
        src.load_readings(p)


def test_load_readings_uses_source_timezone(tmp_path: Path) -> None:
    p = _write(tmp_path / "ts.json", [{"timestamp": "2026/01/31 11:57", "mg/dL": 119}])
    readings = AccuChekSource(AccuChekPaths(root=tmp_path), tz=_BA).load_readings(p)
    ts = readings[0].timestamp
    assert ts.strftime("%Y/%m/%d %H:%M") == "2026/01/31 11:57"
    assert ts.utcoffset() == timedelta(hours=-3)


def test_load_readings_defaults_to_utc(tmp_path: Path) -> None:
    p = _write(tmp_path / "ts.json", [{"timestamp": "2026/01/31 11:57", "mg/dL": 119}])
    readings = AccuChekSource(AccuChekPaths(root=tmp_path)).load_readings(p)
    assert readings[0].timestamp.utcoffset() == timedelta(0)


def test_load_readings_sorts_by_timestamp(tmp_path: Path) -> None:
    p = _write(
        tmp_path / "unsorted.json",
        [
            {"timestamp": "2026/01/31 14:00", "mg/dL": 120},
            {"timestamp": "2026/01/31 08:00", "mg/dL": 95},
        ],
    )
    readings = AccuChekSource(AccuChekPaths(root=tmp_path)).load_readings(p)
    assert [r.value for r in readings] == [95.0, 120.0]


def test_load_readings_maps_tag_and_note(tmp_path: Path) -> None:
    p = _write(
        tmp_path / "with_tag.json",
        [
            {"timestamp": "2026/01/31 07:00", "mg/dL": 95, "tag": "Fasting"},
            {"timestamp": "2026/01/31 14:00", "mg/dL": 150, "tag": "After meal"},
            {"timestamp": "2026/01/31 16:00", "mg/dL": 110, "tag": "Desp. Comida"},
            {
                "timestamp": "2026/01/31 20:00",
                "mg/dL": 118,
                "tag": "",
                "note": " pizza ",
            },
        ],
    )
    readings = AccuChekSource(AccuChekPaths(root=tmp_path)).load_readings(p)
    assert [r.meal_context for r in readings] == [
        MealContext.FASTING,
        MealContext.AFTER_MEAL,
        MealContext.OTHER,
        None,
    ]
    assert readings[3].notes == "pizza"
    assert readings[0].notes is None


def test_parse_timestamp_from_epoch() -> None:
    ts = _parse_timestamp(None, 1769774400, _BA)
    assert ts.tzinfo is not None


def test_parse_timestamp_empty_string_uses_epoch() -> None:
    assert _parse_timestamp("", 0, tz.UTC).year == 1970


def test_extract_json_list_with_leading_garbage() -> None:
    text = (
        "0.594510(   +0.000000):info: running as non-root\n"
        '[{"mg/dL": 100, "mmol/L": 5.55}]'
    )
    raw = _extract_json_list(text)
    assert isinstance(raw, list)
    assert raw[0]["mg/dL"] == 100
