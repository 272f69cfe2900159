from __future__ import annotations

import json
from pathlib import Path

import pytest

from analysis_graph.errors import DataValidationError
from analysis_graph.ingest import load_records


def test_load_json_array(tmp_path: Path) -> None:
    p = tmp_path / "data.json"
    p.write_text(json.dumps([{"a": 1, "b": "x"}, {"a": None}]), encoding="utf-8")
    assert load_records(p) == [{"a": 1, "b": "x"}, {"a": None}]


def test_load_jsonl_skips_blank_lines(tmp_path: Path) -> None:
    p = tmp_path / "data.jsonl"
    p.write_text('{"a": 1}\n\n{"a": 2}\n', encoding="utf-8")
    assert load_records(p) == [{"a": 1}, {"a": 2}]


def test_load_csv_turns_blank_cells_into_none(tmp_path: Path) -> None:
    p = tmp_path / "data.csv"
    p.write_text("a,b\n1,x\n,y\n", encoding="utf-8")
    records = load_records(p)
    assert records == [{"a": 1.0, "b": "x"}, {"a": None, "b": "y"}]


def test_json_object_is_rejected(tmp_path: Path) -> None:
    p = tmp_path / "data.json"
    p.write_text(json.dumps({"a": 1}), encoding="utf-8")
    with pytest.raises(DataValidationError):
        load_records(p)


def test_invalid_json_is_rejected(tmp_path: Path) -> None:
    p = tmp_path / "data.jsonl"
    p.write_text('{"a": 1}\n{oops\n', encoding="utf-8")
    with pytest.raises(DataValidationError) as ei:
        load_records(p)
    assert "data.jsonl:2" in str(ei.value)


def test_unsupported_suffix(tmp_path: Path) -> None:
    p = tmp_path / "data.xlsx"
    p.write_bytes(b"")
    with pytest.raises(DataValidationError):
        load_records(p)


def test_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_records(tmp_path / "nope.json")
