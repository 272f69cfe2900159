from __future__ import annotations

import json
from pathlib import Path

import pandas as pd

from .errors import DataValidationError
from .models import Data, validate_data

SUPPORTED_SUFFIXES = (".json", ".jsonl", ".ndjson", ".csv")


def frame_to_records(df: pd.DataFrame) -> Data:
    """
    Convert a DataFrame into JSON-like records.

    NaN/NaT become None (treated as missing by the profiler); numpy scalars
    become plain Python values.
    """
    obj = df.astype(object).where(pd.notna(df), None)
    return [{str(k): v for k, v in row.items()} for row in obj.to_dict(orient="records")]


def load_records(path: Path) -> Data:
    """
    Load tabular records from a JSON array, JSON lines or CSV file.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".csv":
        return validate_data(frame_to_records(pd.read_csv(path)))

    if suffix in (".jsonl", ".ndjson"):
        records = []
        for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as e:
                raise DataValidationError(f"{path.name}:{lineno}: invalid JSON: {e}") from e
        return validate_data(records)

    if suffix == ".json":
        try:
            obj = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise DataValidationError(f"{path.name}: invalid JSON: {e}") from e
        return validate_data(obj)

    raise DataValidationError(
        f"Unsupported data file type '{path.suffix}' (expected one of {', '.join(SUPPORTED_SUFFIXES)})"
    )
