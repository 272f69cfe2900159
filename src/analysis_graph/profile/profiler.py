from __future__ import annotations

import json
import math
from collections import Counter
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence

import pandas as pd

from ..models import FieldMetadata, FieldRange

# Positions (as fractions of n - 1) of the sorted values kept as numeric samples.
SAMPLE_POSITIONS: tuple[float, ...] = (0.0, 0.25, 0.5, 0.75, 1.0)
CATEGORICAL_SAMPLE_SIZE = 5


@dataclass(frozen=True)
class ValueCount:
    value: str
    count: int
    frequency: float


@dataclass(frozen=True)
class NumericStats:
    min: float
    max: float
    mean: float
    std: float


@dataclass(frozen=True)
class FieldInspection:
    """Raw profiling result for one field, before it becomes FieldMetadata."""

    type: str
    samples: list[Any]
    total_values: int
    missing_values: int
    unique_values: Optional[list[ValueCount]] = None
    stats: Optional[NumericStats] = None


def is_missing(value: Any) -> bool:
    """None, NaN and infinities count as missing."""
    if value is None:
        return True
    return isinstance(value, float) and not math.isfinite(value)


def value_kind(value: Any) -> str:
    """Coarse type label of a single present value."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (dict, list, tuple)):
        return "object"
    return type(value).__name__


def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value, ensure_ascii=False, sort_keys=True)
    except (TypeError, ValueError):
        return str(value)


def inspect_field(data: Sequence[Mapping[str, Any]], field: str) -> FieldInspection:
    """Profile one field across all records.

    The field type is taken from the first present value. Numeric fields get
    min/max/mean/std (population) and percentile samples; every other type
    gets a frequency table and the first few values as samples.
    """

    values = [r[field] for r in data if field in r and not is_missing(r[field])]
    kind = value_kind(values[0]) if values else "unknown"
    missing = len(data) - len(values)

    if kind == "number":
        numbers = [v for v in values if value_kind(v) == "number"]
        return FieldInspection(
            type=kind,
            samples=percentile_samples(numbers),
            total_values=len(values),
            missing_values=missing,
            stats=numeric_stats(numbers),
        )

    return FieldInspection(
        type=kind,
        samples=values[:CATEGORICAL_SAMPLE_SIZE],
        total_values=len(values),
        missing_values=missing,
        unique_values=value_counts(values),
    )


def numeric_stats(numbers: Sequence[float]) -> Optional[NumericStats]:
    if not numbers:
        return None
    s = pd.Series(numbers, dtype="float64")
    return NumericStats(
        min=float(s.min()),
        max=float(s.max()),
        mean=float(s.mean()),
        std=float(s.std(ddof=0)),
    )


def percentile_samples(numbers: Sequence[float]) -> list[float]:
    """Sorted values at floor(p * (n - 1)) for each sample position, each index once."""
    ordered = sorted(numbers)
    if not ordered:
        return []
    last = len(ordered) - 1
    indexes = sorted({math.floor(p * last) for p in SAMPLE_POSITIONS})
    return [ordered[i] for i in indexes]


def value_counts(values: Sequence[Any]) -> list[ValueCount]:
    if not values:
        return []
    counts = Counter(stringify(v) for v in values)
    total = float(len(values))
    return [
        ValueCount(value=str(value), count=int(count), frequency=int(count) / total)
        for value, count in counts.items()
    ]


def build_field_metadata(inspection: FieldInspection) -> FieldMetadata:
    """Turn an inspection into FieldMetadata with an empty description."""

    if inspection.stats is not None:
        rng = FieldRange(min=inspection.stats.min, max=inspection.stats.max)
    else:
        uniques = inspection.unique_values or []
        rng = FieldRange(unique_values=[u.value for u in uniques])

    return FieldMetadata(
        type=inspection.type,
        description="",
        range=rng,
        missing_count=inspection.missing_values,
        total_count=inspection.total_values,
        examples=list(inspection.samples),
    )


def profile_dataset(data: Sequence[Mapping[str, Any]]) -> dict[str, FieldMetadata]:
    """Profile every field named by the first record, in key order."""

    if not data:
        return {}
    return {str(field): build_field_metadata(inspect_field(data, field)) for field in data[0].keys()}


def data_quality_issues(fields: Mapping[str, FieldMetadata]) -> list[str]:
    return [
        f"{name}: {meta.missing_count} missing values out of {meta.total_count}"
        for name, meta in fields.items()
        if meta.missing_count > 0
    ]
