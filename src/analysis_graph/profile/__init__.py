"""Profile stage.

Descriptive statistics and samples per field. No model calls happen here;
the analyzer node layers model-written descriptions on top.
"""

from .profiler import (
    FieldInspection,
    NumericStats,
    ValueCount,
    build_field_metadata,
    data_quality_issues,
    inspect_field,
    profile_dataset,
)

__all__ = [
    "FieldInspection",
    "NumericStats",
    "ValueCount",
    "build_field_metadata",
    "data_quality_issues",
    "inspect_field",
    "profile_dataset",
]
