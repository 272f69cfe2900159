"""Profile tabular data, describe it with a language model and propose visualization questions."""

from .graph import create_analysis_graph, run_graph
from .models import (
    DatasetMetadata,
    FieldMetadata,
    FieldRange,
    GraphState,
    GraphType,
    VisualizationQuestion,
)
from .pipeline import RunResult, run_pipeline

__all__ = [
    "DatasetMetadata",
    "FieldMetadata",
    "FieldRange",
    "GraphState",
    "GraphType",
    "RunResult",
    "VisualizationQuestion",
    "create_analysis_graph",
    "run_graph",
    "run_pipeline",
]
