from __future__ import annotations

import operator
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from langchain_core.output_parsers import PydanticOutputParser
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from .errors import DataValidationError

Record = dict[str, Any]
Data = list[Record]

_DATA_ADAPTER: TypeAdapter[Data] = TypeAdapter(Data)


def validate_data(obj: Any) -> Data:
    """
    Validate that `obj` is a JSON array of objects.

    Only lists are accepted (no tuples, sets or generators). Records are
    returned as-is (no coercion of values).
    """
    if not isinstance(obj, list):
        raise DataValidationError(f"Data must be a list of JSON objects, got {type(obj).__name__}")
    try:
        return _DATA_ADAPTER.validate_python(obj)
    except ValidationError as e:
        raise DataValidationError(f"Data must be a list of JSON objects: {e.error_count()} error(s)") from e


def merge_data(current: Optional[Data], update: Data) -> Data:
    """Reducer for the `data` channel: append and re-validate."""
    return validate_data([*(current or []), *update])


class _CamelModel(BaseModel):
    """Snake_case attributes, camelCase JSON keys."""

    model_config = ConfigDict(populate_by_name=True)

    def to_json_obj(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class GraphType(str, Enum):
    """Chart types the question generator may propose."""

    HISTOGRAM = "histogram"
    DENSITY_PLOT = "density-plot"
    BOXPLOT = "boxplot"
    VIOLIN_PLOT = "violin-plot"
    LOLLIPOP_PLOT = "lollipop-plot"
    BARPLOT = "barplot"
    SCATTERPLOT = "scatterplot"
    CONNECTED_SCATTERPLOT = "connected-scatterplot"
    AREA_PLOT = "area-plot"
    STACKED_AREA = "stacked-area"
    STREAMGRAPH = "streamgraph"
    HEATMAP = "heatmap"
    TREEMAP = "treemap"
    VENN_DIAGRAM = "venn-diagram"
    GROUPED_SCATTER = "grouped-scatter"
    NETWORK = "network"
    DENDROGRAM = "dendrogram"
    HIERARCHICAL_EDGE_BUNDLING = "hierarchical-edge-bundling"
    LINE_CHART = "line-chart"


class PointCount(str, Enum):
    """Whether a chart shows few or many data points."""

    FEW = "few"
    MANY = "many"


class FieldRange(_CamelModel):
    """
    Value range of a field.

    Numeric fields carry min/max; non-numeric fields carry the distinct
    stringified values observed.
    """
    min: Optional[float] = None
    max: Optional[float] = None
    unique_values: Optional[List[Any]] = Field(default=None, alias="uniqueValues")


class FieldMetadata(_CamelModel):
    """
    Profile of one field plus its model-written description.

    total_count: number of present (non-missing) values
    missing_count: number of records where the field is absent or null
    """
    type: str
    description: str = ""
    range: Optional[FieldRange] = None
    missing_count: int = Field(alias="missingCount")
    total_count: int = Field(alias="totalCount")
    examples: Optional[List[Any]] = None


class QuestionDraft(_CamelModel):
    """A visualization question as returned by the model (no id yet)."""

    question: str
    type: GraphType
    fields: List[str]
    description: str


class VisualizationQuestion(QuestionDraft):
    id: str


class QuestionBatch(_CamelModel):
    """Top-level shape the question generator must answer with."""

    questions: List[QuestionDraft]


class DatasetMetadata(_CamelModel):
    fields: Dict[str, FieldMetadata] = Field(default_factory=dict)
    row_count: int = Field(default=0, alias="rowCount")
    summary: str = ""
    data_quality_issues: Optional[List[str]] = Field(default=None, alias="dataQualityIssues")
    questions: Optional[List[VisualizationQuestion]] = None


class GraphState(BaseModel):
    """
    State flowing through the analysis graph.

    data: the records under analysis (appended through merge_data)
    metadata: filled in by the analyzer, extended by the question generator
    events: per-node outcomes (appended, never replaced)
    """
    data: Annotated[Data, merge_data] = Field(default_factory=list)
    metadata: Optional[DatasetMetadata] = None
    events: Annotated[list[dict[str, Any]], operator.add] = Field(default_factory=list)


def question_format_instructions() -> str:
    """Format instructions appended to the question generator system prompt."""
    return PydanticOutputParser(pydantic_object=QuestionBatch).get_format_instructions()
