from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ToolCallError, ToolNotFoundError
from ..llm.messages import ChatMessage, ToolCall, tool_message
from ..models import PointCount

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphInfo:
    key: str
    description: str


GRAPH_CATALOG: tuple[GraphInfo, ...] = (
    GraphInfo("histogram", "Use for 1 numeric variable with MANY data points (not necessarily ordered). Shows distribution."),
    GraphInfo("density-plot", "Use for 1 numeric variable with MANY data points to visualize the smooth distribution shape."),
    GraphInfo("boxplot", "Use for 1+ numeric variables (often grouped by category) to compare distributions, outliers, median, etc."),
    GraphInfo("violin-plot", "Similar to a boxplot but shows the full distribution shape. Useful for 1+ numeric variables, especially grouped."),
    GraphInfo("lollipop-plot", "Good for FEW data points, often along a categorical axis (1 numeric + 1 categorical). Emphasizes differences."),
    GraphInfo("barplot", "Displays numeric values aggregated by 1 or more categorical variables (counts, sums, etc.)."),
    GraphInfo("scatterplot", "Use for 2 numeric variables that are NOT ordered. Shows relationship, correlation, clustering."),
    GraphInfo("connected-scatterplot", "Use for 2 numeric variables that ARE ordered (e.g. time or a sequence). Points connected in order."),
    GraphInfo("area-plot", "Use for numeric trends over an ORDERED axis (often time). Fills area under the line."),
    GraphInfo("stacked-area", "Visualizes multiple numeric series over an ORDERED axis by stacking their areas."),
    GraphInfo("streamgraph", "Variation of stacked area for multiple ordered numeric series, creating a flowing shape."),
    GraphInfo("heatmap", "Uses color to represent numeric values across 2D space (numeric vs. numeric or numeric vs. category)."),
    GraphInfo("treemap", "Represents hierarchical or nested categorical data using nested rectangles sized by a numeric value."),
    GraphInfo("venn-diagram", "Shows overlaps among 2+ categorical sets."),
    GraphInfo("grouped-scatter", "Scatterplot points grouped by categories, can show subgroups in scatter form."),
    GraphInfo("network", "Visualizes relationships (edges) between entities (nodes)."),
    GraphInfo("dendrogram", "Shows hierarchical relationships in a tree structure."),
    GraphInfo("hierarchical-edge-bundling", "Another approach to visualize hierarchical data with edges bundled to reduce clutter."),
    GraphInfo("line-chart", "Typically used for time series (1 numeric variable over an ordered axis). Points connected in chronological order."),
)


class SuggestGraphsArgs(BaseModel):
    """Arguments the model passes to suggestGraphs."""

    model_config = ConfigDict(populate_by_name=True)

    numeric_count: int = Field(alias="numericCount", ge=0)
    categorical_count: int = Field(alias="categoricalCount", ge=0)
    numeric_ordered: bool = Field(alias="numericOrdered")
    point_count: PointCount = Field(alias="pointCount")


def get_graph_catalog() -> str:
    """Catalog of every supported graph type and when to use it, as JSON."""
    return json.dumps([asdict(g) for g in GRAPH_CATALOG], indent=2)


def suggested_graph_keys(
    numeric_count: int,
    categorical_count: int,
    numeric_ordered: bool,
    point_count: PointCount,
) -> list[str]:
    """Rule table mapping a field combination to chart keys (unordered)."""

    few = point_count == "few"
    suggestions: list[str] = []

    if categorical_count == 0:
        # Only numeric variables
        if numeric_count == 1:
            if few:
                suggestions += ["lollipop-plot", "boxplot"]
            else:
                suggestions += ["histogram", "density-plot", "boxplot", "violin-plot"]
        elif numeric_count == 2:
            if numeric_ordered:
                suggestions += ["connected-scatterplot", "area-plot", "line-chart"]
            else:
                suggestions += ["scatterplot"]
        elif numeric_count >= 3:
            if numeric_ordered:
                suggestions += ["stacked-area", "streamgraph", "line-chart"]
            else:
                suggestions += ["heatmap", "scatterplot"]
    elif numeric_count == 0:
        # Only categorical variables
        if categorical_count == 1:
            suggestions.append("barplot")
            if few:
                suggestions.append("lollipop-plot")
        else:
            suggestions += ["venn-diagram", "treemap", "grouped-scatter", "network"]
    else:
        # Mixed numeric + categorical
        if numeric_count == 1 and categorical_count == 1:
            if few:
                suggestions += ["lollipop-plot", "barplot"]
            else:
                suggestions += ["boxplot", "violin-plot", "barplot"]
        else:
            suggestions += ["barplot", "boxplot", "violin-plot", "heatmap"]
            if numeric_ordered:
                suggestions += ["connected-scatterplot", "area-plot"]

    return suggestions


def suggest_graphs(
    numeric_count: int,
    categorical_count: int,
    numeric_ordered: bool,
    point_count: PointCount,
) -> str:
    """Catalog entries recommended for the given field combination, as JSON (catalog order)."""

    keys = set(suggested_graph_keys(numeric_count, categorical_count, numeric_ordered, point_count))
    return json.dumps([asdict(g) for g in GRAPH_CATALOG if g.key in keys], indent=2)


VISUALIZATION_TOOLS: list[dict[str, Any]] = [
    {
        "type": "function",
        "function": {
            "name": "getGraphCatalog",
            "description": "Returns a comprehensive catalog of available graph types and when to use them.",
            "parameters": {"type": "object", "properties": {}, "required": []},
        },
    },
    {
        "type": "function",
        "function": {
            "name": "suggestGraphs",
            "description": (
                "Suggests appropriate graph types based on the data structure "
                "(number of numeric/categorical variables, ordering, and point count)."
            ),
            "parameters": {
                "type": "object",
                "properties": {
                    "numericCount": {
                        "type": "number",
                        "description": "Number of numeric variables in consideration",
                    },
                    "categoricalCount": {
                        "type": "number",
                        "description": "Number of categorical variables in consideration",
                    },
                    "numericOrdered": {
                        "type": "boolean",
                        "description": "Whether the numeric variable(s) represent an ordered dimension (e.g. time/sequence)",
                    },
                    "pointCount": {
                        "type": "string",
                        "enum": ["few", "many"],
                        "description": "Whether there are few or many data points",
                    },
                },
                "required": ["numericCount", "categoricalCount", "numericOrdered", "pointCount"],
            },
        },
    },
]


def _run_get_graph_catalog(args: dict[str, Any]) -> str:
    return get_graph_catalog()


def _run_suggest_graphs(args: dict[str, Any]) -> str:
    try:
        parsed = SuggestGraphsArgs.model_validate(args)
    except ValidationError as e:
        raise ToolCallError(f"Invalid arguments for suggestGraphs: {e.error_count()} error(s)") from e
    return suggest_graphs(
        parsed.numeric_count,
        parsed.categorical_count,
        parsed.numeric_ordered,
        parsed.point_count,
    )


TOOLS_BY_NAME: dict[str, Callable[[dict[str, Any]], str]] = {
    "getGraphCatalog": _run_get_graph_catalog,
    "suggestGraphs": _run_suggest_graphs,
}


def call_tool(tool_call: ToolCall) -> ChatMessage:
    """Execute one tool call and wrap its output as a tool message."""

    logger.debug("Calling tool %s (id=%s) args=%s", tool_call.name, tool_call.id, tool_call.args)
    fn = TOOLS_BY_NAME.get(tool_call.name)
    if fn is None:
        raise ToolNotFoundError(f"Tool {tool_call.name} not found")
    if not tool_call.id:
        raise ToolCallError("Tool call ID is required")

    content = fn(dict(tool_call.args))
    logger.debug("Tool %s returned %d chars", tool_call.name, len(content))
    return tool_message(content, tool_call_id=tool_call.id, name=tool_call.name)
