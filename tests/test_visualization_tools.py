from __future__ import annotations

import json

import pytest

from analysis_graph.errors import ToolCallError, ToolNotFoundError
from analysis_graph.llm import ToolCall
from analysis_graph.models import GraphType
from analysis_graph.tools import (
    GRAPH_CATALOG,
    VISUALIZATION_TOOLS,
    call_tool,
    get_graph_catalog,
    suggest_graphs,
)


def _keys(payload: str) -> list[str]:
    return [g["key"] for g in json.loads(payload)]


def test_catalog_covers_every_graph_type() -> None:
    assert [g.key for g in GRAPH_CATALOG] == [t.value for t in GraphType]
    catalog = json.loads(get_graph_catalog())
    assert len(catalog) == 19
    assert set(catalog[0]) == {"key", "description"}


@pytest.mark.parametrize(
    "numeric,categorical,ordered,points,expected",
    [
        (1, 0, False, "few", ["boxplot", "lollipop-plot"]),
        (1, 0, False, "many", ["histogram", "density-plot", "boxplot", "violin-plot"]),
        (2, 0, True, "many", ["connected-scatterplot", "area-plot", "line-chart"]),
        (2, 0, False, "many", ["scatterplot"]),
        (3, 0, True, "many", ["stacked-area", "streamgraph", "line-chart"]),
        (4, 0, False, "few", ["scatterplot", "heatmap"]),
        (0, 0, False, "many", []),
        (0, 1, False, "few", ["lollipop-plot", "barplot"]),
        (0, 1, False, "many", ["barplot"]),
        (0, 2, False, "many", ["treemap", "venn-diagram", "grouped-scatter", "network"]),
        (1, 1, False, "few", ["lollipop-plot", "barplot"]),
        (1, 1, True, "many", ["boxplot", "violin-plot", "barplot"]),
        (2, 1, False, "many", ["boxplot", "violin-plot", "barplot", "heatmap"]),
        (2, 2, True, "many", ["boxplot", "violin-plot", "barplot", "connected-scatterplot", "area-plot", "heatmap"]),
    ],
)
def test_suggest_graphs_rule_table(numeric, categorical, ordered, points, expected) -> None:
    # Output follows catalog order, not rule order.
    assert _keys(suggest_graphs(numeric, categorical, ordered, points)) == expected


def test_tool_schemas_are_openai_functions() -> None:
    names = [t["function"]["name"] for t in VISUALIZATION_TOOLS]
    assert names == ["getGraphCatalog", "suggestGraphs"]
    params = VISUALIZATION_TOOLS[1]["function"]["parameters"]
    assert params["properties"]["pointCount"]["enum"] == ["few", "many"]
    assert set(params["required"]) == {"numericCount", "categoricalCount", "numericOrdered", "pointCount"}


def test_call_tool_returns_tool_message() -> None:
    msg = call_tool(
        ToolCall(
            id="call_1",
            name="suggestGraphs",
            args={"numericCount": 2, "categoricalCount": 0, "numericOrdered": False, "pointCount": "many"},
        )
    )
    assert msg.role == "tool"
    assert msg.tool_call_id == "call_1"
    assert msg.name == "suggestGraphs"
    assert _keys(msg.content) == ["scatterplot"]


def test_call_tool_catalog_ignores_args() -> None:
    msg = call_tool(ToolCall(id="c", name="getGraphCatalog", args={}))
    assert len(json.loads(msg.content)) == 19


def test_call_tool_unknown_name() -> None:
    with pytest.raises(ToolNotFoundError) as ei:
        call_tool(ToolCall(id="c", name="drawChart", args={}))
    assert "drawChart" in str(ei.value)


def test_call_tool_requires_id() -> None:
    with pytest.raises(ToolCallError):
        call_tool(ToolCall(id="", name="getGraphCatalog", args={}))


def test_call_tool_rejects_bad_arguments() -> None:
    with pytest.raises(ToolCallError):
        call_tool(ToolCall(id="c", name="suggestGraphs", args={"numericCount": 1, "pointCount": "lots"}))
