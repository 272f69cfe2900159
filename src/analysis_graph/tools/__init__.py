"""Visualization lookup tools offered to the question generator."""

from .visualization import (
    GRAPH_CATALOG,
    TOOLS_BY_NAME,
    VISUALIZATION_TOOLS,
    GraphInfo,
    SuggestGraphsArgs,
    call_tool,
    get_graph_catalog,
    suggest_graphs,
    suggested_graph_keys,
)

__all__ = [
    "GRAPH_CATALOG",
    "TOOLS_BY_NAME",
    "VISUALIZATION_TOOLS",
    "GraphInfo",
    "SuggestGraphsArgs",
    "call_tool",
    "get_graph_catalog",
    "suggest_graphs",
    "suggested_graph_keys",
]
