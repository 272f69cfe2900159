from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Union

from langgraph.graph import END, START, StateGraph
from langgraph.graph.state import CompiledStateGraph

from .config import ModelSettings, Settings
from .llm import ChatModel, default_model_factory
from .models import GraphState, validate_data
from .nodes import data_analyzer, question_generator

logger = logging.getLogger(__name__)

ModelFactory = Callable[[Settings, ModelSettings], Optional[ChatModel]]


def create_analysis_graph(
    settings: Optional[Settings] = None,
    *,
    use_llm: bool = True,
    model_factory: ModelFactory = default_model_factory,
) -> CompiledStateGraph:
    """Build and compile the analyzer -> question_generator graph.

    Models come from `model_factory`; with `use_llm=False` (or when the
    factory returns None) both nodes run their deterministic fallbacks.
    """

    settings = settings or Settings.from_env()
    analyzer_model = model_factory(settings, settings.analyzer) if use_llm else None
    question_model = model_factory(settings, settings.question_generator) if use_llm else None

    def analyzer_node(state: GraphState) -> dict[str, Any]:
        logger.debug("Running node analyzer")
        return data_analyzer(state, model=analyzer_model)

    def question_generator_node(state: GraphState) -> dict[str, Any]:
        logger.debug("Running node question_generator")
        return question_generator(state, model=question_model, max_tool_rounds=settings.max_tool_rounds)

    workflow = StateGraph(GraphState)
    workflow.add_node("analyzer", analyzer_node)
    workflow.add_node("question_generator", question_generator_node)

    workflow.add_edge(START, "analyzer")
    workflow.add_edge("analyzer", "question_generator")
    workflow.add_edge("question_generator", END)

    return workflow.compile()


def run_graph(graph: CompiledStateGraph, state: Union[GraphState, Mapping[str, Any]]) -> GraphState:
    """Invoke a compiled graph on `state` and return the final GraphState.

    Input records are validated up front so bad input raises
    DataValidationError before any node runs.
    """

    data = state.data if isinstance(state, GraphState) else state.get("data")
    final = graph.invoke({"data": validate_data(data if data is not None else [])})
    return GraphState.model_validate(final)
