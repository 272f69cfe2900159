from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from itertools import combinations
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from ..config import DEFAULT_MAX_TOOL_ROUNDS
from ..errors import QuestionParseError, ToolLoopLimitError
from ..llm import ChatMessage, ChatModel, ToolCall, human_message, strip_markdown_code_block, system_message
from ..models import DatasetMetadata, GraphState, GraphType, QuestionBatch, VisualizationQuestion
from ..prompts import question_generator_prompt, question_request_prompt
from ..tools import GRAPH_CATALOG, VISUALIZATION_TOOLS, call_tool, suggested_graph_keys

logger = logging.getLogger(__name__)

# Fallback heuristics (no model configured).
MAX_FALLBACK_QUESTIONS = 10
MAX_CATEGORY_CARDINALITY = 25
FEW_POINTS_THRESHOLD = 30


@dataclass(frozen=True)
class ToolLoopResult:
    final: ChatMessage
    messages: list[ChatMessage]
    tool_calls: list[ToolCall] = field(default_factory=list)
    rounds: int = 0


def run_tool_loop(
    model: ChatModel,
    messages: Sequence[ChatMessage],
    *,
    max_rounds: int = DEFAULT_MAX_TOOL_ROUNDS,
) -> ToolLoopResult:
    """Call the model until it answers without requesting tools.

    Each round appends the model's tool-calling message followed by one tool
    message per call, in the order the calls were requested. More than
    `max_rounds` tool-calling rounds raises ToolLoopLimitError.
    """

    current = list(messages)
    executed: list[ToolCall] = []
    rounds = 0

    response = model.invoke(current)
    while response.tool_calls:
        if rounds >= max_rounds:
            raise ToolLoopLimitError(f"Model still requesting tools after {max_rounds} round(s)")
        rounds += 1
        logger.debug("Tool round %d: %d call(s)", rounds, len(response.tool_calls))

        results = [call_tool(tc) for tc in response.tool_calls]
        executed.extend(response.tool_calls)
        current = [*current, response, *results]

        response = model.invoke(current)

    logger.debug("No more tool calls after %d round(s)", rounds)
    return ToolLoopResult(final=response, messages=current, tool_calls=executed, rounds=rounds)


def parse_questions(content: str) -> list[VisualizationQuestion]:
    """Parse the model's final answer and give each question a fresh id."""

    text = strip_markdown_code_block(content)
    try:
        batch = QuestionBatch.model_validate(json.loads(text))
    except json.JSONDecodeError as e:
        raise QuestionParseError(f"Question output is not valid JSON: {e}") from e
    except ValidationError as e:
        raise QuestionParseError(f"Question output does not match the schema: {e.error_count()} error(s)") from e

    return [
        VisualizationQuestion(id=str(uuid.uuid4()), **q.model_dump())
        for q in batch.questions
    ]


def _first_suggestion(numeric: int, categorical: int, point_count: str) -> GraphType:
    keys = set(suggested_graph_keys(numeric, categorical, False, point_count))  # type: ignore[arg-type]
    first = next(g.key for g in GRAPH_CATALOG if g.key in keys)
    return GraphType(first)


def fallback_questions(metadata: DatasetMetadata) -> list[VisualizationQuestion]:
    """Deterministic questions derived from the profile alone.

    One distribution question per numeric field, one breakdown per
    low-cardinality categorical field, then numeric pairs and
    numeric-by-category comparisons, capped at MAX_FALLBACK_QUESTIONS.
    """

    point_count = "few" if metadata.row_count < FEW_POINTS_THRESHOLD else "many"
    numeric = [n for n, m in metadata.fields.items() if m.type == "number"]
    categorical = []
    for name, meta in metadata.fields.items():
        if meta.type not in ("string", "boolean"):
            continue
        uniques = meta.range.unique_values if meta.range is not None else None
        if uniques and len(uniques) <= MAX_CATEGORY_CARDINALITY:
            categorical.append(name)

    drafts: list[tuple[str, GraphType, list[str], str]] = []
    for name in numeric:
        drafts.append(
            (
                f"How are values of {name} distributed?",
                _first_suggestion(1, 0, point_count),
                [name],
                f"Shows the spread, central tendency and outliers of {name}.",
            )
        )
    for name in categorical:
        drafts.append(
            (
                f"How often does each {name} value occur?",
                _first_suggestion(0, 1, point_count),
                [name],
                f"Compares the frequency of each category of {name}.",
            )
        )
    for a, b in combinations(numeric, 2):
        drafts.append(
            (
                f"Is there a relationship between {a} and {b}?",
                _first_suggestion(2, 0, point_count),
                [a, b],
                f"Reveals correlation or clustering between {a} and {b}.",
            )
        )
    for num in numeric:
        for cat in categorical:
            drafts.append(
                (
                    f"How does {num} differ across {cat}?",
                    _first_suggestion(1, 1, point_count),
                    [num, cat],
                    f"Compares the distribution of {num} between {cat} groups.",
                )
            )

    return [
        VisualizationQuestion(id=str(uuid.uuid4()), question=q, type=t, fields=f, description=d)
        for q, t, f, d in drafts[:MAX_FALLBACK_QUESTIONS]
    ]


def question_generator(
    state: GraphState,
    *,
    model: Optional[ChatModel] = None,
    max_tool_rounds: int = DEFAULT_MAX_TOOL_ROUNDS,
) -> dict[str, Any]:
    """Propose visualization questions for the analyzed dataset.

    The model may call getGraphCatalog / suggestGraphs before answering.
    Without a model, questions come from fallback_questions(). Any failure
    keeps the existing metadata and returns an empty question list.
    """

    try:
        if state.metadata is None:
            raise ValueError("Metadata required for question generation")
        metadata = state.metadata

        event: dict[str, Any] = {"node": "question_generator", "ok": True, "llm": model is not None}
        if model is None:
            questions = fallback_questions(metadata)
        else:
            bound = model.bind_tools(VISUALIZATION_TOOLS)
            messages = [
                system_message(question_generator_prompt()),
                human_message(question_request_prompt(metadata.summary, metadata.fields)),
            ]
            result = run_tool_loop(bound, messages, max_rounds=max_tool_rounds)
            questions = parse_questions(result.final.content)
            event["tool_rounds"] = result.rounds
            event["tool_calls"] = [{"name": tc.name, "args": tc.args} for tc in result.tool_calls]

        logger.debug("Generated %d question(s)", len(questions))
        event["questions"] = len(questions)
        return {
            "metadata": metadata.model_copy(update={"questions": questions}),
            "events": [event],
        }
    except Exception as e:  # noqa: BLE001
        logger.exception("Error in question generator")
        previous = state.metadata
        return {
            "metadata": DatasetMetadata(
                fields=previous.fields if previous else {},
                row_count=previous.row_count if previous else 0,
                summary=previous.summary if previous else "Error generating questions",
                data_quality_issues=(previous.data_quality_issues or []) if previous else [],
                questions=[],
            ),
            "events": [{"node": "question_generator", "ok": False, "error": f"{type(e).__name__}: {e}"}],
        }
