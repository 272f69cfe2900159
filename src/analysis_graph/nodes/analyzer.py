from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..llm import ChatModel, human_message, system_message
from ..models import DatasetMetadata, FieldMetadata, GraphState
from ..profile import data_quality_issues, profile_dataset
from ..prompts import (
    DATASET_SUMMARY_PROMPT,
    FIELD_ANALYSIS_PROMPT,
    dataset_summary_prompt,
    field_description_prompt,
)

logger = logging.getLogger(__name__)


def fallback_field_description(meta: FieldMetadata) -> str:
    return f"Field containing {meta.total_count} values"


def fallback_dataset_summary(fields: Mapping[str, FieldMetadata], row_count: int) -> str:
    return f"Dataset with {row_count} records and {len(fields)} fields"


def generate_field_descriptions(
    fields: Mapping[str, FieldMetadata],
    model: Optional[ChatModel],
) -> dict[str, str]:
    """Ask the model to describe each field, one request per field."""

    descriptions: dict[str, str] = {}
    for name, meta in fields.items():
        text = ""
        if model is not None:
            response = model.invoke(
                [system_message(FIELD_ANALYSIS_PROMPT), human_message(field_description_prompt(name, meta))]
            )
            text = response.content.strip()
        descriptions[name] = text or fallback_field_description(meta)
    return descriptions


def generate_dataset_summary(
    fields: Mapping[str, FieldMetadata],
    row_count: int,
    model: Optional[ChatModel],
) -> str:
    if model is None:
        return fallback_dataset_summary(fields, row_count)
    response = model.invoke(
        [system_message(DATASET_SUMMARY_PROMPT), human_message(dataset_summary_prompt(fields, row_count))]
    )
    return response.content.strip() or fallback_dataset_summary(fields, row_count)


def data_analyzer(state: GraphState, *, model: Optional[ChatModel] = None) -> dict[str, Any]:
    """Profile the data, describe each field and summarize the dataset.

    Without a model, descriptions and the summary use deterministic
    fallback text. Any failure yields an error-shaped metadata object
    rather than raising.
    """

    try:
        fields = profile_dataset(state.data)
        logger.debug("Profiled %d field(s) over %d record(s)", len(fields), len(state.data))

        descriptions = generate_field_descriptions(fields, model)
        for name, description in descriptions.items():
            fields[name] = fields[name].model_copy(update={"description": description})

        summary = generate_dataset_summary(fields, len(state.data), model)

        metadata = DatasetMetadata(
            fields=fields,
            row_count=len(state.data),
            summary=summary,
            data_quality_issues=data_quality_issues(fields),
        )
        return {
            "metadata": metadata,
            "events": [
                {
                    "node": "analyzer",
                    "ok": True,
                    "fields": len(fields),
                    "llm": model is not None,
                }
            ],
        }
    except Exception as e:  # noqa: BLE001
        logger.exception("Error analyzing data")
        return {
            "metadata": DatasetMetadata(
                fields={},
                row_count=0,
                summary=f"Error during analysis: {e}",
                data_quality_issues=["Analysis failed"],
            ),
            "events": [{"node": "analyzer", "ok": False, "error": f"{type(e).__name__}: {e}"}],
        }
