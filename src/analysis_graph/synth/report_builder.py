from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from ..models import DatasetMetadata, FieldMetadata


@dataclass(frozen=True)
class ReportInputs:
    metadata: DatasetMetadata
    source_path: Optional[Path] = None
    events: Sequence[dict[str, Any]] = ()


def _fmt_num(x: Any) -> str:
    if isinstance(x, float):
        return f"{x:.4g}"
    return str(x)


def _field_stats(meta: FieldMetadata) -> str:
    parts = [f"{meta.total_count} values", f"{meta.missing_count} missing"]
    rng = meta.range
    if rng is not None and rng.min is not None:
        parts.append(f"range {_fmt_num(rng.min)} to {_fmt_num(rng.max)}")
    elif rng is not None and rng.unique_values is not None:
        parts.append(f"{len(rng.unique_values)} unique")
    if meta.examples:
        ex = ", ".join(_fmt_num(x) for x in meta.examples[:5])
        parts.append(f"e.g. {ex}")
    return "; ".join(parts)


def _field_lines(metadata: DatasetMetadata, *, max_rows: int = 50) -> list[str]:
    if not metadata.fields:
        return ["- No fields profiled."]
    items = list(metadata.fields.items())
    lines: list[str] = []
    for name, meta in items[:max_rows]:
        lines.append(f"### {name} ({meta.type})")
        lines.append("")
        if meta.description:
            lines.append(meta.description.strip())
            lines.append("")
        lines.append(f"- {_field_stats(meta)}")
        lines.append("")
    if len(items) > max_rows:
        lines.append(f"- … ({len(items) - max_rows} more)")
    return lines


def _quality_lines(metadata: DatasetMetadata, *, max_rows: int = 25) -> list[str]:
    issues = metadata.data_quality_issues or []
    if not issues:
        return ["- None detected."]
    lines = [f"- {i}" for i in issues[:max_rows]]
    if len(issues) > max_rows:
        lines.append(f"- … ({len(issues) - max_rows} more)")
    return lines


def _question_lines(metadata: DatasetMetadata) -> list[str]:
    questions = metadata.questions or []
    if not questions:
        return ["- No questions generated."]
    lines: list[str] = []
    for i, q in enumerate(questions, start=1):
        fields = ", ".join(q.fields)
        lines.append(f"{i}. **{q.question}** ({q.type.value}; fields: {fields})")
        if q.description:
            lines.append(f"   {q.description.strip()}")
    return lines


def _error_lines(events: Sequence[dict[str, Any]]) -> list[str]:
    return [f"- {e.get('node', 'node')}: {e.get('error', 'failed')}" for e in events if not e.get("ok", True)]


def render_report(inputs: ReportInputs) -> str:
    """Render report.md from final metadata. Facts only; no model calls."""

    md = inputs.metadata
    lines: list[str] = ["# Dataset Analysis Report", ""]

    errors = _error_lines(inputs.events)
    if errors:
        lines += ["## Run Errors", "", *errors, ""]

    lines += ["## Summary", "", md.summary.strip() or "- No summary produced.", ""]

    lines += ["## Dataset Overview", ""]
    if inputs.source_path is not None:
        lines.append(f"- Source: {inputs.source_path}")
    lines.append(f"- Shape: {md.row_count} rows × {len(md.fields)} fields")
    lines.append("")

    lines += ["## Fields", "", *_field_lines(md)]
    if lines[-1] != "":
        lines.append("")
    lines += ["## Data Quality Issues", "", *_quality_lines(md), ""]
    lines += ["## Visualization Questions", "", *_question_lines(md), ""]

    lines += ["## Artifacts", "", "- metadata.json", "- questions.json", "- analysis_log.json", ""]
    return "\n".join(lines)


def build_report(*, inputs: ReportInputs, output_path: Path) -> None:
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(render_report(inputs), encoding="utf-8")
