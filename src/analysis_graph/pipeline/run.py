from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..config import Settings
from ..graph import ModelFactory, create_analysis_graph, run_graph
from ..ingest import load_records
from ..llm import default_model_factory
from ..models import DatasetMetadata, GraphState
from ..synth import ReportInputs, build_report
from ..utils import now_iso, read_json, sha256_file, write_json
from .context import RunContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RunResult:
    """Paths to run artifacts plus the final metadata."""

    run_dir: Path
    metadata_json: Path
    questions_json: Path
    report_md: Path
    analysis_log_json: Path
    metadata: DatasetMetadata
    errors: tuple[dict[str, Any], ...] = ()

    @property
    def ok(self) -> bool:
        return not self.errors


def _record_log(analysis_log_path: Path, payload: dict[str, Any]) -> None:
    """Best-effort merge into analysis_log.json without failing the run."""

    try:
        if analysis_log_path.exists():
            existing = read_json(analysis_log_path)
            if isinstance(existing, dict):
                existing.update(payload)
                write_json(analysis_log_path, existing)
                return
        write_json(analysis_log_path, payload)
    except (OSError, ValueError):
        logger.warning("Could not update %s", analysis_log_path, exc_info=True)


def run_pipeline(
    data_path: Path,
    *,
    out_dir: Optional[Path] = None,
    use_llm: bool = True,
    settings: Optional[Settings] = None,
    model_factory: ModelFactory = default_model_factory,
    run_id: Optional[str] = None,
) -> RunResult:
    """Load data, run the analysis graph and write run artifacts.

    Writes under <runs_dir>/<run_id>/ (or `out_dir` when given):
      metadata.json, questions.json, report.md, analysis_log.json

    Input errors (missing file, invalid records) propagate. Node failures do
    not: they are reflected in the metadata and recorded in analysis_log.json.
    """

    settings = settings or Settings.from_env()
    data_path = Path(data_path)
    records = load_records(data_path)

    ctx = RunContext.create(
        runs_root=settings.runs_dir,
        source_path=data_path,
        source_sha256=sha256_file(data_path),
        run_id=run_id,
    )
    if out_dir is not None:
        ctx = RunContext(run_dir=Path(out_dir), run_id=ctx.run_id, source_path=ctx.source_path, source_sha256=ctx.source_sha256)
    ctx.run_dir.mkdir(parents=True, exist_ok=True)

    llm_active = use_llm and settings.llm_configured
    _record_log(
        ctx.analysis_log_path(),
        {
            "run_id": ctx.run_id,
            "started_at": now_iso(),
            "source_path": str(data_path),
            "source_sha256": ctx.source_sha256,
            "rows": len(records),
            "llm_requested": use_llm,
            "llm_configured": settings.llm_configured,
            "models": {
                "analyzer": settings.analyzer.model if llm_active else None,
                "question_generator": settings.question_generator.model if llm_active else None,
            },
            "max_tool_rounds": settings.max_tool_rounds,
        },
    )
    logger.info("Run %s: %d record(s) from %s", ctx.run_id, len(records), data_path)

    graph = create_analysis_graph(settings, use_llm=use_llm, model_factory=model_factory)
    final = run_graph(graph, GraphState(data=records))
    metadata = final.metadata or DatasetMetadata()

    write_json(ctx.metadata_path(), metadata.to_json_obj())
    write_json(ctx.questions_path(), [q.to_json_obj() for q in (metadata.questions or [])])
    build_report(
        inputs=ReportInputs(metadata=metadata, source_path=data_path, events=final.events),
        output_path=ctx.report_path(),
    )

    errors = [e for e in final.events if not e.get("ok", True)]
    _record_log(
        ctx.analysis_log_path(),
        {
            "finished_at": now_iso(),
            "fields": len(metadata.fields),
            "questions": len(metadata.questions or []),
            "events": final.events,
            "errors": errors,
        },
    )

    return RunResult(
        run_dir=ctx.run_dir,
        metadata_json=ctx.metadata_path(),
        questions_json=ctx.questions_path(),
        report_md=ctx.report_path(),
        analysis_log_json=ctx.analysis_log_path(),
        metadata=metadata,
        errors=tuple(errors),
    )
