from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer

from .config import Settings
from .errors import DataValidationError
from .ingest import load_records
from .models import PointCount
from .pipeline.run import run_pipeline
from .profile import profile_dataset
from .tools import get_graph_catalog, suggest_graphs

app = typer.Typer(add_completion=False, help="Analysis Graph: profile tabular data and propose visualization questions")

# ---- Graph tool commands ----
graphs_app = typer.Typer(help="Inspect the visualization tools offered to the model.")
app.add_typer(graphs_app, name="graphs")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@graphs_app.command("catalog")
def graphs_catalog() -> None:
    """
    Print the graph catalog (the getGraphCatalog tool output) as JSON.
    """
    typer.echo(get_graph_catalog())


@graphs_app.command("suggest")
def graphs_suggest(
    numeric: int = typer.Option(..., "--numeric", min=0, help="Number of numeric variables"),
    categorical: int = typer.Option(..., "--categorical", min=0, help="Number of categorical variables"),
    ordered: bool = typer.Option(False, "--ordered/--unordered", help="Numeric variables form an ordered sequence"),
    points: PointCount = typer.Option(
        PointCount.MANY,
        "--points",
        help="Whether there are few or many data points",
        case_sensitive=False,
    ),
) -> None:
    """
    Print the suggestGraphs tool output for a field combination.
    """
    typer.echo(suggest_graphs(numeric, categorical, ordered, points))


@app.command()
def profile(
    data: Path = typer.Option(..., "--data", help="Path to a .json, .jsonl or .csv file"),
) -> None:
    """
    Profile every field (statistics only, no model calls) and print JSON.
    """
    try:
        records = load_records(data)
        fields = profile_dataset(records)
        payload = {
            "rowCount": len(records),
            "fields": {name: meta.to_json_obj() for name, meta in fields.items()},
        }
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    except FileNotFoundError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except DataValidationError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)


@app.command()
def analyze(
    data: Path = typer.Option(..., "--data", help="Path to a .json, .jsonl or .csv file"),
    out: Optional[Path] = typer.Option(None, "--out", help="Run directory (default: runs/<run_id>/)"),
    llm: bool = typer.Option(True, "--llm/--no-llm", help="Use the configured LLM (default: on; falls back when no key)"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log model and tool calls"),
) -> None:
    """
    Run the analyzer and question generator and write run artifacts.

    Always writes:
      metadata.json, questions.json, report.md, analysis_log.json
    """
    _configure_logging(verbose)
    try:
        settings = Settings.from_env()
        if llm and not settings.llm_configured:
            typer.echo("No OpenAI API key configured; using deterministic fallbacks.", err=True)

        result = run_pipeline(data, out_dir=out, use_llm=llm, settings=settings)

        typer.echo("Run complete." if result.ok else "Run finished with errors.")
        typer.echo(f"Run dir: {result.run_dir}")
        typer.echo(f"Report: {result.report_md}")
        typer.echo(f"Metadata: {result.metadata_json}")
        typer.echo(f"Questions: {result.questions_json} ({len(result.metadata.questions or [])})")
        typer.echo(f"Log: {result.analysis_log_json}")
        for err in result.errors:
            typer.echo(f"ERROR [{err.get('node')}]: {err.get('error')}", err=True)
        if not result.ok:
            raise typer.Exit(code=1)
    except FileNotFoundError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=2)
    except DataValidationError as e:
        typer.echo(f"ERROR: {e}", err=True)
        raise typer.Exit(code=1)
