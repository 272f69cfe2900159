from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from analysis_graph import cli
from analysis_graph.cli import app
from analysis_graph.errors import LLMCallError
from analysis_graph.pipeline import run_pipeline

runner = CliRunner()


def _write_data(tmp_path: Path, records: list[dict]) -> Path:
    p = tmp_path / "data.json"
    p.write_text(json.dumps(records), encoding="utf-8")
    return p


def test_graphs_catalog_lists_all_chart_types() -> None:
    result = runner.invoke(app, ["graphs", "catalog"])
    assert result.exit_code == 0
    catalog = json.loads(result.stdout)
    assert len(catalog) == 19
    assert catalog[0]["key"] == "histogram"


def test_graphs_suggest() -> None:
    result = runner.invoke(app, ["graphs", "suggest", "--numeric", "2", "--categorical", "0", "--unordered"])
    assert result.exit_code == 0
    assert [g["key"] for g in json.loads(result.stdout)] == ["scatterplot"]


def test_graphs_suggest_points_choice_is_case_insensitive() -> None:
    result = runner.invoke(app, ["graphs", "suggest", "--numeric", "1", "--categorical", "0", "--points", "FEW"])
    assert result.exit_code == 0
    assert [g["key"] for g in json.loads(result.stdout)] == ["boxplot", "lollipop-plot"]


def test_graphs_suggest_rejects_bad_points() -> None:
    result = runner.invoke(app, ["graphs", "suggest", "--numeric", "1", "--categorical", "0", "--points", "lots"])
    assert result.exit_code == 2


def test_profile_prints_camel_case_json(tmp_path: Path, sample_records) -> None:
    data = _write_data(tmp_path, sample_records)
    result = runner.invoke(app, ["profile", "--data", str(data)])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["rowCount"] == 4
    assert payload["fields"]["age"]["missingCount"] == 2
    assert payload["fields"]["score"]["range"] == {"min": 1.5, "max": 4.5}


def test_profile_missing_file_exits_2(tmp_path: Path) -> None:
    result = runner.invoke(app, ["profile", "--data", str(tmp_path / "nope.json")])
    assert result.exit_code == 2


def test_profile_invalid_data_exits_1(tmp_path: Path) -> None:
    p = tmp_path / "data.json"
    p.write_text('{"not": "a list"}', encoding="utf-8")
    result = runner.invoke(app, ["profile", "--data", str(p)])
    assert result.exit_code == 1


def test_analyze_without_llm_writes_run(tmp_path: Path, sample_records) -> None:
    data = _write_data(tmp_path, sample_records)
    out = tmp_path / "run"
    result = runner.invoke(app, ["analyze", "--data", str(data), "--out", str(out), "--no-llm"])
    assert result.exit_code == 0
    assert "Run complete." in result.stdout
    for name in ("metadata.json", "questions.json", "report.md", "analysis_log.json"):
        assert (out / name).exists(), name


def test_analyze_missing_file_exits_2(tmp_path: Path) -> None:
    result = runner.invoke(app, ["analyze", "--data", str(tmp_path / "missing.json"), "--no-llm"])
    assert result.exit_code == 2
    assert "Data file not found" in result.output


def test_analyze_node_failure_exits_1(tmp_path: Path, sample_records, fake_model, monkeypatch: pytest.MonkeyPatch) -> None:
    data = _write_data(tmp_path, sample_records)
    failing = fake_model(LLMCallError("boom"))

    def run_with_failing_analyzer(data_path, **kwargs):
        return run_pipeline(
            data_path,
            model_factory=lambda settings, node: failing if node == settings.analyzer else None,
            **kwargs,
        )

    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    monkeypatch.setattr(cli, "run_pipeline", run_with_failing_analyzer)

    out = tmp_path / "run"
    result = runner.invoke(app, ["analyze", "--data", str(data), "--out", str(out)])

    assert result.exit_code == 1
    assert "Run finished with errors." in result.output
    assert "ERROR [analyzer]: LLMCallError: boom" in result.output
    assert (out / "report.md").exists()
