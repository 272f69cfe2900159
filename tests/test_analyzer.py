from __future__ import annotations

from analysis_graph.errors import LLMCallError
from analysis_graph.models import GraphState
from analysis_graph.nodes import data_analyzer


def test_analyzer_describes_fields_and_summarizes(fake_model, sample_records) -> None:
    model = fake_model("Age of the person.", "City name.", "A score.", "People in French cities.")

    out = data_analyzer(GraphState(data=sample_records), model=model)
    md = out["metadata"]

    assert md.row_count == 4
    assert md.fields["age"].description == "Age of the person."
    assert md.fields["city"].description == "City name."
    assert md.fields["score"].description == "A score."
    assert md.summary == "People in French cities."
    assert md.data_quality_issues == ["age: 2 missing values out of 2"]
    assert md.questions is None
    assert out["events"][0] == {"node": "analyzer", "ok": True, "fields": 3, "llm": True}

    # one request per field, then one for the summary
    assert len(model.calls) == 4
    system, human = model.calls[0]
    assert system.role == "system"
    assert 'Analyze this field: "age"' in human.content
    assert "- Range: 30 to 40" in human.content
    assert "Sample Values: 30, 40" in human.content

    city_prompt = model.calls[1][1].content
    assert "- Unique Values: 3" in city_prompt
    assert "Value Distribution: Paris, Lyon, Nice" in city_prompt

    summary_prompt = model.calls[3][1].content
    assert "Analyze this dataset with 4 records" in summary_prompt
    assert "Description: Age of the person." in summary_prompt


def test_empty_model_answer_falls_back(fake_model, sample_records) -> None:
    model = fake_model("", "  ", "ok", "")
    md = data_analyzer(GraphState(data=sample_records), model=model)["metadata"]
    assert md.fields["age"].description == "Field containing 2 values"
    assert md.fields["city"].description == "Field containing 4 values"
    assert md.fields["score"].description == "ok"
    assert md.summary == "Dataset with 4 records and 3 fields"


def test_analyzer_without_model_uses_fallbacks(sample_records) -> None:
    out = data_analyzer(GraphState(data=sample_records))
    md = out["metadata"]
    assert md.fields["score"].description == "Field containing 4 values"
    assert md.summary == "Dataset with 4 records and 3 fields"
    assert out["events"][0]["llm"] is False


def test_analyzer_error_shape(fake_model, sample_records) -> None:
    model = fake_model(LLMCallError("provider down"))
    out = data_analyzer(GraphState(data=sample_records), model=model)
    md = out["metadata"]
    assert md.fields == {}
    assert md.row_count == 0
    assert md.summary == "Error during analysis: provider down"
    assert md.data_quality_issues == ["Analysis failed"]
    assert out["events"][0]["ok"] is False


def test_analyzer_on_empty_data() -> None:
    md = data_analyzer(GraphState(data=[]))["metadata"]
    assert md.fields == {}
    assert md.row_count == 0
    assert md.summary == "Dataset with 0 records and 0 fields"
    assert md.data_quality_issues == []
