from __future__ import annotations

from typing import Any, Mapping

from .models import FieldMetadata, question_format_instructions

FIELD_ANALYSIS_PROMPT = """You are a seasoned Data Analyst specializing in data profiling and field analysis. Your task is to write clear, informative descriptions for each field in a dataset.

For each field, you will receive:
- Data type
- Basic statistics (for numeric fields)
- Value distribution (for categorical fields)
- Missing value counts
- Sample values

Create a concise but informative description that:
1. Explains what the field represents
2. Highlights key characteristics (range, distribution, patterns)
3. Notes any data quality concerns
4. Suggests potential uses for analysis

Keep descriptions factual and based on the provided statistics. Be specific about patterns you observe in the data."""

DATASET_SUMMARY_PROMPT = """You are a Data Scientist specializing in dataset analysis and understanding. Your task is to create a comprehensive summary of a dataset based on its field-level metadata and descriptions.

Consider:
1. Dataset Purpose and Content
   - What kind of data is this?
   - What entity or process does it describe?
   - What are the key fields and their relationships?

2. Data Quality Overview
   - Overall completeness of the data
   - Any systematic quality issues
   - Fields that may need attention

3. Analysis Potential
   - Key insights possible from this data
   - Relationships worth investigating
   - Potential use cases

Provide a clear, structured summary that helps analysts understand:
- What this dataset represents
- Its key characteristics and quality
- How it might be used effectively"""

_QUESTION_GENERATOR_BASE = """You are a Data Visualization Expert specializing in exploratory data analysis. Your task is to generate insightful questions that can be answered through data visualization.

IMPORTANT: Before generating questions, you MUST:
1. First call getGraphCatalog to understand what visualization types are available
2. Then use suggestGraphs with appropriate parameters to get recommended visualizations for specific data combinations

You can ONLY suggest visualizations that are returned by these tools. Do not suggest any visualization types that aren't explicitly supported.

For each question you generate, you must:
1. Focus only on the fields present in the dataset
2. Use ONLY visualization types that were returned by the tools
3. Consider relationships between fields that might reveal interesting patterns
4. Prioritize questions that help understand distributions, trends, and relationships

Each question must be:
- Specific and focused on 1-2 fields
- Answerable through visual analysis
- Relevant to understanding the data's patterns
- Use ONLY supported visualization types (as returned by the tools)

DO NOT:
- Suggest questions requiring fields not in the dataset
- Ask questions needing advanced statistical analysis
- Generate questions about predictions or future trends
- Include questions requiring data transformation
- Suggest visualization types not returned by the tools

Available Tools:
1. getGraphCatalog: Call this FIRST to get a list of all available graph types and when to use them
2. suggestGraphs: Call this to get specific visualization recommendations based on:
   - numericCount: number of numeric variables you want to visualize
   - categoricalCount: number of categorical variables you want to visualize
   - numericOrdered: whether numeric variables represent an ordered sequence
   - pointCount: "few" or "many" data points

"""


def question_generator_prompt() -> str:
    return _QUESTION_GENERATOR_BASE + question_format_instructions()


def _fmt(value: Any) -> str:
    # Whole floats print without the trailing ".0".
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _range_line(meta: FieldMetadata, prefix: str) -> str:
    rng = meta.range
    if rng is not None and rng.min is not None:
        return f"{prefix}Range: {_fmt(rng.min)} to {_fmt(rng.max)}"
    return ""


def _unique_count(meta: FieldMetadata) -> int | None:
    if meta.range is not None and meta.range.unique_values is not None:
        return len(meta.range.unique_values)
    return None


def field_description_prompt(name: str, meta: FieldMetadata) -> str:
    """User prompt asking for a description of one profiled field."""

    lines = [
        f'Analyze this field: "{name}"',
        "",
        "Field Statistics:",
        f"- Type: {meta.type}",
        f"- Total Values: {meta.total_count}",
        f"- Missing Values: {meta.missing_count}",
    ]
    range_line = _range_line(meta, "- ")
    if range_line:
        lines.append(range_line)
    n_unique = _unique_count(meta)
    if n_unique is not None:
        lines.append(f"- Unique Values: {n_unique}")

    lines.append("")
    lines.append("Sample Values: " + ", ".join(_fmt(x) for x in (meta.examples or [])))
    if meta.range is not None and meta.range.unique_values is not None:
        uniques = [str(x) for x in meta.range.unique_values]
        tail = "..." if len(uniques) > 10 else ""
        lines.append("")
        lines.append(f"Value Distribution: {', '.join(uniques[:10])}{tail}")

    lines.append("")
    lines.append(
        "Based on these statistics, provide a clear, concise description of what this "
        "field represents and its key characteristics."
    )
    return "\n".join(lines)


def dataset_summary_prompt(fields: Mapping[str, FieldMetadata], row_count: int) -> str:
    """User prompt asking for a dataset-level summary from field metadata."""

    blocks: list[str] = []
    for name, meta in fields.items():
        block = [
            f"### {name}",
            f"Type: {meta.type}",
            f"Description: {meta.description}",
            f"Values: {meta.total_count} total, {meta.missing_count} missing",
        ]
        range_line = _range_line(meta, "")
        if range_line:
            block.append(range_line)
        n_unique = _unique_count(meta)
        if n_unique is not None:
            block.append(f"Unique Values: {n_unique}")
        blocks.append("\n".join(block))

    return (
        f"Analyze this dataset with {row_count} records and the following fields:\n\n"
        + "\n\n".join(blocks)
        + "\n\nBased on these field descriptions and statistics, provide a comprehensive summary of:\n"
        "1. What this dataset represents and its likely purpose\n"
        "2. Key characteristics and patterns across fields\n"
        "3. Overall data quality assessment\n"
        "4. Potential analyses or insights possible with this data"
    )


def question_request_prompt(summary: str, fields: Mapping[str, FieldMetadata]) -> str:
    """User prompt asking for visualization questions about the analyzed dataset."""

    blocks: list[str] = []
    for name, meta in fields.items():
        block = [f"{name}:", f"- Type: {meta.type}", f"- Description: {meta.description}"]
        range_line = _range_line(meta, "- ")
        if range_line:
            block.append(range_line)
        n_unique = _unique_count(meta)
        if n_unique is not None:
            block.append(f"- Unique Values: {n_unique} different values")
        blocks.append("\n".join(block))

    return (
        "Analyze this dataset and generate visualization questions:\n"
        "Dataset Summary:\n"
        f"{summary}\n\n"
        "Available Fields:\n"
        + "\n\n".join(blocks)
        + "\n\n"
        "IMPORTANT: Before suggesting any visualizations:\n"
        "1. First use getGraphCatalog to understand what visualization types we support\n"
        "2. Then use suggestGraphs to get specific recommendations based on the field combinations you want to analyze\n\n"
        "Generate at least 10 questions that can be answered through data visualizations. For each question:\n"
        "1. Use ONLY visualization types that were returned by the tools\n"
        "2. List the specific fields needed for the visualization\n"
        "3. Explain why this visualization would be insightful\n\n"
        "Focus on questions that:\n"
        "- Explore distributions of numeric fields\n"
        "- Compare categories\n"
        "- Look for relationships between fields\n"
        "- Analyze patterns in the data\n\n"
        "Remember:\n"
        "- You MUST call getGraphCatalog first to see available visualization types\n"
        "- Then use suggestGraphs to get specific recommendations for your field combinations"
    )
