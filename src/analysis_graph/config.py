"""Runtime configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

DEFAULT_ANALYZER_MODEL = "gpt-4o"
DEFAULT_QUESTION_MODEL = "gpt-4o"
DEFAULT_MAX_TOOL_ROUNDS = 8


@dataclass(frozen=True)
class ModelSettings:
    """Model name and sampling temperature for one node."""

    model: str
    temperature: float


@dataclass(frozen=True)
class Settings:
    """Settings for the analysis graph and its pipeline wrapper."""

    api_key: Optional[str] = None
    base_url: Optional[str] = None
    analyzer: ModelSettings = field(default_factory=lambda: ModelSettings(DEFAULT_ANALYZER_MODEL, 0.1))
    question_generator: ModelSettings = field(default_factory=lambda: ModelSettings(DEFAULT_QUESTION_MODEL, 0.7))
    max_tool_rounds: int = DEFAULT_MAX_TOOL_ROUNDS
    runs_dir: Path = field(default_factory=lambda: Path.cwd() / "runs")

    @property
    def llm_configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from the environment with defaults for local use.

        API key priority:
        1. OPENAI_API_KEY
        2. AI_INTEGRATIONS_OPENAI_API_KEY
        """

        runs_dir_raw = os.environ.get("ANALYSIS_GRAPH_RUNS_DIR")
        return cls(
            api_key=get_openai_api_key(),
            base_url=get_openai_base_url(),
            analyzer=ModelSettings(
                model=os.environ.get("ANALYSIS_GRAPH_ANALYZER_MODEL") or DEFAULT_ANALYZER_MODEL,
                temperature=_get_float("ANALYSIS_GRAPH_ANALYZER_TEMPERATURE", 0.1),
            ),
            question_generator=ModelSettings(
                model=os.environ.get("ANALYSIS_GRAPH_QUESTION_MODEL") or DEFAULT_QUESTION_MODEL,
                temperature=_get_float("ANALYSIS_GRAPH_QUESTION_TEMPERATURE", 0.7),
            ),
            max_tool_rounds=_get_positive_int("ANALYSIS_GRAPH_MAX_TOOL_ROUNDS", DEFAULT_MAX_TOOL_ROUNDS),
            runs_dir=Path(runs_dir_raw) if runs_dir_raw else Path.cwd() / "runs",
        )


def get_openai_api_key() -> Optional[str]:
    if os.environ.get("OPENAI_API_KEY"):
        return os.environ.get("OPENAI_API_KEY")
    return os.environ.get("AI_INTEGRATIONS_OPENAI_API_KEY") or None


def get_openai_base_url() -> Optional[str]:
    if os.environ.get("OPENAI_BASE_URL"):
        return os.environ.get("OPENAI_BASE_URL")
    return os.environ.get("AI_INTEGRATIONS_OPENAI_BASE_URL") or None


def _get_positive_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        v = int(raw)
        return v if v > 0 else default
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default
