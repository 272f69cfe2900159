"""Pipeline orchestration layer.

Wraps the analysis graph with input loading and run artifacts.
"""

from .context import RunContext
from .run import RunResult, run_pipeline

__all__ = ["RunContext", "RunResult", "run_pipeline"]
