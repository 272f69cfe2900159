"""Synthesis layer.

Builds report.md strictly from the final dataset metadata.
"""

from .report_builder import ReportInputs, build_report, render_report

__all__ = ["ReportInputs", "build_report", "render_report"]
