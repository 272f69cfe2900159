from __future__ import annotations


class AnalysisGraphError(Exception):
    """Base class for errors raised by the analysis graph."""


class DataValidationError(AnalysisGraphError, ValueError):
    """Raised when input data is not a list of JSON objects."""


class LLMUnavailableError(AnalysisGraphError):
    """Raised when no language model provider is configured."""


class LLMCallError(AnalysisGraphError):
    """Raised when the model provider rejects or fails a request."""


class ToolNotFoundError(AnalysisGraphError, KeyError):
    """Raised when the model requests a tool that is not registered."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class ToolCallError(AnalysisGraphError, ValueError):
    """Raised when a tool call is malformed (missing id, bad arguments)."""


class ToolLoopLimitError(AnalysisGraphError):
    """Raised when the model keeps requesting tools past the round limit."""


class QuestionParseError(AnalysisGraphError, ValueError):
    """Raised when the final model answer is not a valid question batch."""
