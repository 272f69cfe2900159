"""Graph nodes. Each takes a GraphState and returns a partial update."""

from .analyzer import data_analyzer
from .question_generator import fallback_questions, parse_questions, question_generator, run_tool_loop

__all__ = ["data_analyzer", "fallback_questions", "parse_questions", "question_generator", "run_tool_loop"]
