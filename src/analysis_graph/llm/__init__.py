"""Chat model seam: message types and the OpenAI-backed implementation."""

from .client import ChatModel, OpenAIChatModel, default_model_factory
from .messages import (
    ChatMessage,
    ToolCall,
    ai_message,
    human_message,
    strip_markdown_code_block,
    system_message,
    tool_message,
)

__all__ = [
    "ChatMessage",
    "ChatModel",
    "OpenAIChatModel",
    "ToolCall",
    "ai_message",
    "default_model_factory",
    "human_message",
    "strip_markdown_code_block",
    "system_message",
    "tool_message",
]
