from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Optional

_CODE_BLOCK_RE = re.compile(r"^```(?:json)?\n([\s\S]*?)\n```$")


@dataclass(frozen=True)
class ToolCall:
    """A function call requested by the model."""

    id: str
    name: str
    args: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ChatMessage:
    """
    One chat turn.

    role: "system" | "user" | "assistant" | "tool"
    tool_calls: only on assistant messages
    tool_call_id / name: only on tool messages
    """

    role: str
    content: str = ""
    tool_calls: tuple[ToolCall, ...] = ()
    tool_call_id: Optional[str] = None
    name: Optional[str] = None

    def to_openai(self) -> dict[str, Any]:
        msg: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            msg["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": "function",
                    "function": {"name": tc.name, "arguments": json.dumps(tc.args)},
                }
                for tc in self.tool_calls
            ]
        if self.role == "tool":
            msg["tool_call_id"] = self.tool_call_id
            if self.name:
                msg["name"] = self.name
        return msg

    def summary(self) -> dict[str, Any]:
        """Compact form for debug logging."""
        out: dict[str, Any] = {"role": self.role, "content": self.content[:100]}
        if self.tool_calls:
            out["tool_calls"] = [{"id": tc.id, "name": tc.name, "args": tc.args} for tc in self.tool_calls]
        if self.tool_call_id:
            out["tool_call_id"] = self.tool_call_id
        return out


def system_message(content: str) -> ChatMessage:
    return ChatMessage(role="system", content=content)


def human_message(content: str) -> ChatMessage:
    return ChatMessage(role="user", content=content)


def ai_message(content: str = "", tool_calls: tuple[ToolCall, ...] | list[ToolCall] = ()) -> ChatMessage:
    return ChatMessage(role="assistant", content=content, tool_calls=tuple(tool_calls))


def tool_message(content: str, *, tool_call_id: str, name: Optional[str] = None) -> ChatMessage:
    return ChatMessage(role="tool", content=content, tool_call_id=tool_call_id, name=name)


def strip_markdown_code_block(content: str) -> str:
    """Remove one surrounding ```json ... ``` (or bare ```) fence, if present."""
    text = content.strip()
    match = _CODE_BLOCK_RE.match(text)
    return match.group(1).strip() if match else text
