from __future__ import annotations

import json
import logging
from typing import Any, Optional, Protocol, Sequence

from ..config import ModelSettings, Settings
from ..errors import LLMCallError, LLMUnavailableError
from .messages import ChatMessage, ToolCall, ai_message

logger = logging.getLogger(__name__)


class ChatModel(Protocol):
    """Minimal seam every node talks to. Tests substitute a scripted fake."""

    def invoke(self, messages: Sequence[ChatMessage]) -> ChatMessage: ...

    def bind_tools(self, tools: Sequence[dict[str, Any]]) -> "ChatModel": ...


class OpenAIChatModel:
    """Chat completions against the OpenAI API (or any compatible base URL)."""

    def __init__(
        self,
        *,
        model: str,
        temperature: float,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        tools: Sequence[dict[str, Any]] = (),
    ) -> None:
        if not api_key:
            raise LLMUnavailableError("No OpenAI API key configured (set OPENAI_API_KEY).")
        self.model = model
        self.temperature = temperature
        self.api_key = api_key
        self.base_url = base_url
        self.tools = list(tools)
        self._client: Any = None

    @classmethod
    def from_settings(cls, settings: Settings, node: ModelSettings) -> "OpenAIChatModel":
        return cls(
            model=node.model,
            temperature=node.temperature,
            api_key=settings.api_key,
            base_url=settings.base_url,
        )

    def bind_tools(self, tools: Sequence[dict[str, Any]]) -> "OpenAIChatModel":
        bound = OpenAIChatModel(
            model=self.model,
            temperature=self.temperature,
            api_key=self.api_key,
            base_url=self.base_url,
            tools=tools,
        )
        bound._client = self._client
        return bound

    def _get_client(self) -> Any:
        if self._client is None:
            from openai import OpenAI

            kwargs: dict[str, Any] = {"api_key": self.api_key}
            if self.base_url:
                kwargs["base_url"] = self.base_url
            self._client = OpenAI(**kwargs)
        return self._client

    def invoke(self, messages: Sequence[ChatMessage]) -> ChatMessage:
        logger.debug("Calling model %s with %d message(s)", self.model, len(messages))
        request: dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_openai() for m in messages],
            "temperature": self.temperature,
        }
        if self.tools:
            request["tools"] = self.tools

        try:
            resp = self._get_client().chat.completions.create(**request)
        except Exception as e:  # noqa: BLE001
            raise LLMCallError(f"{type(e).__name__}: {e}") from e

        msg = resp.choices[0].message
        out = ai_message(msg.content or "", _parse_tool_calls(getattr(msg, "tool_calls", None)))
        logger.debug("Model response: %s", out.summary())
        return out


def _parse_tool_calls(raw: Any) -> list[ToolCall]:
    calls: list[ToolCall] = []
    for tc in raw or []:
        fn = getattr(tc, "function", None)
        if fn is None:
            continue
        try:
            args = json.loads(fn.arguments or "{}")
        except json.JSONDecodeError as e:
            raise LLMCallError(f"Tool call {fn.name} has invalid JSON arguments: {e}") from e
        calls.append(ToolCall(id=str(tc.id or ""), name=str(fn.name), args=args if isinstance(args, dict) else {}))
    return calls


def default_model_factory(settings: Settings, node: ModelSettings) -> Optional[ChatModel]:
    """Build the provider model for a node, or None when no API key is configured."""

    if not settings.llm_configured:
        return None
    return OpenAIChatModel.from_settings(settings, node)
