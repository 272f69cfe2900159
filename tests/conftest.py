from __future__ import annotations

from typing import Any, Callable, Sequence

import pytest

from analysis_graph.llm import ChatMessage, ai_message


class FakeChatModel:
    """Scripted stand-in for a provider model.

    Each invoke() pops the next scripted response: a ChatMessage, a plain
    string (wrapped as an assistant message), an exception instance (raised)
    or a callable taking the messages.
    """

    def __init__(self, responses: Sequence[Any] = ()) -> None:
        self.responses = list(responses)
        self.calls: list[list[ChatMessage]] = []
        self.bound_tools: list[dict[str, Any]] | None = None

    def bind_tools(self, tools: Sequence[dict[str, Any]]) -> "FakeChatModel":
        self.bound_tools = list(tools)
        return self

    def invoke(self, messages: Sequence[ChatMessage]) -> ChatMessage:
        self.calls.append(list(messages))
        if not self.responses:
            raise AssertionError("Unexpected model call")
        r = self.responses.pop(0)
        if callable(r):
            r = r(messages)
        if isinstance(r, Exception):
            raise r
        return r if isinstance(r, ChatMessage) else ai_message(str(r))


@pytest.fixture
def fake_model() -> Callable[..., FakeChatModel]:
    def _make(*responses: Any) -> FakeChatModel:
        return FakeChatModel(responses)

    return _make


@pytest.fixture
def sample_records() -> list[dict[str, Any]]:
    return [
        {"age": 30, "city": "Paris", "score": 1.5},
        {"age": 40, "city": "Lyon", "score": 2.5},
        {"age": None, "city": "Paris", "score": 3.5},
        {"city": "Nice", "score": 4.5},
    ]


@pytest.fixture(autouse=True)
def _no_provider_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # Keep tests offline regardless of the developer's shell.
    for name in ("OPENAI_API_KEY", "AI_INTEGRATIONS_OPENAI_API_KEY", "OPENAI_BASE_URL", "AI_INTEGRATIONS_OPENAI_BASE_URL"):
        monkeypatch.delenv(name, raising=False)
