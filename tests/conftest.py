from __future__ import annotations

from typing import Iterable, List, Sequence, Union

import pytest
from langchain_core.messages import BaseMessage

from assistant.session import ConversationSession
from config.settings import Settings


class ScriptedBackend:
    """Test double for ChatBackend: replays canned replies and records each history."""

    def __init__(self, replies: Iterable[Union[str, Exception]] = ()) -> None:
        self.replies = list(replies)
        self.calls: List[List[BaseMessage]] = []

    def send(self, history: Sequence[BaseMessage]) -> str:
        self.calls.append(list(history))
        reply = self.replies.pop(0) if self.replies else f"reply {len(self.calls)}"
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "GEMINI_API_KEY",
        "GEMINI_MODEL",
        "MODEL_TEMPERATURE",
        "REQUEST_TIMEOUT",
        "CHAT_MEMORY_SIZE",
        "MAX_SESSIONS",
        "SESSION_IDLE_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def backend():
    return ScriptedBackend()


@pytest.fixture
def session(api_key, backend):
    return ConversationSession(settings=Settings(), backend=backend)
