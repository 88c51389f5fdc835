from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from langchain_core.messages import BaseMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from assistant.errors import RemoteServiceError


logger = logging.getLogger(__name__)


class ChatBackend(Protocol):
    """Anything that turns a message history into one assistant reply."""

    def send(self, history: Sequence[BaseMessage]) -> str:
        ...


def _reply_text(content: Any) -> Optional[str]:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text") or "")
        return "".join(parts)
    return None


class GeminiChatClient:
    """Synchronous chat client bound to one Gemini model.

    Each call is a single attempt: failures are reported, not retried.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str,
        temperature: Optional[float] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.model_name = model_name
        kwargs: Dict[str, Any] = {
            "model": model_name,
            "google_api_key": api_key,
            "max_retries": 1,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        if timeout is not None:
            kwargs["timeout"] = timeout
        self._llm = ChatGoogleGenerativeAI(**kwargs)

    def send(self, history: Sequence[BaseMessage]) -> str:
        try:
            result = self._llm.invoke(list(history))
        except Exception as exc:
            logger.warning("Gemini call failed: model=%s error=%s", self.model_name, exc)
            raise RemoteServiceError(f"Gemini call failed: {exc}") from exc

        text = _reply_text(getattr(result, "content", None))
        if text is None:
            raise RemoteServiceError(
                f"Malformed reply from {self.model_name}: {type(result).__name__}"
            )
        logger.info(
            "Gemini replied: model=%s history=%s reply_chars=%s",
            self.model_name,
            len(history),
            len(text),
        )
        return text


def to_transcript(messages: Sequence[BaseMessage]) -> List[Dict[str, str]]:
    """Render chat messages as {role, content} dicts for API responses."""
    roles = {"system": "system", "human": "user", "ai": "assistant"}
    return [
        {"role": roles.get(message.type, message.type), "content": _reply_text(message.content) or ""}
        for message in messages
    ]
