from __future__ import annotations

import logging
from typing import List, Optional

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage

from assistant.core.memory import MessageWindowMemory
from assistant.errors import RemoteServiceError
from assistant.llm import ChatBackend, GeminiChatClient
from config.settings import Settings


logger = logging.getLogger(__name__)


class ConversationSession:
    """One conversation with the hosted model.

    Create a new session per conversation: it starts with empty memory.
    Calling set_system_role() resets the history without replacing the
    session. A session is meant for a single caller at a time.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        backend: Optional[ChatBackend] = None,
    ) -> None:
        settings = settings if settings is not None else Settings()
        api_key = settings.require_api_key()

        if backend is None:
            backend = GeminiChatClient(
                api_key=api_key,
                model_name=settings.gemini_model,
                temperature=settings.temperature,
                timeout=settings.request_timeout,
            )
        self.model_name = settings.gemini_model
        self.system_role: Optional[str] = None
        self._backend = backend
        self._memory = MessageWindowMemory(max_messages=settings.memory_size)
        logger.info(
            "Session created: model=%s memory_size=%s",
            self.model_name,
            settings.memory_size,
        )

    def set_system_role(self, role: Optional[str]) -> None:
        """Clear the history and seed it with the given system role.

        A blank or None role leaves the memory empty.
        """
        if role is not None and not isinstance(role, str):
            raise TypeError(f"role must be a string or None, not {type(role).__name__}")

        self._memory.clear()
        if role is not None and role.strip():
            self.system_role = role
            self._memory.add(SystemMessage(content=role))
        else:
            self.system_role = None
        logger.debug("System role set: active=%s", self.system_role is not None)

    def ask(self, question: str) -> str:
        """Send a question with the current history and return the reply verbatim.

        Raises RemoteServiceError if the model call fails; the history is then
        left exactly as it was before the call.
        """
        if not isinstance(question, str):
            raise TypeError(f"question must be a string, not {type(question).__name__}")

        before = self._memory.snapshot()
        self._memory.add(HumanMessage(content=question))
        try:
            reply = self._backend.send(self._memory.messages())
            if not isinstance(reply, str):
                raise RemoteServiceError(
                    f"Model returned {type(reply).__name__} instead of text"
                )
        except RemoteServiceError:
            self._memory.restore(before)
            raise
        except Exception as exc:
            self._memory.restore(before)
            raise RemoteServiceError(f"Model call failed: {exc}") from exc

        self._memory.add(AIMessage(content=reply))
        logger.debug(
            "Question answered: question_chars=%s reply_chars=%s memory=%s",
            len(question),
            len(reply),
            len(self._memory),
        )
        return reply

    @property
    def messages(self) -> List[BaseMessage]:
        return self._memory.messages()

    def __len__(self) -> int:
        return len(self._memory)
