from __future__ import annotations

"""Bounded chat memory.

A sliding window over the most recent messages of one conversation. The
system message, when present, is pinned at the head and is never evicted;
it still counts towards the window size. When the window is full the oldest
user/assistant message goes first.
"""

from collections import deque
from typing import Deque, List, Optional, Tuple

from langchain_core.messages import BaseMessage, SystemMessage


Snapshot = Tuple[Optional[SystemMessage], Tuple[BaseMessage, ...]]


class MessageWindowMemory:
    def __init__(self, max_messages: int = 10) -> None:
        # Room for the pinned system message and the newest turn.
        if max_messages < 2:
            raise ValueError(f"max_messages must be at least 2, got {max_messages}")
        self.max_messages = max_messages
        self._system: Optional[SystemMessage] = None
        self._turns: Deque[BaseMessage] = deque()

    @property
    def system_message(self) -> Optional[SystemMessage]:
        return self._system

    def add(self, message: BaseMessage) -> None:
        """Append a message, evicting the oldest non-system entries if needed.

        A new system message replaces the current one instead of being
        appended.
        """
        if isinstance(message, SystemMessage):
            self._system = message
        else:
            self._turns.append(message)
        self._evict()

    def _evict(self) -> None:
        while len(self) > self.max_messages and self._turns:
            self._turns.popleft()

    def clear(self) -> None:
        self._system = None
        self._turns.clear()

    def messages(self) -> List[BaseMessage]:
        head: List[BaseMessage] = [self._system] if self._system is not None else []
        return head + list(self._turns)

    def snapshot(self) -> Snapshot:
        return self._system, tuple(self._turns)

    def restore(self, snapshot: Snapshot) -> None:
        system, turns = snapshot
        self._system = system
        self._turns = deque(turns)

    def __len__(self) -> int:
        return len(self._turns) + (1 if self._system is not None else 0)

    def __repr__(self) -> str:
        return f"MessageWindowMemory(max_messages={self.max_messages}, size={len(self)})"
