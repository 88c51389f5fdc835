from __future__ import annotations

import logging
import threading
import time
from collections import OrderedDict
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from assistant.session import ConversationSession


logger = logging.getLogger(__name__)


class _Entry:
    __slots__ = ("session", "lock", "last_used")

    def __init__(self, session: ConversationSession, now: float) -> None:
        self.session = session
        self.lock = threading.Lock()
        self.last_used = now


class SessionRegistry:
    """Keeps one ConversationSession per client conversation.

    Sessions idle for longer than idle_timeout seconds expire, and once
    max_sessions is reached the least recently used one is dropped. Use
    checkout() to work with a session: it holds that session's lock so two
    requests for the same client run one after the other.
    """

    def __init__(
        self,
        factory: Callable[[], ConversationSession] = ConversationSession,
        max_sessions: Optional[int] = None,
        idle_timeout: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_sessions is not None and max_sessions < 1:
            raise ValueError(f"max_sessions must be at least 1, got {max_sessions}")
        self._factory = factory
        self._max_sessions = max_sessions
        self._idle_timeout = idle_timeout
        self._clock = clock
        self._entries: "OrderedDict[str, _Entry]" = OrderedDict()
        self._lock = threading.Lock()

    def _expire(self, now: float) -> None:
        if self._idle_timeout is None:
            return
        while self._entries:
            client_id, entry = next(iter(self._entries.items()))
            if now - entry.last_used <= self._idle_timeout:
                break
            del self._entries[client_id]
            logger.info("Session expired: client_id=%s", client_id)

    def _lookup(self, client_id: str, now: float) -> Optional[_Entry]:
        self._expire(now)
        entry = self._entries.get(client_id)
        if entry is not None:
            entry.last_used = now
            self._entries.move_to_end(client_id)
        return entry

    def _store(self, client_id: str, entry: _Entry) -> None:
        self._entries[client_id] = entry
        self._entries.move_to_end(client_id)
        while self._max_sessions is not None and len(self._entries) > self._max_sessions:
            evicted, _ = self._entries.popitem(last=False)
            logger.info("Session evicted: client_id=%s", evicted)

    def _entry(self, client_id: str) -> _Entry:
        with self._lock:
            entry = self._lookup(client_id, self._clock())
        if entry is not None:
            return entry

        # Built outside the lock; creating a model client can be slow.
        created = _Entry(self._factory(), self._clock())
        with self._lock:
            entry = self._lookup(client_id, self._clock())
            if entry is not None:
                return entry
            self._store(client_id, created)
        logger.info("Session opened: client_id=%s", client_id)
        return created

    def get(self, client_id: str) -> ConversationSession:
        return self._entry(client_id).session

    def _existing(self, client_id: str) -> Optional[_Entry]:
        with self._lock:
            return self._lookup(client_id, self._clock())

    def find(self, client_id: str) -> Optional[ConversationSession]:
        """Return the client's session, or None without creating one."""
        entry = self._existing(client_id)
        return entry.session if entry is not None else None

    @contextmanager
    def checkout(
        self, client_id: str, create: bool = True
    ) -> Iterator[Optional[ConversationSession]]:
        """Hold the client's session for exclusive use.

        With create=False a missing client yields None instead of a new session.
        """
        entry = self._entry(client_id) if create else self._existing(client_id)
        if entry is None:
            yield None
            return
        with entry.lock:
            yield entry.session

    def renew(self, client_id: str) -> ConversationSession:
        entry = _Entry(self._factory(), self._clock())
        with self._lock:
            self._expire(entry.last_used)
            self._store(client_id, entry)
        logger.info("Session renewed: client_id=%s", client_id)
        return entry.session

    def drop(self, client_id: str) -> bool:
        with self._lock:
            return self._entries.pop(client_id, None) is not None

    def __contains__(self, client_id: object) -> bool:
        with self._lock:
            self._expire(self._clock())
            return client_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            self._expire(self._clock())
            return len(self._entries)
