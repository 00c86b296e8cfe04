"""
In-memory session store for chat sessions.

Each session id maps to an ordered list of Messages. Sessions live only as
long as the process. Optional idle TTL and LRU caps keep memory bounded.
"""

import time
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from models import Message


@dataclass
class _Session:
    messages: List[Message] = field(default_factory=list)
    last_accessed: float = 0.0


class SessionStore:
    """
    Session id → message history.

    get_or_create() hands back the live list, so repeated calls for one id
    return the same object until the session is cleared or evicted.
    The lock only protects the mapping itself; two requests appending to
    the same session still interleave in arrival order.
    """

    def __init__(
        self,
        ttl_seconds: int = 0,
        max_sessions: int = 0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_sessions = max_sessions
        self._clock = clock
        self._sessions: "OrderedDict[str, _Session]" = OrderedDict()
        self._lock = threading.RLock()

    def get_or_create(self, session_id: str) -> List[Message]:
        with self._lock:
            self._cleanup_expired()
            session = self._sessions.get(session_id)
            if session is None:
                session = _Session()
                self._sessions[session_id] = session
                self._evict_overflow()
            self._touch(session_id, session)
            return session.messages

    def get(self, session_id: str) -> Optional[List[Message]]:
        """Look a session up without creating it."""
        with self._lock:
            self._cleanup_expired()
            session = self._sessions.get(session_id)
            if session is None:
                return None
            self._touch(session_id, session)
            return session.messages

    def append(self, session_id: str, message: Message) -> None:
        with self._lock:
            self.get_or_create(session_id).append(message)

    def clear(self, session_id: str) -> None:
        with self._lock:
            self._sessions.pop(session_id, None)

    def session_ids(self) -> List[str]:
        with self._lock:
            self._cleanup_expired()
            return list(self._sessions.keys())

    def __contains__(self, session_id: str) -> bool:
        with self._lock:
            self._cleanup_expired()
            return session_id in self._sessions

    def __len__(self) -> int:
        with self._lock:
            self._cleanup_expired()
            return len(self._sessions)

    # ─── internals ───

    def _touch(self, session_id: str, session: _Session) -> None:
        session.last_accessed = self._clock()
        self._sessions.move_to_end(session_id)

    def _cleanup_expired(self) -> None:
        if self.ttl_seconds <= 0:
            return
        now = self._clock()
        expired = [
            sid for sid, s in self._sessions.items()
            if now - s.last_accessed > self.ttl_seconds
        ]
        for sid in expired:
            del self._sessions[sid]

    def _evict_overflow(self) -> None:
        if self.max_sessions <= 0:
            return
        while len(self._sessions) > self.max_sessions:
            # Least recently used sits at the front
            self._sessions.popitem(last=False)
