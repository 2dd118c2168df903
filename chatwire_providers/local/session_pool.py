"""Bounded pool of reusable local model sessions.

Sessions are keyed by a fingerprint of their system prompt (first 100
characters plus length). Lookup, stale eviction, oldest-when-full eviction and
creation run as one section under an ``asyncio.Lock`` so concurrent chats
never race on the pool.
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from ..base.logging import get_logger, log_event
from .backend import LanguageModelBackend, LanguageModelSession

_logger = get_logger("chatwire.providers.local.pool")


@dataclass
class _PooledSession:
    session: LanguageModelSession
    timestamp: float


def session_key(system_prompt: Optional[str]) -> str:
    text = system_prompt or ""
    return f"{text[:100]}:{len(text)}"


def _destroy(session: LanguageModelSession) -> None:
    destroy = getattr(session, "destroy", None)
    if callable(destroy):
        destroy()


class SessionPool:
    """LRU-by-timestamp pool with idle timeout.

    Parameters:
        max_sessions: Pool capacity (default 3).
        idle_timeout: Seconds after which an unused session is replaced (default 300).
        clock: Monotonic time source in seconds.
    """

    def __init__(
        self,
        *,
        max_sessions: int = 3,
        idle_timeout: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.max_sessions = max_sessions
        self.idle_timeout = idle_timeout
        self._clock = clock
        self._sessions: Dict[str, _PooledSession] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._sessions)

    async def acquire(self, backend: LanguageModelBackend, system_prompt: Optional[str]) -> LanguageModelSession:
        """Return a live session for ``system_prompt``, creating one if needed."""
        key = session_key(system_prompt)
        async with self._lock:
            now = self._clock()
            entry = self._sessions.get(key)
            if entry is not None and now - entry.timestamp < self.idle_timeout:
                entry.timestamp = now
                return entry.session
            if entry is not None:
                _destroy(entry.session)
                del self._sessions[key]
            if len(self._sessions) >= self.max_sessions:
                oldest = min(self._sessions, key=lambda k: self._sessions[k].timestamp)
                _destroy(self._sessions.pop(oldest).session)
                log_event(_logger, "pool.evict", entries=len(self._sessions))
            initial = [{"role": "system", "content": system_prompt}] if system_prompt else []
            session = await backend.create(initial)
            self._sessions[key] = _PooledSession(session=session, timestamp=now)
            return session

    def clear(self) -> None:
        """Destroy every pooled session."""
        for entry in self._sessions.values():
            _destroy(entry.session)
        self._sessions.clear()


__all__ = ["SessionPool", "session_key"]
