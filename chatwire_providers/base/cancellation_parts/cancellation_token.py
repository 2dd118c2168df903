"""Cooperative cancellation token.

A token is polled between network reads; cancelling a parent cascades to
every linked child so one abort can stop a request and its nested reads.
"""

from __future__ import annotations

import threading
from typing import Callable, List, Optional

from .cancelled_error import CancelledError

_DEFAULT_REASON = "operation cancelled"


class CancellationToken:
    """Thread-safe cancellation flag with optional parent cascade.

    The first ``cancel`` wins: later calls keep the original reason.
    """

    def __init__(self, *, parent: Optional["CancellationToken"] = None) -> None:
        self._event = threading.Event()
        self._guard = threading.Lock()
        self._reason: Optional[str] = None
        self._linked: List[CancellationToken] = []
        self._callbacks: List[Callable[[], None]] = []
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: Optional[str] = None) -> None:
        """Flag this token and every linked descendant."""
        with self._guard:
            if self._event.is_set():
                return
            self._reason = reason
            self._event.set()
            pending = self._linked[:]
            callbacks, self._callbacks = self._callbacks, []
        for token in pending:
            token.cancel(reason)
        for callback in callbacks:
            callback()

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Attach ``token`` below this one; it is cancelled at once if we already are."""
        with self._guard:
            self._linked.append(token)
            already = self._event.is_set()
        if already:
            token.cancel(self._reason)
        return token

    def on_cancel(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Run ``callback`` once on cancellation (now, if already cancelled).

        Returns a function that unregisters the callback.
        """
        with self._guard:
            fire_now = self._event.is_set()
            if not fire_now:
                self._callbacks.append(callback)
        if fire_now:
            callback()

        def _remove() -> None:
            with self._guard:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return _remove

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CancelledError(self._reason or _DEFAULT_REASON)

    def __repr__(self) -> str:  # pragma: no cover
        state = "cancelled" if self.cancelled else "active"
        return f"<CancellationToken {state} reason={self._reason!r} linked={len(self._linked)}>"


__all__ = ["CancellationToken"]
