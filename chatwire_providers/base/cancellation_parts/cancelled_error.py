"""Cancellation error type."""

from __future__ import annotations


class CancelledError(RuntimeError):
    """Raised when a chat or stream observes a cancelled token.

    Distinct from ordinary failures so the retry executor can re-raise it
    without classification and streaming readers can stop quietly.
    """


__all__ = ["CancelledError"]
