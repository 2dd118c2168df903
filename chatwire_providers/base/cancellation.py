"""Cooperative cancellation primitives (public API facade).

``CancellationToken`` is the abort signal threaded from a caller through
``ChatOptions.signal`` into the streaming readers. ``CancelledError`` is raised
by ``raise_if_cancelled`` and is never retried.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
