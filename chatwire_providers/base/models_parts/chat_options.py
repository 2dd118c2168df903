"""Per-call generation options."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..cancellation import CancellationToken
from ..constants import DEFAULT_MAX_TOKENS


@dataclass
class ChatOptions:
    """Knobs forwarded to the vendor plus the cooperative abort signal.

    ``temperature`` is only sent when not ``None``. ``signal`` is threaded
    from the caller into the HTTP layer so a stream can be stopped mid-read.
    """

    max_tokens: int = DEFAULT_MAX_TOKENS
    temperature: Optional[float] = None
    signal: Optional[CancellationToken] = None


__all__ = ["ChatOptions"]
