"""
Structured provider error exception type.

Every failure surfaced by a provider adapter is a ``ProviderError``. Its
message is formatted so the message-based classifier can categorize it
(``"OpenAI 429: ..."``, ``"Anthropic network error: ..."``).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .classification import ErrorClassification, classify_error


@dataclass
class ProviderError(Exception):
    """Represents a failed vendor call.

    Attributes:
        message: Human-readable message; the classification input.
        provider: Provider key where the error originated (e.g. ``"openai"``).
        model: Optional model name associated with the failure.
        status: HTTP status when the failure was a non-2xx response.
        raw: Optional original exception or response body for diagnostics.
    """

    message: str
    provider: str = "unknown"
    model: Optional[str] = None
    status: Optional[int] = None
    raw: Optional[Any] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    @property
    def classification(self) -> ErrorClassification:
        return classify_error(self.message)

    @property
    def retryable(self) -> bool:
        return self.classification.retryable

    def __str__(self) -> str:
        return self.message


__all__ = ["ProviderError"]
