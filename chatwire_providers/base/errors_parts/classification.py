"""
Message-based error classification.

Errors raised by this layer carry enough text (HTTP status, vendor body or
transport detail) to be classified from the message alone. The rule table is
a fixed priority list: the first matching pattern wins, so ``auth`` rules are
checked before the generic ``invalid`` rule of the ``client`` category.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Pattern, Tuple, Union

from .error_category import ErrorCategory


@dataclass(frozen=True)
class ErrorClassification:
    """Outcome of classifying one failure."""

    category: ErrorCategory
    retryable: bool
    message: str


_RULES: Tuple[Tuple[Pattern[str], ErrorCategory, bool], ...] = (
    (re.compile(r"\b429\b|rate.limit", re.IGNORECASE), ErrorCategory.RATE_LIMIT, True),
    (re.compile(r"\b5\d{2}\b|server.error", re.IGNORECASE), ErrorCategory.SERVER, True),
    (
        re.compile(
            r"\b401\b|\b403\b|unauthorized|forbidden"
            r"|auth.*invalid|invalid.*auth|invalid.*key|invalid.*token",
            re.IGNORECASE,
        ),
        ErrorCategory.AUTH,
        False,
    ),
    (
        re.compile(
            r"network|fetch|ECONNREFUSED|connection refused|timeout|timed out|abort",
            re.IGNORECASE,
        ),
        ErrorCategory.NETWORK,
        True,
    ),
    (re.compile(r"\b400\b|\binvalid\b|malformed", re.IGNORECASE), ErrorCategory.CLIENT, False),
)


def classify_error(error: Union[BaseException, str, None]) -> ErrorClassification:
    """Classify an exception or message into an :class:`ErrorClassification`.

    Parameters:
        error: An exception (its ``str()`` is matched) or a raw message.

    Returns:
        The first matching rule's category and retryability, or
        ``unknown``/not retryable when nothing matches.
    """
    message = "" if error is None else str(error)
    for pattern, category, retryable in _RULES:
        if pattern.search(message):
            return ErrorClassification(category=category, retryable=retryable, message=message)
    return ErrorClassification(category=ErrorCategory.UNKNOWN, retryable=False, message=message)


__all__ = ["ErrorClassification", "classify_error"]
