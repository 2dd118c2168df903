"""
Normalized failure categories.

Values are lowercase snake_case and form a stable contract for logging and for
callers that show "category + message" with a retry affordance.
"""
from __future__ import annotations

from enum import Enum


class ErrorCategory(str, Enum):
    """Failure category assigned by ``classify_error``."""

    RATE_LIMIT = "rate_limit"
    SERVER = "server"
    AUTH = "auth"
    NETWORK = "network"
    CLIENT = "client"
    UNKNOWN = "unknown"


__all__ = ["ErrorCategory"]
