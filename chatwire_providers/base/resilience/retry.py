"""Classify-then-backoff retry for async operations.

Each failure is classified from its message (``base.errors.classify_error``).
Non-retryable errors propagate unchanged on the first attempt; retryable ones
are retried after ``base * 2**attempt * U(0.5, 1.0)`` milliseconds until the
retry budget is spent, after which the last error propagates. Cooperative
cancellation (``CancelledError``) and ``asyncio.CancelledError`` are never
retried, and a cancelled ``token`` stops the loop before the next attempt.
"""
from __future__ import annotations

import asyncio
import functools
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Protocol, TypeVar

from ..cancellation import CancellationToken, CancelledError
from ..constants import DEFAULT_MAX_RETRIES, DEFAULT_RETRY_BASE_MS
from ..errors import ErrorClassification, classify_error

T = TypeVar("T")


class AttemptLogger(Protocol):  # pragma: no cover - structural protocol
    def __call__(
        self,
        *,
        attempt: int,
        max_attempts: int,
        delay_ms: float | None,
        error: BaseException | None,
        classification: ErrorClassification | None,
    ) -> None: ...


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy.

    Attributes:
        retries: Extra attempts after the first (``2`` means 3 attempts total).
        base_delay_ms: Backoff base in milliseconds.
        attempt_logger: Optional callback invoked after every attempt.
    """

    retries: int = DEFAULT_MAX_RETRIES
    base_delay_ms: float = DEFAULT_RETRY_BASE_MS
    attempt_logger: Optional[AttemptLogger] = None

    @property
    def max_attempts(self) -> int:
        return max(0, self.retries) + 1


DEFAULT_RETRY_CONFIG = RetryConfig()


async def _sleep(seconds: float) -> None:
    await asyncio.sleep(seconds)


def backoff_ms(attempt: int, base_ms: float = DEFAULT_RETRY_BASE_MS) -> float:
    """Jittered exponential delay in ``[0.5, 1.0) * base * 2**attempt`` ms."""
    return base_ms * (2**attempt) * (0.5 + random.random() * 0.5)  # nosec B311 - jitter, not crypto


async def run_with_retry(
    fn: Callable[[], Awaitable[T]],
    config: RetryConfig = DEFAULT_RETRY_CONFIG,
    token: Optional[CancellationToken] = None,
) -> T:
    """Await ``fn()`` under ``config``; see module docstring for semantics.

    Raises ``CancelledError`` instead of starting another attempt once
    ``token`` is cancelled, including when it fires during an attempt or a
    backoff sleep.
    """
    attempt = 0
    while True:
        if token is not None:
            token.raise_if_cancelled()
        try:
            result = await fn()
        except (CancelledError, asyncio.CancelledError):
            raise
        except Exception as exc:
            if token is not None and token.cancelled:
                raise CancelledError(token.reason or "operation cancelled") from exc
            classification = classify_error(exc)
            will_retry = classification.retryable and attempt < config.retries
            delay = backoff_ms(attempt, config.base_delay_ms) if will_retry else None
            if config.attempt_logger:
                config.attempt_logger(
                    attempt=attempt,
                    max_attempts=config.max_attempts,
                    delay_ms=delay,
                    error=exc,
                    classification=classification,
                )
            if delay is None:
                raise
            await _sleep(delay / 1000.0)
            attempt += 1
            continue
        if config.attempt_logger:
            config.attempt_logger(
                attempt=attempt,
                max_attempts=config.max_attempts,
                delay_ms=None,
                error=None,
                classification=None,
            )
        return result


def retry(config: RetryConfig = DEFAULT_RETRY_CONFIG):
    """Decorator form of :func:`run_with_retry` for async functions."""

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            return await run_with_retry(lambda: func(*args, **kwargs), config)

        return wrapper

    return decorator


__all__ = [
    "AttemptLogger",
    "RetryConfig",
    "DEFAULT_RETRY_CONFIG",
    "backoff_ms",
    "run_with_retry",
    "retry",
]
