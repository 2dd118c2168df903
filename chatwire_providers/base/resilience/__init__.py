"""Resilience helpers: retry with backoff and the shared response cache."""

from .retry import RetryConfig, backoff_ms, retry, run_with_retry
from .cache import CacheStats, ResponseCache

__all__ = ["RetryConfig", "backoff_ms", "retry", "run_with_retry", "CacheStats", "ResponseCache"]
