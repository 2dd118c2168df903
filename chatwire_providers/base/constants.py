"""Base shared constants for provider adapters.

Central location to avoid scattering magic strings and default numbers.

# pragma: allowlist secret
"""
from __future__ import annotations

# Model name used when neither the payload nor the caller supplies one
UNKNOWN_MODEL = "unknown"

# Default completion budget forwarded as ``max_tokens``
DEFAULT_MAX_TOKENS = 4096

# Anthropic wire protocol version header
ANTHROPIC_API_VERSION = "2023-06-01"

# Generic SSE terminator payload
SSE_DONE_SENTINEL = "[DONE]"

# Default HTTP timeouts (seconds)
DEFAULT_HTTP_TIMEOUT = 60.0
# Max silence between streamed chunks before the read fails
DEFAULT_STREAM_READ_TIMEOUT = 300.0
LOCAL_PROBE_TIMEOUT = 2.0

# Retry defaults: 2 retries (3 attempts), 1000 ms base delay
DEFAULT_MAX_RETRIES = 2
DEFAULT_RETRY_BASE_MS = 1000.0

# Response cache defaults
DEFAULT_CACHE_TTL_SECONDS = 30 * 60
DEFAULT_CACHE_MAX_ENTRIES = 500

__all__ = [
    "UNKNOWN_MODEL",
    "DEFAULT_MAX_TOKENS",
    "ANTHROPIC_API_VERSION",
    "SSE_DONE_SENTINEL",
    "DEFAULT_HTTP_TIMEOUT",
    "DEFAULT_STREAM_READ_TIMEOUT",
    "LOCAL_PROBE_TIMEOUT",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_RETRY_BASE_MS",
    "DEFAULT_CACHE_TTL_SECONDS",
    "DEFAULT_CACHE_MAX_ENTRIES",
]
