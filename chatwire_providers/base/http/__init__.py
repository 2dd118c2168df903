"""HTTP utilities for provider adapters (httpx-based)."""

from .client import build_async_client
from .transport import open_stream, post_json, transport_error

__all__ = ["build_async_client", "open_stream", "post_json", "transport_error"]
