"""Async HTTP client construction for providers.

Purpose:
    Build ``httpx.AsyncClient`` instances with the process-wide timeout from
    :func:`chatwire_providers.config.get_runtime_settings`. Each provider
    owns its client (created lazily on first use, or injected by the caller
    for tests and connection sharing) and closes it in ``aclose``.

External dependencies:
    - ``httpx`` for the async transport.
"""

from __future__ import annotations

from typing import Optional

import httpx

from ...config import get_runtime_settings


def build_async_client(
    base_url: Optional[str] = None,
    *,
    timeout: Optional[float] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Return a new ``httpx.AsyncClient``.

    Parameters:
        base_url: Optional base URL so callers can issue relative requests.
        timeout: Seconds; defaults to ``RuntimeSettings.http_timeout_seconds``.
        transport: Optional transport (``httpx.MockTransport`` in tests).
    """
    seconds = timeout if timeout is not None else get_runtime_settings().http_timeout_seconds
    kwargs = {"timeout": httpx.Timeout(seconds), "transport": transport}
    if base_url:
        kwargs["base_url"] = base_url
    return httpx.AsyncClient(**kwargs)


__all__ = ["build_async_client"]
