"""Request helpers that turn HTTP outcomes into ``ProviderError``.

Non-2xx responses raise ``ProviderError("<Display> <status>: <body>")`` and
transport failures raise ``ProviderError("<Display> network error: <detail>")``
so the message-based classifier can decide whether to retry. Streaming
requests use ``RuntimeSettings.stream_read_timeout_seconds`` as the gap
allowed between chunks; the caller owns the returned response and must close it.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional

import httpx

from ...config import get_runtime_settings
from ..errors import ProviderError


def transport_error(exc: httpx.HTTPError, *, display_name: str, provider: str, model: Optional[str]) -> ProviderError:
    """Wrap an httpx transport exception with a classifiable message."""
    detail = str(exc) or type(exc).__name__
    if isinstance(exc, httpx.TimeoutException):
        detail = f"timeout ({detail})"
    return ProviderError(
        message=f"{display_name} network error: {detail}",
        provider=provider,
        model=model,
        raw=exc,
    )


def _status_error(
    status: int, body: str, *, display_name: str, provider: str, model: Optional[str]
) -> ProviderError:
    return ProviderError(
        message=f"{display_name} {status}: {body}",
        provider=provider,
        model=model,
        status=status,
        raw=body,
    )


async def post_json(
    client: httpx.AsyncClient,
    url: str,
    *,
    headers: Mapping[str, str],
    body: Mapping[str, Any],
    display_name: str,
    provider: str,
    model: Optional[str] = None,
) -> Any:
    """POST ``body`` as JSON and return the decoded JSON response."""
    try:
        response = await client.post(url, headers=dict(headers), json=body)
    except httpx.HTTPError as exc:
        raise transport_error(exc, display_name=display_name, provider=provider, model=model) from exc
    if not response.is_success:
        raise _status_error(
            response.status_code, response.text, display_name=display_name, provider=provider, model=model
        )
    try:
        return response.json()
    except ValueError as exc:
        raise ProviderError(
            message=f"{display_name} malformed response body",
            provider=provider,
            model=model,
            status=response.status_code,
            raw=response.text,
        ) from exc


async def open_stream(
    client: httpx.AsyncClient,
    url: str,
    *,
    headers: Mapping[str, str],
    body: Mapping[str, Any],
    display_name: str,
    provider: str,
    model: Optional[str] = None,
) -> httpx.Response:
    """Send a streaming POST and return the open response on 2xx.

    On a non-2xx status the error body is read, the response closed, and a
    ``ProviderError`` raised.
    """
    request = client.build_request(
        "POST",
        url,
        headers=dict(headers),
        json=body,
        timeout=httpx.Timeout(client.timeout.connect, read=get_runtime_settings().stream_read_timeout_seconds),
    )
    try:
        response = await client.send(request, stream=True)
    except httpx.HTTPError as exc:
        raise transport_error(exc, display_name=display_name, provider=provider, model=model) from exc
    if response.is_success:
        return response
    try:
        text = (await response.aread()).decode("utf-8", errors="replace")
    except httpx.HTTPError:
        text = ""
    finally:
        await response.aclose()
    raise _status_error(response.status_code, text, display_name=display_name, provider=provider, model=model)


__all__ = ["post_json", "open_stream", "transport_error"]
