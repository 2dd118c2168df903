"""Anthropic provider.

``POST {base_url}/messages`` (default ``https://api.anthropic.com/v1``) with
``x-api-key`` and ``anthropic-version`` headers; default model
``claude-sonnet-4-6``. Streaming uses the named-event SSE framing decoded by
``base.sse.read_anthropic_sse``.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Dict, Optional

import httpx

from ..base.cancellation import CancellationToken
from ..base.constants import ANTHROPIC_API_VERSION
from ..base.http.provider import BaseHTTPProvider
from ..base.models import ChatOptions, ChatRequest, ChatResponse, StreamChunk
from ..base.sse import read_anthropic_sse
from ..base.streaming import StreamAccumulator
from .translator import apply_anthropic_event, build_anthropic_body, parse_anthropic_response


class AnthropicProvider(BaseHTTPProvider):
    name = "anthropic"
    display_name = "Anthropic"
    requires_api_key = True
    supports_streaming = True
    supports_native_tools = True

    def _endpoint(self) -> str:
        return f"{self._base_url}/messages"

    def _headers(self, api_key: Optional[str]) -> Dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "anthropic-version": ANTHROPIC_API_VERSION,
        }
        if api_key:
            headers["x-api-key"] = api_key
        return headers

    def _build_body(
        self, request: ChatRequest, model: str, options: ChatOptions, *, stream: bool
    ) -> Dict[str, Any]:
        return build_anthropic_body(request, model, options, stream=stream)

    def _parse_response(self, payload: Any, model: str) -> ChatResponse:
        return parse_anthropic_response(payload, model)

    async def _stream_chunks(
        self, response: httpx.Response, acc: StreamAccumulator, token: Optional[CancellationToken]
    ) -> AsyncIterator[StreamChunk]:
        async for event in read_anthropic_sse(response.aiter_bytes(), token):
            for chunk in apply_anthropic_event(event, acc):
                yield chunk


__all__ = ["AnthropicProvider"]
