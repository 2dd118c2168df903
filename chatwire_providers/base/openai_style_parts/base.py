"""BaseOpenAIStyleProvider: HTTP provider speaking the Chat Completions wire format.

Shared by ``OpenAIProvider`` and ``OpenAICompatibleProvider``; subclasses only
decide the endpoint, auth headers and whether tools are forwarded.
"""

from __future__ import annotations

from typing import Any, AsyncIterator, Dict, Optional

import httpx

from ..cancellation import CancellationToken
from ..http.provider import BaseHTTPProvider
from ..models import ChatOptions, ChatRequest, ChatResponse, StreamChunk
from ..sse import read_sse
from ..streaming import StreamAccumulator
from .translator import apply_openai_stream_payload, build_openai_body, parse_openai_response


class BaseOpenAIStyleProvider(BaseHTTPProvider):
    """Chat Completions request/response handling over ``BaseHTTPProvider``."""

    def _endpoint(self) -> str:
        return f"{self._base_url}/chat/completions"

    def _headers(self, api_key: Optional[str]) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        return headers

    def _build_body(
        self, request: ChatRequest, model: str, options: ChatOptions, *, stream: bool
    ) -> Dict[str, Any]:
        return build_openai_body(
            request, model, options, stream=stream, include_tools=self.supports_native_tools
        )

    def _parse_response(self, payload: Any, model: str) -> ChatResponse:
        return parse_openai_response(payload, model)

    async def _stream_chunks(
        self, response: httpx.Response, acc: StreamAccumulator, token: Optional[CancellationToken]
    ) -> AsyncIterator[StreamChunk]:
        async for payload in read_sse(response.aiter_bytes(), token):
            for chunk in apply_openai_stream_payload(payload, acc):
                yield chunk


__all__ = ["BaseOpenAIStyleProvider"]
