"""Shared HTTP provider base.

Purpose:
- Hold everything the remote adapters (OpenAI, Anthropic, OpenAI-compatible)
  have in common: config resolution, API-key checks, owned ``httpx`` client,
  retry policy with structured attempt logging, and the non-streaming and
  streaming request flows. Subclasses supply the wire format.

Failure semantics:
- ``chat`` raises ``ProviderError`` for a missing required key (before any
  I/O), non-2xx responses, and transport failures after retries.
- ``chat_stream`` raises the same errors while opening the stream (only the
  open is retried, and never once the token is cancelled). Once chunks flow,
  any failure (transport or malformed payload) yields one ``ErrorChunk``;
  cancellation, even during a stalled read, closes the response and yields
  nothing more.
"""

from __future__ import annotations

from abc import abstractmethod
from contextlib import aclosing
from typing import Any, AsyncIterator, Dict, Optional

import httpx

from ...config import get_provider_config, get_runtime_settings
from ..cancellation import CancellationToken, CancelledError
from ..errors import ProviderError, classify_error
from ..interfaces import LLMProvider
from ..logging import LogContext, get_logger, normalized_log_event
from ..models import ChatOptions, ChatRequest, ChatResponse, ErrorChunk, StreamChunk
from ..resilience.retry import RetryConfig, run_with_retry
from ..streaming import StreamAccumulator
from .client import build_async_client
from .transport import open_stream, post_json, transport_error


class BaseHTTPProvider(LLMProvider):
    """Base class for adapters that talk JSON/SSE over HTTP.

    Subclasses must implement ``_endpoint``, ``_headers``, ``_build_body``,
    ``_parse_response`` and ``_stream_chunks``.

    Parameters:
        api_key: Default credential; per-call ``api_key`` arguments win.
        model: Default model; per-call ``model_override`` wins.
        base_url: API root (no trailing slash needed).
        http_client: Injected ``httpx.AsyncClient``; when omitted one is
            created on first use and closed by ``aclose``.
        retry_config: Explicit retry policy; defaults come from runtime settings.
    """

    supports_streaming = True

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        cfg = get_provider_config(self.name, {"api_key": api_key, "model": model, "base_url": base_url})
        self._api_key: Optional[str] = cfg.get("api_key") or None
        self._model: str = str(cfg.get("model") or "default")
        self._base_url: str = str(cfg.get("base_url") or "").rstrip("/")
        self._client = http_client
        self._owns_client = http_client is None
        self._retry_config = retry_config
        self._logger = get_logger(f"chatwire.providers.{self.name}")

    # ----- Wire format (subclass surface) -----

    @abstractmethod
    def _endpoint(self) -> str:
        """Absolute URL of the chat endpoint."""

    @abstractmethod
    def _headers(self, api_key: Optional[str]) -> Dict[str, str]:
        """Request headers for ``api_key`` (``None`` when not required)."""

    @abstractmethod
    def _build_body(
        self, request: ChatRequest, model: str, options: ChatOptions, *, stream: bool
    ) -> Dict[str, Any]:
        """Vendor JSON body."""

    @abstractmethod
    def _parse_response(self, payload: Any, model: str) -> ChatResponse:
        """Normalize a non-streaming JSON payload."""

    @abstractmethod
    def _stream_chunks(
        self, response: httpx.Response, acc: StreamAccumulator, token: Optional[CancellationToken]
    ) -> AsyncIterator[StreamChunk]:
        """Decode the SSE body of ``response`` into chunks via ``acc``."""

    # ----- Shared helpers -----

    @property
    def default_model(self) -> str:
        return self._model

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = build_async_client()
        return self._client

    def _resolve_api_key(self, api_key: Optional[str], model: str) -> Optional[str]:
        key = api_key or self._api_key
        if self.requires_api_key and not key:
            raise ProviderError(
                message=f"{self.display_name} API key required",
                provider=self.name,
                model=model,
            )
        return key

    def _build_retry_config(self, ctx: LogContext, phase: str) -> RetryConfig:
        """Retry policy with an attempt logger emitting ``retry.attempt`` events."""

        def _attempt_logger(*, attempt, max_attempts, delay_ms, error, classification) -> None:
            if error is None:
                return
            normalized_log_event(
                self._logger,
                "retry.attempt",
                ctx,
                phase=phase,
                attempt=attempt,
                error_code=classification.category.value if classification else None,
                max_attempts=max_attempts,
                delay_ms=delay_ms,
                will_retry=delay_ms is not None,
                error=str(error),
            )

        if self._retry_config is not None:
            return RetryConfig(
                retries=self._retry_config.retries,
                base_delay_ms=self._retry_config.base_delay_ms,
                attempt_logger=self._retry_config.attempt_logger or _attempt_logger,
            )
        settings = get_runtime_settings()
        return RetryConfig(
            retries=settings.max_retries,
            base_delay_ms=settings.retry_base_ms,
            attempt_logger=_attempt_logger,
        )

    # ----- Contract -----

    async def chat(
        self,
        request: ChatRequest,
        api_key: Optional[str] = None,
        model_override: Optional[str] = None,
        options: Optional[ChatOptions] = None,
    ) -> ChatResponse:
        model = model_override or self._model
        opts = options or ChatOptions()
        ctx = LogContext(provider=self.name, model=model)
        key = self._resolve_api_key(api_key, model)
        if opts.signal is not None:
            opts.signal.raise_if_cancelled()
        body = self._build_body(request, model, opts, stream=False)
        normalized_log_event(self._logger, "chat.start", ctx, phase="start", messages=len(request.messages))
        try:
            payload = await run_with_retry(
                lambda: post_json(
                    self._http(),
                    self._endpoint(),
                    headers=self._headers(key),
                    body=body,
                    display_name=self.display_name,
                    provider=self.name,
                    model=model,
                ),
                self._build_retry_config(ctx, "chat"),
                opts.signal,
            )
        except ProviderError as exc:
            normalized_log_event(
                self._logger,
                "chat.error",
                ctx,
                phase="finalize",
                error_code=exc.classification.category.value,
                error=str(exc),
            )
            raise
        response = self._parse_response(payload, model)
        normalized_log_event(
            self._logger,
            "chat.end",
            ctx,
            phase="finalize",
            emitted=bool(response.content or response.tool_calls),
            tokens=response.usage,
            tool_calls=len(response.tool_calls),
        )
        return response

    async def chat_stream(
        self,
        request: ChatRequest,
        api_key: Optional[str] = None,
        model_override: Optional[str] = None,
        options: Optional[ChatOptions] = None,
    ) -> AsyncIterator[StreamChunk]:
        model = model_override or self._model
        opts = options or ChatOptions()
        token = opts.signal
        ctx = LogContext(provider=self.name, model=model)
        key = self._resolve_api_key(api_key, model)
        if token is not None and token.cancelled:
            return
        body = self._build_body(request, model, opts, stream=True)
        normalized_log_event(self._logger, "stream.start", ctx, phase="start", messages=len(request.messages))
        try:
            response = await run_with_retry(
                lambda: open_stream(
                    self._http(),
                    self._endpoint(),
                    headers=self._headers(key),
                    body=body,
                    display_name=self.display_name,
                    provider=self.name,
                    model=model,
                ),
                self._build_retry_config(ctx, "stream.start"),
                token,
            )
        except CancelledError:
            normalized_log_event(
                self._logger, "stream.cancelled", ctx, phase="start", emitted=False, reason=token.reason if token else None
            )
            return
        acc = StreamAccumulator(model)
        try:
            async with aclosing(self._stream_chunks(response, acc, token)) as chunks:
                async for chunk in chunks:
                    if token is not None and token.cancelled:
                        break
                    yield chunk
            if token is not None and token.cancelled:
                normalized_log_event(
                    self._logger,
                    "stream.cancelled",
                    ctx,
                    phase="finalize",
                    emitted=acc.emitted > 0,
                    reason=token.reason,
                )
                return
            done = acc.finish()
            normalized_log_event(
                self._logger,
                "stream.end",
                ctx,
                phase="finalize",
                emitted=acc.emitted > 0,
                tokens=done.response.usage,
                emitted_count=acc.emitted,
                time_to_first_token_ms=acc.time_to_first_token_ms,
            )
            yield done
        except httpx.HTTPError as exc:
            err = transport_error(exc, display_name=self.display_name, provider=self.name, model=model)
            normalized_log_event(
                self._logger,
                "stream.error",
                ctx,
                phase="stream",
                error_code=err.classification.category.value,
                emitted=acc.emitted > 0,
                error=str(err),
            )
            yield ErrorChunk(error=str(err))
        except CancelledError:
            normalized_log_event(
                self._logger, "stream.cancelled", ctx, phase="stream", emitted=acc.emitted > 0, reason=token.reason if token else None
            )
        except Exception as exc:  # noqa: BLE001
            message = f"{self.display_name} stream error: {exc}"
            normalized_log_event(
                self._logger,
                "stream.error",
                ctx,
                phase="stream",
                error_code=classify_error(exc).category.value,
                emitted=acc.emitted > 0,
                error=message,
            )
            yield ErrorChunk(error=message)
        finally:
            await response.aclose()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None


__all__ = ["BaseHTTPProvider"]
