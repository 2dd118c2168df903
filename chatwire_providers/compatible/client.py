"""OpenAI-compatible provider.

Purpose:
- Talk to any backend exposing the Chat Completions wire shape (Groq,
  OpenRouter, Together, Mistral, DeepSeek, xAI, Ollama, LM Studio...) at a
  configurable base URL, with optional bearer auth and optional native tool
  support.

Availability:
- No base URL: unavailable.
- Local base URL (``localhost``/loopback): probe ``GET {base}/models`` with a
  short timeout; any transport error or non-2xx means unavailable.
- Remote base URL: assumed available (credentials are checked per call).
"""

from __future__ import annotations

from typing import Dict, Mapping, Optional

import httpx

from ..base.constants import LOCAL_PROBE_TIMEOUT
from ..base.logging import LogContext, log_event
from ..base.openai_style_parts.base import BaseOpenAIStyleProvider
from ..base.resilience.retry import RetryConfig

_LOOPBACK_HOSTS = frozenset({"localhost", "127.0.0.1", "0.0.0.0", "::1"})


class OpenAICompatibleProvider(BaseOpenAIStyleProvider):
    """Configurable Chat Completions backend.

    Parameters:
        name: Registry key (also the config/env prefix, e.g. ``GROQ_API_KEY``).
        base_url: API root; trailing slashes are stripped.
        model: Default model (``"default"`` when nothing is configured).
        display_name: Human-readable name used in errors.
        requires_api_key: Fail fast when no key is supplied (default ``True``).
        native_tools: Forward tool specs (default ``True``); when ``False``
            tools are dropped from the request body.
        extra_headers: Static headers added to every request.
        api_key, http_client, retry_config: As ``BaseHTTPProvider``.
    """

    supports_streaming = True

    def __init__(
        self,
        name: str,
        *,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        display_name: Optional[str] = None,
        requires_api_key: bool = True,
        native_tools: bool = True,
        extra_headers: Optional[Mapping[str, str]] = None,
        api_key: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        retry_config: Optional[RetryConfig] = None,
    ) -> None:
        self.name = name
        self.display_name = display_name or name
        self.requires_api_key = requires_api_key
        self.supports_native_tools = native_tools
        self._extra_headers: Dict[str, str] = dict(extra_headers or {})
        super().__init__(
            api_key=api_key,
            model=model,
            base_url=base_url,
            http_client=http_client,
            retry_config=retry_config,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self, api_key: Optional[str]) -> Dict[str, str]:
        headers = super()._headers(api_key)
        headers.update(self._extra_headers)
        return headers

    def _is_local(self) -> bool:
        host = httpx.URL(self._base_url).host
        return host in _LOOPBACK_HOSTS

    async def is_available(self) -> bool:
        if not self._base_url:
            return False
        if not self._is_local():
            return True
        try:
            response = await self._http().get(
                f"{self._base_url}/models",
                headers=self._headers(self._api_key),
                timeout=LOCAL_PROBE_TIMEOUT,
            )
        except httpx.HTTPError as exc:
            log_event(
                self._logger,
                "probe.unreachable",
                LogContext(provider=self.name, model=self._model),
                base_url=self._base_url,
                error=str(exc) or type(exc).__name__,
            )
            return False
        return response.is_success


__all__ = ["OpenAICompatibleProvider"]
