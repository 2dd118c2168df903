"""LLMProvider contract (single-class module).

Every adapter (echo, local session, OpenAI, Anthropic, OpenAI-compatible)
implements this base class and is selected by its ``name`` in the registry.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import AsyncIterator, Optional

from ..models import ChatOptions, ChatRequest, ChatResponse, DoneChunk, StreamChunk, TextChunk


class LLMProvider(ABC):
    """Uniform chat interface over one vendor or backend.

    Class attributes describe identity and capabilities; subclasses override
    them. ``chat`` raises ``ProviderError`` on non-2xx HTTP responses,
    transport failures and missing required credentials. ``chat_stream``
    yields ``StreamChunk`` values ending in exactly one ``DoneChunk`` or
    ``ErrorChunk`` (or nothing further once cancelled).
    """

    name: str = ""
    display_name: str = ""
    requires_api_key: bool = False
    supports_streaming: bool = False
    supports_native_tools: bool = False

    async def is_available(self) -> bool:
        return True

    @abstractmethod
    async def chat(
        self,
        request: ChatRequest,
        api_key: Optional[str] = None,
        model_override: Optional[str] = None,
        options: Optional[ChatOptions] = None,
    ) -> ChatResponse:
        """Execute one chat completion."""

    async def chat_stream(
        self,
        request: ChatRequest,
        api_key: Optional[str] = None,
        model_override: Optional[str] = None,
        options: Optional[ChatOptions] = None,
    ) -> AsyncIterator[StreamChunk]:
        """Fallback stream for non-streaming backends: full text, then done."""
        response = await self.chat(request, api_key, model_override, options)
        if options is not None and options.signal is not None and options.signal.cancelled:
            return
        yield TextChunk(text=response.content)
        yield DoneChunk(response=response)

    async def aclose(self) -> None:
        """Release owned resources (HTTP clients, sessions)."""

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"{type(self).__name__}(name={self.name!r})"


__all__ = ["LLMProvider"]
