"""Local session provider backed by an on-device language model.

Purpose
-------
Zero-cost provider that runs prompts against an injected
:class:`~chatwire_providers.local.backend.LanguageModelBackend`. Without a
backend it reports itself unavailable and ``chat`` raises ``ProviderError``.

Prompting strategy
------------------
- Short conversations (at most two non-system messages) reuse a pooled
  session seeded with the system prompt and send only the last user message.
- Longer conversations run on a one-shot session fed a ``User:``/
  ``Assistant:`` transcript; it is destroyed afterwards.
- When the base system prompt (text before any appended tool instructions)
  changes, the pool is reset.

Token usage is the session's ``input_usage`` when reported, otherwise an
estimate of one token per four characters.
"""

from __future__ import annotations

from contextlib import aclosing
from typing import AsyncIterator, List, Optional, Tuple

from ..base.errors import ProviderError, classify_error
from ..base.interfaces import LLMProvider
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import ChatOptions, ChatRequest, ChatResponse, DoneChunk, ErrorChunk, Message, StreamChunk, TextChunk
from ..base.sse import iter_until_cancelled
from ..base.validation import validate_chat_response
from ..config.defaults import LOCAL_DEFAULT_SYSTEM_PROMPT, LOCAL_MODEL
from .backend import USABLE_AVAILABILITY, LanguageModelBackend, LanguageModelSession
from .session_pool import SessionPool

# Marker separating the base system prompt from appended tool instructions
TOOL_INSTRUCTIONS_MARKER = "\n\nYou have browser tools"


def _estimate_tokens(text: str) -> int:
    return round(len(text) / 4)


def _transcript(messages: List[Message]) -> str:
    lines = [
        f"{'User' if m.role == 'user' else 'Assistant'}: {m.content or ''}"
        for m in messages
        if m.role != "tool"
    ]
    return "\n\n".join(lines) + "\n\nAssistant:"


class LocalSessionProvider(LLMProvider):
    """On-device provider with a bounded session pool.

    Parameters:
        backend: Runtime used to create sessions (``None`` means unavailable).
        pool: Session pool (default: 3 sessions, 5 minute idle timeout).
        model: Model name reported in responses.
    """

    name = "local"
    display_name = "On-device model (local)"
    supports_streaming = True

    def __init__(
        self,
        backend: Optional[LanguageModelBackend] = None,
        *,
        pool: Optional[SessionPool] = None,
        model: str = LOCAL_MODEL,
    ) -> None:
        self._backend = backend
        self._pool = pool or SessionPool()
        self._model = model
        self._last_system_prompt: Optional[str] = None
        self._logger = get_logger("chatwire.providers.local")

    async def is_available(self) -> bool:
        if self._backend is None:
            return False
        return (await self._backend.availability()) in USABLE_AVAILABILITY

    def _require_backend(self) -> LanguageModelBackend:
        if self._backend is None:
            raise ProviderError(
                message=f"{self.display_name} backend not available",
                provider=self.name,
                model=self._model,
            )
        return self._backend

    def _prepare(self, request: ChatRequest) -> Tuple[str, List[Message], Optional[Message]]:
        system_msg = next((m for m in request.messages if m.role == "system"), None)
        system_content = (system_msg.content if system_msg else None) or LOCAL_DEFAULT_SYSTEM_PROMPT
        base_system = system_content.split(TOOL_INSTRUCTIONS_MARKER)[0]
        if len(self._pool) > 0 and self._last_system_prompt != base_system:
            self.reset_sessions()
        self._last_system_prompt = base_system
        conversation = [m for m in request.messages if m.role != "system"]
        last_user = next((m for m in reversed(conversation) if m.role == "user"), None)
        return system_content, conversation, last_user

    async def _open_session(self, request: ChatRequest) -> Tuple[LanguageModelSession, str, bool]:
        """Return ``(session, prompt, one_shot)`` for ``request``."""
        backend = self._require_backend()
        system_content, conversation, last_user = self._prepare(request)
        if len(conversation) <= 2:
            session = await self._pool.acquire(backend, system_content)
            return session, (last_user.content if last_user else "") or "", False
        session = await backend.create([{"role": "system", "content": system_content}])
        return session, _transcript(conversation), True

    def _response(self, session: LanguageModelSession, prompt: str, content: str) -> ChatResponse:
        input_usage = getattr(session, "input_usage", None)
        return validate_chat_response(
            {
                "content": content,
                "usage": {
                    "input_tokens": input_usage if input_usage is not None else _estimate_tokens(prompt),
                    "output_tokens": _estimate_tokens(content),
                },
                "model": self._model,
            },
            fallback_model=self._model,
        )

    async def _prompt_once(self, session: LanguageModelSession, prompt: str, one_shot: bool) -> ChatResponse:
        try:
            content = await session.prompt(prompt)
            response = self._response(session, prompt, content if isinstance(content, str) else str(content))
        finally:
            if one_shot:
                session.destroy()
        normalized_log_event(
            self._logger,
            "chat.end",
            LogContext(provider=self.name, model=self._model),
            phase="finalize",
            emitted=bool(response.content),
            tokens=response.usage,
            one_shot=one_shot,
        )
        return response

    async def chat(
        self,
        request: ChatRequest,
        api_key: Optional[str] = None,
        model_override: Optional[str] = None,
        options: Optional[ChatOptions] = None,
    ) -> ChatResponse:
        session, prompt, one_shot = await self._open_session(request)
        return await self._prompt_once(session, prompt, one_shot)

    async def chat_stream(
        self,
        request: ChatRequest,
        api_key: Optional[str] = None,
        model_override: Optional[str] = None,
        options: Optional[ChatOptions] = None,
    ) -> AsyncIterator[StreamChunk]:
        session, prompt, one_shot = await self._open_session(request)
        prompt_streaming = getattr(session, "prompt_streaming", None)
        token = options.signal if options is not None else None
        if not callable(prompt_streaming):
            response = await self._prompt_once(session, prompt, one_shot)
            if token is not None and token.cancelled:
                return
            yield TextChunk(text=response.content)
            yield DoneChunk(response=response)
            return

        full = ""
        last_len = 0
        ctx = LogContext(provider=self.name, model=self._model)
        try:
            async with aclosing(iter_until_cancelled(prompt_streaming(prompt), token)) as pieces:
                async for piece in pieces:
                    if token is not None and token.cancelled:
                        return
                    text = piece if isinstance(piece, str) else str(piece)
                    # Some runtimes yield the accumulated text, others yield deltas.
                    if len(text) >= last_len and text.startswith(full):
                        delta = text[last_len:]
                        full = text
                    else:
                        delta = text
                        full += text
                    last_len = len(full)
                    if delta:
                        yield TextChunk(text=delta)
            if token is not None and token.cancelled:
                return
            response = self._response(session, prompt, full)
        except Exception as exc:  # noqa: BLE001
            normalized_log_event(
                self._logger,
                "stream.error",
                ctx,
                phase="stream",
                error_code=classify_error(exc).category.value,
                emitted=bool(full),
                error=str(exc),
            )
            yield ErrorChunk(error=f"{self.display_name} stream error: {exc}")
            return
        finally:
            if one_shot:
                session.destroy()
        normalized_log_event(
            self._logger,
            "stream.end",
            ctx,
            phase="finalize",
            emitted=bool(full),
            tokens=response.usage,
        )
        yield DoneChunk(response=response)

    def reset_sessions(self) -> None:
        """Destroy all pooled sessions (next chat creates fresh ones)."""
        self._pool.clear()

    async def aclose(self) -> None:
        self.reset_sessions()


__all__ = ["LocalSessionProvider", "TOOL_INSTRUCTIONS_MARKER"]
