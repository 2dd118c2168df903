"""Incremental Server-Sent-Events decoders.

Two framings are supported:

* Generic (OpenAI-style): newline-terminated ``data: {json}`` lines, blank
  lines ignored, end of stream at ``data: [DONE]``.
* Anthropic: blank-line separated blocks, each carrying an ``event: <type>``
  line and a ``data: {json}`` line.

Both decoders buffer undecoded bytes (including split UTF-8 sequences) and
only emit complete, delimiter-terminated units; a trailing fragment waits for
the next ``feed``. Unparseable JSON is reported as an explicit skip result
from :func:`parse_json` and dropped. The ``read_*`` coroutines wrap a decoder
around an async byte iterator and stop as soon as the cancellation token is
set, even while a read is still pending.
"""
from __future__ import annotations

import asyncio
import codecs
import json
from contextlib import aclosing
from dataclasses import dataclass
from typing import Any, AsyncIterator, List, Optional

from .cancellation import CancellationToken
from .constants import SSE_DONE_SENTINEL


@dataclass(frozen=True)
class JsonParse:
    """Per-line JSON parse outcome: ``ok`` with a value, or a skip."""

    ok: bool
    value: Any = None


_SKIP = JsonParse(ok=False)


def parse_json(text: str) -> JsonParse:
    try:
        return JsonParse(ok=True, value=json.loads(text))
    except ValueError:
        return _SKIP


@dataclass(frozen=True)
class SSEEvent:
    """One named Anthropic event with its decoded JSON payload."""

    event: str
    data: Any


def _field_value(line: str, name: str) -> Optional[str]:
    """Return the value of ``name:`` (optional single space), or ``None``."""
    prefix = name + ":"
    if not line.startswith(prefix):
        return None
    value = line[len(prefix):]
    return value[1:] if value.startswith(" ") else value


class _TextBuffer:
    """UTF-8 incremental decoding plus CRLF normalization."""

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self.text = ""

    def push(self, data: bytes) -> None:
        self.text = (self.text + self._decoder.decode(data)).replace("\r\n", "\n")


class GenericSSEDecoder:
    """Line-framed decoder yielding the parsed JSON of each ``data:`` line."""

    def __init__(self) -> None:
        self._buffer = _TextBuffer()
        self.done = False

    def feed(self, data: bytes) -> List[Any]:
        """Consume bytes; return payloads of every newly completed line."""
        if self.done:
            return []
        self._buffer.push(data)
        *lines, self._buffer.text = self._buffer.text.split("\n")
        payloads: List[Any] = []
        for line in lines:
            value = _field_value(line.strip(), "data")
            if value is None:
                continue
            if value.strip() == SSE_DONE_SENTINEL:
                self.done = True
                self._buffer.text = ""
                break
            parsed = parse_json(value)
            if parsed.ok:
                payloads.append(parsed.value)
        return payloads


class AnthropicSSEDecoder:
    """Block-framed decoder yielding :class:`SSEEvent` for complete blocks."""

    def __init__(self) -> None:
        self._buffer = _TextBuffer()

    def feed(self, data: bytes) -> List[SSEEvent]:
        """Consume bytes; return events for every newly completed block."""
        self._buffer.push(data)
        *blocks, self._buffer.text = self._buffer.text.split("\n\n")
        events: List[SSEEvent] = []
        for block in blocks:
            event_type: Optional[str] = None
            data_text: Optional[str] = None
            for line in block.split("\n"):
                line = line.strip()
                event_type = _field_value(line, "event") if event_type is None else event_type
                data_text = _field_value(line, "data") if data_text is None else data_text
            if not event_type or data_text is None:
                continue
            parsed = parse_json(data_text)
            if parsed.ok:
                events.append(SSEEvent(event=event_type.strip(), data=parsed.value))
        return events


_EOF = object()


async def _next_chunk(iterator: AsyncIterator[Any]) -> Any:
    try:
        return await iterator.__anext__()
    except StopAsyncIteration:
        return _EOF


async def iter_until_cancelled(
    chunks: AsyncIterator[Any], token: Optional[CancellationToken] = None
) -> AsyncIterator[Any]:
    """Re-yield ``chunks``, abandoning a pending read as soon as ``token`` fires.

    Each read is raced against the token, so a stalled connection does not
    keep the caller waiting after ``cancel()``. The abandoned read is
    cancelled; closing the underlying response is left to its owner.
    """
    if token is None:
        async for chunk in chunks:
            yield chunk
        return
    loop = asyncio.get_running_loop()
    fired = asyncio.Event()
    unsubscribe = token.on_cancel(lambda: loop.call_soon_threadsafe(fired.set))
    waiter = asyncio.ensure_future(fired.wait())
    iterator = chunks.__aiter__()
    pending: Optional[asyncio.Future] = None
    try:
        while not token.cancelled:
            pending = asyncio.ensure_future(_next_chunk(iterator))
            await asyncio.wait({pending, waiter}, return_when=asyncio.FIRST_COMPLETED)
            if not pending.done():
                return
            chunk = pending.result()
            pending = None
            if chunk is _EOF:
                return
            yield chunk
    finally:
        unsubscribe()
        waiter.cancel()
        if pending is not None and not pending.done():
            pending.cancel()
            await asyncio.gather(pending, return_exceptions=True)


async def read_sse(
    chunks: AsyncIterator[bytes], token: Optional[CancellationToken] = None
) -> AsyncIterator[Any]:
    """Yield generic SSE payloads from a byte stream until ``[DONE]`` or EOF."""
    decoder = GenericSSEDecoder()
    async with aclosing(iter_until_cancelled(chunks, token)) as guarded:
        async for chunk in guarded:
            if token is not None and token.cancelled:
                return
            for payload in decoder.feed(chunk):
                yield payload
            if decoder.done:
                return


async def read_anthropic_sse(
    chunks: AsyncIterator[bytes], token: Optional[CancellationToken] = None
) -> AsyncIterator[SSEEvent]:
    """Yield Anthropic named events from a byte stream until EOF."""
    decoder = AnthropicSSEDecoder()
    async with aclosing(iter_until_cancelled(chunks, token)) as guarded:
        async for chunk in guarded:
            if token is not None and token.cancelled:
                return
            for event in decoder.feed(chunk):
                yield event


__all__ = [
    "JsonParse",
    "parse_json",
    "SSEEvent",
    "GenericSSEDecoder",
    "AnthropicSSEDecoder",
    "iter_until_cancelled",
    "read_sse",
    "read_anthropic_sse",
]
