"""LRU + TTL cache for idempotent chat responses.

Keys embed the model (``<model>::<digest>``) so one cache instance is shared
across providers without collisions. The digest covers the non-system
messages in order (role, content, ``tool_call_id`` and any ``tool_calls``), so
distinct tool-bearing branches of the same conversation never share a key.

Responses carrying tool calls are never stored: replaying them would repeat
side effects. Expired entries are removed lazily on read; the single oldest
entry is evicted when inserting at capacity. All operations are guarded by
one lock and never raise.
"""
from __future__ import annotations

import hashlib
import json
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from ...config import RuntimeSettings, get_runtime_settings
from ..constants import DEFAULT_CACHE_MAX_ENTRIES, DEFAULT_CACHE_TTL_SECONDS
from ..logging import get_logger, log_event
from ..models import ChatResponse, Message, Usage
from ..pricing import estimate_cost

_logger = get_logger("chatwire.cache")


@dataclass
class CacheEntry:
    response: ChatResponse
    model: str
    timestamp: float
    hit_count: int = 0
    tokens_saved: Usage = field(default_factory=Usage)


@dataclass(frozen=True)
class CacheStats:
    """Snapshot of cache counters; ``cost_saved`` is rounded to 4 places."""

    entries: int
    max_entries: int
    ttl_seconds: float
    hits: int
    misses: int
    hit_rate: float
    tokens_saved: Dict[str, int]
    cost_saved: float


def _message_fields(message: Any) -> Optional[Dict[str, Any]]:
    """Digest fields for one entry; ``None`` when it is not a message at all."""
    if isinstance(message, Message):
        msg = message
    elif isinstance(message, Mapping):
        calls = message.get("tool_calls")
        msg = Message.from_dict({**message, "tool_calls": calls if isinstance(calls, list) else None})
    else:
        return None
    return {
        "role": msg.role,
        "content": msg.content,
        "tool_call_id": msg.tool_call_id,
        "tool_calls": [tc.to_dict() for tc in msg.normalized_tool_calls()] or None,
    }


class ResponseCache:
    """Thread-safe response cache shared by every provider.

    Parameters:
        max_entries: Capacity before LRU eviction (default 500).
        ttl_seconds: Entry lifetime (default 30 minutes).
        enabled: When ``False``, ``get`` always misses silently and ``set``
            stores nothing.
        clock: Monotonic time source in seconds (injectable for tests).
    """

    def __init__(
        self,
        *,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        enabled: bool = True,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._clock = clock
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self.enabled = enabled
        self._hits = 0
        self._misses = 0
        self._input_saved = 0
        self._output_saved = 0
        self._cost_saved = 0.0

    @classmethod
    def from_settings(cls, settings: Optional[RuntimeSettings] = None, **kwargs: Any) -> "ResponseCache":
        """Build a cache sized by ``RuntimeSettings`` (``CHATWIRE_CACHE_*``)."""
        resolved = settings or get_runtime_settings()
        return cls(
            max_entries=resolved.cache_max_entries,
            ttl_seconds=resolved.cache_ttl_seconds,
            **kwargs,
        )

    @staticmethod
    def cache_key(messages: Iterable[Any], model: str) -> str:
        """Return ``<model>::<digest>`` for a conversation.

        ``messages`` may hold ``Message`` DTOs or plain mappings; system
        messages and entries that are not messages are excluded from the
        digest.
        """
        parts = []
        for message in messages or ():
            fields = _message_fields(message)
            if fields is None or fields.get("role") == "system":
                continue
            part = f"{fields.get('role')}:{fields.get('content') or ''}"
            if fields.get("tool_call_id"):
                part += f":tid={fields['tool_call_id']}"
            if fields.get("tool_calls"):
                part += ":tc=" + json.dumps(fields["tool_calls"], sort_keys=True, default=str)
            parts.append(part)
        digest = hashlib.sha256("|".join(parts).encode("utf-8")).hexdigest()[:16]
        return f"{model}::{digest}"

    def get(self, key: str) -> Optional[ChatResponse]:
        """Return a live cached response, or ``None`` (counted as a miss)."""
        if not self.enabled:
            return None
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if self._clock() - entry.timestamp > self.ttl_seconds:
                del self._entries[key]
                self._misses += 1
                return None
            self._entries.move_to_end(key)
            entry.hit_count += 1
            self._hits += 1
            self._input_saved += entry.tokens_saved.input_tokens
            self._output_saved += entry.tokens_saved.output_tokens
            self._cost_saved += estimate_cost(entry.model, entry.tokens_saved)
            return entry.response

    def set(self, key: str, response: ChatResponse, model: str) -> None:
        """Store ``response`` unless it carries tool calls or the cache is disabled.

        A ``max_entries`` of zero or less disables storage.
        """
        if not self.enabled or self.max_entries <= 0 or response.tool_calls:
            return
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_entries and self._entries:
                evicted, _ = self._entries.popitem(last=False)
                log_event(_logger, "cache.evict", key=evicted, entries=len(self._entries))
            self._entries[key] = CacheEntry(
                response=response,
                model=model,
                timestamp=self._clock(),
                tokens_saved=Usage(
                    input_tokens=response.usage.input_tokens,
                    output_tokens=response.usage.output_tokens,
                ),
            )
            self._entries.move_to_end(key)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        """Drop all entries and reset every counter."""
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._input_saved = 0
            self._output_saved = 0
            self._cost_saved = 0.0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    @property
    def size(self) -> int:
        return len(self)

    @property
    def stats(self) -> CacheStats:
        with self._lock:
            total = self._hits + self._misses
            return CacheStats(
                entries=len(self._entries),
                max_entries=self.max_entries,
                ttl_seconds=self.ttl_seconds,
                hits=self._hits,
                misses=self._misses,
                hit_rate=(self._hits / total) if total else 0.0,
                tokens_saved={"input": self._input_saved, "output": self._output_saved},
                cost_saved=round(self._cost_saved, 4),
            )


__all__ = ["CacheEntry", "CacheStats", "ResponseCache"]
