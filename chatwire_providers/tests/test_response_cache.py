from __future__ import annotations

import pytest

from chatwire_providers.base.models import ChatResponse, Message, ToolCall, Usage
from chatwire_providers.base.resilience import ResponseCache


class _Clock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _resp(text: str = "hello", tokens: int = 10) -> ChatResponse:
    return ChatResponse(content=text, usage=Usage(tokens, tokens), model="gpt-4o-mini")


def test_key_format_and_system_exclusion():
    msgs = [{"role": "system", "content": "sys A"}, {"role": "user", "content": "hi"}]
    other = [{"role": "system", "content": "sys B"}, {"role": "user", "content": "hi"}]
    key = ResponseCache.cache_key(msgs, "gpt-4o")
    model, digest = key.split("::")
    assert model == "gpt-4o"  # nosec B101 - asserts are appropriate in unit tests
    assert len(digest) == 16  # nosec B101
    assert key == ResponseCache.cache_key(other, "gpt-4o")  # nosec B101
    assert key != ResponseCache.cache_key(msgs, "gpt-4o-mini")  # nosec B101


def test_key_accepts_dtos_and_mappings_equally():
    as_dicts = [{"role": "user", "content": "hi"}]
    as_dtos = [Message(role="user", content="hi")]
    assert ResponseCache.cache_key(as_dicts, "m") == ResponseCache.cache_key(as_dtos, "m")  # nosec B101


def test_key_distinguishes_tool_branches():
    base = [
        {"role": "user", "content": "weather?"},
        {"role": "assistant", "content": None, "tool_calls": [{"id": "1", "name": "w", "arguments": "{}"}]},
    ]
    a = base + [{"role": "tool", "content": "sunny", "tool_call_id": "1"}]
    b = base + [{"role": "tool", "content": "sunny", "tool_call_id": "2"}]
    assert ResponseCache.cache_key(a, "m") != ResponseCache.cache_key(b, "m")  # nosec B101
    c = [
        {"role": "user", "content": "weather?"},
        {"role": "assistant", "content": None, "tool_calls": [{"id": "1", "name": "x", "arguments": "{}"}]},
    ] + [{"role": "tool", "content": "sunny", "tool_call_id": "1"}]
    assert ResponseCache.cache_key(a, "m") != ResponseCache.cache_key(c, "m")  # nosec B101


def test_hit_and_miss_counters():
    cache = ResponseCache()
    assert cache.get("m::missing") is None  # nosec B101
    cache.set("k", _resp(), "gpt-4o-mini")
    assert cache.get("k").content == "hello"  # nosec B101
    stats = cache.stats
    assert stats.hits == 1 and stats.misses == 1  # nosec B101
    assert stats.hit_rate == pytest.approx(0.5)  # nosec B101
    assert stats.tokens_saved == {"input": 10, "output": 10}  # nosec B101
    assert stats.entries == 1  # nosec B101


def test_ttl_expiry_removes_entry():
    clock = _Clock()
    cache = ResponseCache(ttl_seconds=60, clock=clock)
    cache.set("k", _resp(), "gpt-4o-mini")
    clock.now += 60
    assert cache.get("k") is not None  # nosec B101 - exactly ttl is still live
    clock.now += 1
    assert cache.get("k") is None  # nosec B101
    assert len(cache) == 0  # nosec B101
    assert cache.stats.misses == 1  # nosec B101


def test_responses_with_tool_calls_are_not_stored():
    cache = ResponseCache()
    resp = ChatResponse(tool_calls=[ToolCall(id="1", name="t")], model="m")
    cache.set("k", resp, "m")
    assert len(cache) == 0  # nosec B101


def test_lru_eviction_prefers_least_recently_used(log_events):
    cache = ResponseCache(max_entries=2)
    cache.set("a", _resp("A"), "m")
    cache.set("b", _resp("B"), "m")
    assert cache.get("a") is not None  # nosec B101 - refresh "a"
    cache.set("c", _resp("C"), "m")
    assert cache.get("b") is None  # nosec B101
    assert cache.get("a").content == "A"  # nosec B101
    assert cache.get("c").content == "C"  # nosec B101
    assert any(e.get("event") == "cache.evict" and e.get("key") == "b" for e in log_events)  # nosec B101


def test_overwrite_at_capacity_does_not_evict():
    cache = ResponseCache(max_entries=1)
    cache.set("a", _resp("A1"), "m")
    cache.set("a", _resp("A2"), "m")
    assert cache.get("a").content == "A2"  # nosec B101
    assert len(cache) == 1  # nosec B101


def test_disabled_cache_is_inert():
    cache = ResponseCache(enabled=False)
    cache.set("k", _resp(), "m")
    assert cache.get("k") is None  # nosec B101
    assert cache.stats.misses == 0  # nosec B101
    assert len(cache) == 0  # nosec B101


def test_cost_saved_and_clear():
    cache = ResponseCache()
    cache.set("k", ChatResponse(content="x", usage=Usage(1000, 1000), model="gpt-4o"), "gpt-4o")
    cache.get("k")
    cache.get("k")
    assert cache.stats.cost_saved == pytest.approx(0.025)  # nosec B101
    assert cache.delete("k") is True  # nosec B101
    assert cache.delete("k") is False  # nosec B101
    cache.clear()
    stats = cache.stats
    assert (stats.hits, stats.misses, stats.cost_saved) == (0, 0, 0.0)  # nosec B101


def test_absent_key_leaves_entries_untouched():
    cache = ResponseCache()
    cache.set("present", _resp(), "m")
    assert cache.get("absent") is None  # nosec B101
    assert cache.get("absent") is None  # nosec B101
    assert len(cache) == 1  # nosec B101
    assert cache.get("present") is not None  # nosec B101


def test_from_settings_reads_runtime_knobs(monkeypatch):
    monkeypatch.setenv("CHATWIRE_CACHE_TTL_SECONDS", "90")
    monkeypatch.setenv("CHATWIRE_CACHE_MAX_ENTRIES", "7")
    cache = ResponseCache.from_settings()
    assert cache.ttl_seconds == 90.0  # nosec B101
    assert cache.max_entries == 7  # nosec B101
    assert ResponseCache.from_settings(enabled=False).enabled is False  # nosec B101


def test_cache_key_skips_entries_that_are_not_messages():
    clean = [{"role": "user", "content": "hi"}]
    noisy = [None, 42, "user: hi", {"role": "user", "content": "hi"}]
    assert ResponseCache.cache_key(noisy, "m") == ResponseCache.cache_key(clean, "m")  # nosec B101
    odd_calls = [{"role": "assistant", "content": "x", "tool_calls": 5}]
    assert ResponseCache.cache_key(odd_calls, "m").startswith("m::")  # nosec B101
    assert ResponseCache.cache_key(None, "m") == ResponseCache.cache_key([], "m")  # nosec B101


def test_zero_capacity_stores_nothing():
    cache = ResponseCache(max_entries=0)
    cache.set("k", _resp(), "gpt-4o-mini")
    assert len(cache) == 0  # nosec B101
    assert cache.get("k") is None  # nosec B101
