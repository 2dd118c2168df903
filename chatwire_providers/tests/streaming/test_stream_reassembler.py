from __future__ import annotations

from chatwire_providers.base.models import DoneChunk, TextChunk, ToolCall, ToolDeltaChunk, ToolStartChunk
from chatwire_providers.base.openai_style_parts import apply_openai_stream_payload, parse_openai_response
from chatwire_providers.base.streaming import StreamAccumulator


def test_text_deltas_accumulate():
    acc = StreamAccumulator("gpt-4o")
    assert acc.append_text("He") == [TextChunk("He")]  # nosec B101 - asserts are appropriate in unit tests
    assert acc.append_text("") == []  # nosec B101
    assert acc.append_text(None) == []  # nosec B101
    acc.append_text("llo")
    done = acc.finish()
    assert isinstance(done, DoneChunk)  # nosec B101
    assert done.response.content == "Hello"  # nosec B101
    assert done.response.model == "gpt-4o"  # nosec B101
    assert acc.emitted == 2  # nosec B101
    assert acc.time_to_first_token_ms is not None  # nosec B101


def test_tool_start_emitted_once_per_index():
    acc = StreamAccumulator("m")
    assert acc.start_tool(0, "call_1", "search") == [ToolStartChunk(0, "call_1", "search")]  # nosec B101
    assert acc.start_tool(0, None, "search") == []  # nosec B101
    assert acc.append_tool_arguments(0, '{"q":') == [ToolDeltaChunk(0, '{"q":')]  # nosec B101
    acc.append_tool_arguments(0, '"x"}')
    assert acc.finish().response.tool_calls == [ToolCall("call_1", "search", '{"q":"x"}')]  # nosec B101


def test_nameless_tools_are_dropped_and_order_is_by_index():
    acc = StreamAccumulator("m")
    acc.start_tool(2, "b", "second")
    acc.start_tool(0, "a", "first")
    acc.append_tool_arguments(5, '{"orphan":1}')
    tool_calls = acc.finish().response.tool_calls
    assert [tc.name for tc in tool_calls] == ["first", "second"]  # nosec B101
    assert all(tc.arguments == "{}" for tc in tool_calls)  # nosec B101


def test_arguments_for_unknown_index_ignored_without_create():
    acc = StreamAccumulator("m")
    assert acc.append_tool_arguments(3, "{}", create=False) == []  # nosec B101
    assert acc.tools == {}  # nosec B101


def test_usage_and_model_survive_content_free_payload():
    acc = StreamAccumulator("gpt-4o-mini")
    apply_openai_stream_payload({"model": "gpt-4o-mini-2024", "choices": [{"delta": {"content": "Hi"}}]}, acc)
    chunks = apply_openai_stream_payload(
        {"choices": [], "usage": {"prompt_tokens": 9, "completion_tokens": 1}}, acc
    )
    assert chunks == []  # nosec B101
    response = acc.finish().response
    assert response.usage.input_tokens == 9 and response.usage.output_tokens == 1  # nosec B101
    assert response.model == "gpt-4o-mini-2024"  # nosec B101


def test_openai_tool_call_fragments_by_index():
    acc = StreamAccumulator("m")
    payloads = [
        {"choices": [{"delta": {"tool_calls": [{"index": 0, "id": "c0", "function": {"name": "a", "arguments": ""}}]}}]},
        {"choices": [{"delta": {"tool_calls": [{"index": 1, "id": "c1", "function": {"name": "b"}}]}}]},
        {"choices": [{"delta": {"tool_calls": [{"index": 0, "function": {"arguments": '{"x":'}}]}}]},
        {"choices": [{"delta": {"tool_calls": [{"index": 0, "function": {"arguments": "1}"}}]}}]},
    ]
    emitted = []
    for payload in payloads:
        emitted.extend(apply_openai_stream_payload(payload, acc))
    assert [c.type for c in emitted] == ["tool_start", "tool_start", "tool_delta", "tool_delta"]  # nosec B101
    calls = acc.finish().response.tool_calls
    assert calls == [ToolCall("c0", "a", '{"x":1}'), ToolCall("c1", "b", "{}")]  # nosec B101


def test_non_mapping_payload_is_ignored():
    acc = StreamAccumulator("m")
    assert apply_openai_stream_payload(["nope"], acc) == []  # nosec B101


def test_non_list_tool_calls_are_ignored():
    acc = StreamAccumulator("gpt-4o-mini")
    assert apply_openai_stream_payload({"choices": [{"delta": {"tool_calls": 5}}]}, acc) == []  # nosec B101
    response = parse_openai_response({"choices": [{"message": {"content": "x", "tool_calls": True}}]}, "m")
    assert response.content == "x" and response.tool_calls == []  # nosec B101
