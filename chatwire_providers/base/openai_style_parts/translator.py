"""OpenAI Chat Completions translator.

Purpose:
- Build request bodies for ``POST /chat/completions`` from the internal
  ``ChatRequest`` and parse both the JSON response and the SSE stream
  payloads back into the normalized shapes. Shared by the OpenAI provider and
  every OpenAI-compatible backend.

Wire notes:
- Roles pass through unchanged; tool results carry ``tool_call_id``/``name``.
- Assistant tool calls are repacked as ``{id, type: "function", function:
  {name, arguments}}`` because a following tool-result message must reference
  them.
- Streaming bodies request ``stream_options.include_usage`` so the final
  payload (which has an empty ``choices`` list) reports token usage.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from ..constants import DEFAULT_MAX_TOKENS
from ..models import ChatOptions, ChatRequest, ChatResponse, Message, StreamChunk, ToolSpec
from ..streaming import StreamAccumulator
from ..validation import validate_chat_response


def _wire_message(message: Message) -> Dict[str, Any]:
    out: Dict[str, Any] = {"role": message.role, "content": message.content}
    if message.tool_call_id:
        out["tool_call_id"] = message.tool_call_id
    if message.name:
        out["name"] = message.name
    if message.role == "assistant" and message.tool_calls:
        out["tool_calls"] = [
            {
                "id": tc.id,
                "type": "function",
                "function": {"name": tc.name, "arguments": tc.arguments or "{}"},
            }
            for tc in message.normalized_tool_calls()
        ]
    return out


def _wire_tool(tool: ToolSpec) -> Dict[str, Any]:
    return {
        "type": "function",
        "function": {
            "name": tool.name,
            "description": tool.description or "",
            "parameters": tool.parameters or {},
        },
    }


def build_openai_body(
    request: ChatRequest,
    model: str,
    options: Optional[ChatOptions] = None,
    *,
    stream: bool = False,
    include_tools: bool = True,
) -> Dict[str, Any]:
    """Return the JSON body for a chat completion call.

    Parameters:
        request: Internal conversation and tool set.
        model: Resolved model name.
        options: ``max_tokens`` (default 4096) and optional ``temperature``.
        stream: Add ``stream`` and ``stream_options.include_usage``.
        include_tools: ``False`` drops tools for backends without native tools.
    """
    opts = options or ChatOptions()
    body: Dict[str, Any] = {
        "model": model,
        "messages": [_wire_message(m) for m in request.messages],
        "max_tokens": opts.max_tokens or DEFAULT_MAX_TOKENS,
    }
    if opts.temperature is not None:
        body["temperature"] = opts.temperature
    if include_tools and request.tools:
        body["tools"] = [_wire_tool(t) for t in request.tools]
    if stream:
        body["stream"] = True
        body["stream_options"] = {"include_usage": True}
    return body


def _first_choice(payload: Any) -> Optional[Mapping[str, Any]]:
    choices = payload.get("choices") if isinstance(payload, Mapping) else None
    if not isinstance(choices, list) or not choices or not isinstance(choices[0], Mapping):
        return None
    return choices[0]


def parse_openai_response(payload: Any, model: str) -> ChatResponse:
    """Normalize a Chat Completions JSON payload.

    A payload without ``choices`` (e.g. a content-filter refusal) yields an
    empty, zero-usage response for ``model``.
    """
    choice = _first_choice(payload)
    if choice is None:
        return validate_chat_response({"model": model}, fallback_model=model)
    message = choice.get("message") if isinstance(choice.get("message"), Mapping) else {}
    usage = payload.get("usage") if isinstance(payload.get("usage"), Mapping) else {}
    tool_calls: List[Dict[str, Any]] = []
    raw_calls = message.get("tool_calls")
    for tc in raw_calls if isinstance(raw_calls, list) else []:
        if not isinstance(tc, Mapping):
            continue
        function = tc.get("function") if isinstance(tc.get("function"), Mapping) else {}
        tool_calls.append({"id": tc.get("id"), "name": function.get("name"), "arguments": function.get("arguments")})
    return validate_chat_response(
        {
            "content": message.get("content") or "",
            "tool_calls": tool_calls,
            "usage": {
                "input_tokens": usage.get("prompt_tokens", 0),
                "output_tokens": usage.get("completion_tokens", 0),
            },
            "model": payload.get("model") or model,
        },
        fallback_model=model,
    )


def apply_openai_stream_payload(payload: Any, acc: StreamAccumulator) -> List[StreamChunk]:
    """Fold one decoded SSE payload into ``acc`` and return the chunks to emit.

    Model and usage are read before the choice guard: the terminating payload
    carries usage with an empty ``choices`` list.
    """
    if not isinstance(payload, Mapping):
        return []
    acc.observe_model(payload.get("model"))
    usage = payload.get("usage")
    if isinstance(usage, Mapping):
        acc.observe_usage(usage.get("prompt_tokens"), usage.get("completion_tokens"))

    choice = _first_choice(payload)
    delta = choice.get("delta") if choice is not None else None
    if not isinstance(delta, Mapping):
        return []

    chunks: List[StreamChunk] = list(acc.append_text(delta.get("content")))
    raw_calls = delta.get("tool_calls")
    for tc in raw_calls if isinstance(raw_calls, list) else []:
        if not isinstance(tc, Mapping):
            continue
        index = tc.get("index")
        index = index if isinstance(index, int) else 0
        function = tc.get("function") if isinstance(tc.get("function"), Mapping) else {}
        chunks.extend(acc.start_tool(index, tc.get("id"), function.get("name")))
        chunks.extend(acc.append_tool_arguments(index, function.get("arguments")))
    return chunks


__all__ = ["build_openai_body", "parse_openai_response", "apply_openai_stream_payload"]
