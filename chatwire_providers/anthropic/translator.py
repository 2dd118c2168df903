"""Anthropic Messages API translator.

Purpose:
- Convert the internal conversation into the Messages API shape and parse
  responses/stream events back into normalized DTOs.

Invariants enforced on the outgoing ``messages`` array (the API rejects
requests that violate them, while the internal model does not guarantee them):

1. Strict alternation: consecutive same-role messages are merged. Strings are
   joined with a blank line, block lists are concatenated, and a string merged
   with blocks is promoted to a ``text`` block first.
2. The first message is ``user``; otherwise ``(conversation start)`` is
   prepended.
3. Assistant messages whose content collapses to ``""``/``[]`` are dropped.

Packing rules:
- System messages never enter ``messages``; the first one becomes ``system``.
- With tools active, assistant tool calls become ``tool_use`` blocks and tool
  results become ``tool_result`` blocks inside a ``user`` turn (merged into an
  open user turn). Without tools, tool results degrade to
  ``[<name> result] <content>`` text on the user side.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Union

from ..base.constants import DEFAULT_MAX_TOKENS
from ..base.models import ChatOptions, ChatRequest, ChatResponse, Message, StreamChunk
from ..base.sse import SSEEvent, parse_json
from ..base.streaming import StreamAccumulator
from ..base.validation import validate_chat_response

Content = Union[str, List[Dict[str, Any]]]

CONVERSATION_START = "(conversation start)"


def _as_blocks(content: Content) -> List[Dict[str, Any]]:
    if isinstance(content, list):
        return list(content)
    return [{"type": "text", "text": content}] if content else []


def _merge_content(existing: Content, incoming: Content) -> Content:
    if isinstance(existing, str) and isinstance(incoming, str):
        if not existing:
            return incoming
        if not incoming:
            return existing
        return f"{existing}\n\n{incoming}"
    return _as_blocks(existing) + _as_blocks(incoming)


def _is_empty(content: Content) -> bool:
    if isinstance(content, str):
        return not content.strip()
    return len(content) == 0


def _parse_arguments(arguments: str) -> Dict[str, Any]:
    parsed = parse_json(arguments or "{}")
    return parsed.value if parsed.ok and isinstance(parsed.value, dict) else {}


def _assistant_content(message: Message, tools_active: bool) -> Content:
    blocks: List[Dict[str, Any]] = []
    if message.content:
        blocks.append({"type": "text", "text": message.content})
    if tools_active:
        for tc in message.normalized_tool_calls():
            blocks.append(
                {"type": "tool_use", "id": tc.id, "name": tc.name, "input": _parse_arguments(tc.arguments)}
            )
    if len(blocks) == 1 and blocks[0]["type"] == "text":
        return blocks[0]["text"]
    return blocks


def _tool_result_text(message: Message) -> str:
    label = f"[{message.name} result]" if message.name else "[Tool result]"
    return f"{label} {message.content or ''}"


def _append(out: List[Dict[str, Any]], role: str, content: Content) -> None:
    """Append a turn, merging into the previous one when the role repeats."""
    if out and out[-1]["role"] == role:
        out[-1]["content"] = _merge_content(out[-1]["content"], content)
        return
    out.append({"role": role, "content": content})


def build_anthropic_messages(messages: List[Message], tools_active: bool) -> List[Dict[str, Any]]:
    """Return the alternating ``messages`` array for the Messages API."""
    out: List[Dict[str, Any]] = []
    for message in messages:
        if message.role == "system":
            continue
        if message.role == "assistant":
            _append(out, "assistant", _assistant_content(message, tools_active))
        elif message.role == "tool":
            if tools_active and message.tool_call_id:
                block = {
                    "type": "tool_result",
                    "tool_use_id": message.tool_call_id,
                    "content": message.content or "",
                }
                _append(out, "user", [block])
            else:
                _append(out, "user", _tool_result_text(message))
        else:
            _append(out, "user", message.content or "")

    out = [m for m in out if not (m["role"] == "assistant" and _is_empty(m["content"]))]
    if not out or out[0]["role"] != "user":
        out.insert(0, {"role": "user", "content": CONVERSATION_START})
    # Dropping empty assistant turns can leave two user turns adjacent.
    merged: List[Dict[str, Any]] = []
    for m in out:
        _append(merged, m["role"], m["content"])
    return merged


def extract_system(messages: List[Message]) -> Optional[str]:
    for message in messages:
        if message.role == "system" and message.content:
            return message.content
    return None


def build_anthropic_body(
    request: ChatRequest, model: str, options: Optional[ChatOptions] = None, *, stream: bool = False
) -> Dict[str, Any]:
    """Return the JSON body for ``POST /v1/messages``."""
    opts = options or ChatOptions()
    tools_active = request.has_tools
    body: Dict[str, Any] = {
        "model": model,
        "max_tokens": opts.max_tokens or DEFAULT_MAX_TOKENS,
        "messages": build_anthropic_messages(request.messages, tools_active),
    }
    system = extract_system(request.messages)
    if system:
        body["system"] = system
    if opts.temperature is not None:
        body["temperature"] = opts.temperature
    if tools_active:
        body["tools"] = [
            {"name": t.name, "description": t.description or "", "input_schema": t.parameters or {}}
            for t in request.tools or []
        ]
    if stream:
        body["stream"] = True
    return body


def parse_anthropic_response(payload: Any, model: str) -> ChatResponse:
    """Normalize a Messages API JSON payload (text blocks joined with ``\\n``)."""
    if not isinstance(payload, Mapping):
        return validate_chat_response(None, fallback_model=model)
    texts: List[str] = []
    tool_calls: List[Dict[str, Any]] = []
    blocks = payload.get("content")
    for block in blocks if isinstance(blocks, list) else []:
        if not isinstance(block, Mapping):
            continue
        if block.get("type") == "text" and isinstance(block.get("text"), str):
            texts.append(block["text"])
        elif block.get("type") == "tool_use":
            tool_calls.append(
                {
                    "id": block.get("id"),
                    "name": block.get("name"),
                    "arguments": json.dumps(block.get("input") or {}),
                }
            )
    usage = payload.get("usage") if isinstance(payload.get("usage"), Mapping) else {}
    return validate_chat_response(
        {
            "content": "\n".join(texts),
            "tool_calls": tool_calls,
            "usage": {
                "input_tokens": usage.get("input_tokens", 0),
                "output_tokens": usage.get("output_tokens", 0),
            },
            "model": payload.get("model") or model,
        },
        fallback_model=model,
    )


def apply_anthropic_event(event: SSEEvent, acc: StreamAccumulator) -> List[StreamChunk]:
    """Fold one named stream event into ``acc`` and return the chunks to emit."""
    data = event.data if isinstance(event.data, Mapping) else {}
    kind = event.event
    if kind == "message_start":
        message = data.get("message") if isinstance(data.get("message"), Mapping) else {}
        acc.observe_model(message.get("model"))
        usage = message.get("usage") if isinstance(message.get("usage"), Mapping) else {}
        acc.observe_usage(input_tokens=usage.get("input_tokens"))
        return []
    if kind == "message_delta":
        usage = data.get("usage") if isinstance(data.get("usage"), Mapping) else {}
        acc.observe_usage(output_tokens=usage.get("output_tokens"))
        return []
    index = data.get("index") if isinstance(data.get("index"), int) else 0
    if kind == "content_block_start":
        block = data.get("content_block") if isinstance(data.get("content_block"), Mapping) else {}
        if block.get("type") == "tool_use":
            return acc.start_tool(index, block.get("id"), block.get("name"))
        return []
    if kind == "content_block_delta":
        delta = data.get("delta") if isinstance(data.get("delta"), Mapping) else {}
        if delta.get("type") == "text_delta":
            return acc.append_text(delta.get("text"))
        if delta.get("type") == "input_json_delta":
            return acc.append_tool_arguments(index, delta.get("partial_json"), create=False)
    return []


__all__ = [
    "CONVERSATION_START",
    "build_anthropic_messages",
    "build_anthropic_body",
    "extract_system",
    "parse_anthropic_response",
    "apply_anthropic_event",
]
