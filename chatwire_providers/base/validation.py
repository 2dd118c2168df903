"""Response validation: turn any raw provider payload into a ``ChatResponse``.

Purpose
-------
Vendors omit fields, send ``null`` for text on tool-only turns, report usage
as strings, or return no choices at all on content-filter refusals. Every
path that produces a ``ChatResponse`` (non-streaming parse, stream finalize,
local session) goes through :func:`validate_chat_response` so callers never
see a missing or mistyped field.

Coercion rules
--------------
- ``content``: kept when it is a ``str``, else ``""``.
- ``tool_calls``: each entry is flattened (flat or OpenAI-nested shape) to
  string ``id``/``name`` (default ``""``) and string ``arguments`` (default
  ``"{}"``); a non-list value yields ``[]``.
- ``usage``: numeric values (or numeric strings) are truncated to ``int``;
  anything else (including ``bool`` and NaN) becomes ``0``.
- ``model``: a non-empty string from the payload, else ``fallback_model``.
"""
from __future__ import annotations

import math
from typing import Any, List, Mapping

from .constants import UNKNOWN_MODEL
from .models import ChatResponse, ToolCall, Usage


def _coerce_count(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0
    else:
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(number)


def _get(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


def _coerce_tool_calls(raw: Any) -> List[ToolCall]:
    if not isinstance(raw, (list, tuple)):
        return []
    calls: List[ToolCall] = []
    for entry in raw:
        if entry is None:
            continue
        tc = ToolCall.coerce(entry)
        arguments = tc.arguments if isinstance(tc.arguments, str) else "{}"
        calls.append(ToolCall(id=str(tc.id or ""), name=str(tc.name or ""), arguments=arguments))
    return calls


def validate_chat_response(raw: Any, fallback_model: str = UNKNOWN_MODEL) -> ChatResponse:
    """Return a fully populated ``ChatResponse`` for any input.

    Parameters:
        raw: A mapping, a ``ChatResponse``, ``None`` or any other object.
        fallback_model: Model recorded when the payload does not name one.

    Returns:
        A new ``ChatResponse``; never raises.
    """
    if raw is None or isinstance(raw, (str, bytes, int, float, bool)):
        return ChatResponse(model=fallback_model)

    content = _get(raw, "content")
    usage = _get(raw, "usage")
    model = _get(raw, "model")
    return ChatResponse(
        content=content if isinstance(content, str) else "",
        tool_calls=_coerce_tool_calls(_get(raw, "tool_calls")),
        usage=Usage(
            input_tokens=_coerce_count(_get(usage, "input_tokens")) if usage is not None else 0,
            output_tokens=_coerce_count(_get(usage, "output_tokens")) if usage is not None else 0,
        ),
        model=model if isinstance(model, str) and model else fallback_model,
    )


__all__ = ["validate_chat_response"]
