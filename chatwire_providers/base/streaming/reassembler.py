"""Streaming reassembler.

Purpose
-------
Vendor stream loops translate their native events into calls on one
:class:`StreamAccumulator`, which owns the per-stream state (running text,
in-flight tool calls keyed by stream index, usage and resolved model) and
produces the outgoing ``StreamChunk`` values.

Rules
-----
- Text deltas append to ``content`` and are emitted immediately.
- The first time a tool call's name is known, exactly one ``ToolStartChunk``
  is emitted; each argument fragment afterwards emits a ``ToolDeltaChunk``.
- Usage and model are observed independently of content so the final usage
  report (which often arrives with no content) is never lost.
- ``finish`` discards tool entries that never received a name and returns the
  single ``DoneChunk`` whose response went through the validator.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..models import DoneChunk, StreamChunk, TextChunk, ToolDeltaChunk, ToolStartChunk
from ..validation import validate_chat_response


@dataclass
class ToolCallBuffer:
    id: str = ""
    name: str = ""
    arguments: str = ""


class StreamAccumulator:
    """Accumulate one stream's deltas into a final ``ChatResponse``."""

    def __init__(self, model: str) -> None:
        self.content = ""
        self.tools: Dict[int, ToolCallBuffer] = {}
        self.input_tokens = 0
        self.output_tokens = 0
        self.resolved_model = model
        self.emitted = 0
        self._t0 = time.perf_counter()
        self.time_to_first_token_ms: Optional[float] = None

    def _mark_emitted(self) -> None:
        self.emitted += 1
        if self.time_to_first_token_ms is None:
            self.time_to_first_token_ms = (time.perf_counter() - self._t0) * 1000.0

    def observe_model(self, model: Any) -> None:
        if isinstance(model, str) and model:
            self.resolved_model = model

    def observe_usage(self, input_tokens: Any = None, output_tokens: Any = None) -> None:
        """Record vendor-reported token counts; ``None`` leaves a value unchanged."""
        if input_tokens is not None:
            self.input_tokens = input_tokens
        if output_tokens is not None:
            self.output_tokens = output_tokens

    def append_text(self, text: Any) -> List[StreamChunk]:
        if not isinstance(text, str) or not text:
            return []
        self.content += text
        self._mark_emitted()
        return [TextChunk(text=text)]

    def start_tool(self, index: int, tool_id: Any = None, name: Any = None) -> List[StreamChunk]:
        """Create or update the entry at ``index``; emit ``tool_start`` on first name."""
        entry = self.tools.setdefault(index, ToolCallBuffer())
        if isinstance(tool_id, str) and tool_id:
            entry.id = tool_id
        if not isinstance(name, str) or not name or entry.name:
            return []
        entry.name = name
        self._mark_emitted()
        return [ToolStartChunk(index=index, id=entry.id, name=name)]

    def append_tool_arguments(self, index: int, fragment: Any, *, create: bool = True) -> List[StreamChunk]:
        """Append an argument fragment; unknown indices are created only when ``create``."""
        if not isinstance(fragment, str) or not fragment:
            return []
        entry = self.tools.get(index)
        if entry is None:
            if not create:
                return []
            entry = self.tools.setdefault(index, ToolCallBuffer())
        entry.arguments += fragment
        self._mark_emitted()
        return [ToolDeltaChunk(index=index, arguments=fragment)]

    def finish(self) -> DoneChunk:
        """Build the terminal chunk from everything accumulated so far."""
        tool_calls = [
            {"id": entry.id, "name": entry.name, "arguments": entry.arguments or "{}"}
            for _, entry in sorted(self.tools.items())
            if entry.name
        ]
        response = validate_chat_response(
            {
                "content": self.content,
                "tool_calls": tool_calls,
                "usage": {"input_tokens": self.input_tokens, "output_tokens": self.output_tokens},
                "model": self.resolved_model,
            },
            fallback_model=self.resolved_model,
        )
        return DoneChunk(response=response)


__all__ = ["StreamAccumulator", "ToolCallBuffer"]
