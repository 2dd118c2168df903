"""Chat request DTO."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

from .message import Message
from .tool_spec import ToolSpec


@dataclass
class ChatRequest:
    """Conversation plus the optional tool set offered to the model."""

    messages: List[Message] = field(default_factory=list)
    tools: Optional[List[ToolSpec]] = None

    @property
    def has_tools(self) -> bool:
        return bool(self.tools)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChatRequest":
        """Build a request from ``{"messages": [...], "tools": [...]}``.

        Message and tool entries may already be DTOs or plain mappings.
        """
        return cls(
            messages=_coerce_messages(data.get("messages") or []),
            tools=[
                t if isinstance(t, ToolSpec) else ToolSpec.from_dict(t)
                for t in (data.get("tools") or [])
            ] or None,
        )


def _coerce_messages(items: Sequence[Any]) -> List[Message]:
    return [m if isinstance(m, Message) else Message.from_dict(m) for m in items]


__all__ = ["ChatRequest"]
