"""
Normalized chat response DTO.

``ChatResponse`` is the vendor-agnostic result of one completion. Every field
is always present with a correctly typed value; instances built from untrusted
payloads should go through ``base.validation.validate_chat_response``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .tool_call import ToolCall
from .usage import Usage


@dataclass
class ChatResponse:
    """Normalized completion result.

    Attributes:
        content: Assistant text (``""`` when the model only called tools).
        tool_calls: Requested tool invocations in vendor order.
        usage: Token accounting reported by the vendor (zeros when absent).
        model: Model that produced the response.
    """

    content: str = ""
    tool_calls: List[ToolCall] = field(default_factory=list)
    usage: Usage = field(default_factory=Usage)
    model: str = "unknown"

    @property
    def has_tool_calls(self) -> bool:
        return len(self.tool_calls) > 0

    def to_dict(self) -> Dict[str, Any]:
        """Return the JSON-shaped view used in logs and by callers."""
        return {
            "content": self.content,
            "tool_calls": [tc.to_dict() for tc in self.tool_calls],
            "usage": self.usage.to_dict(),
            "model": self.model,
        }


__all__ = ["ChatResponse"]
