"""
Message DTO used across providers.

Defines the ``Message`` dataclass and the ``Role`` literal. Ordering of
messages is significant; role sequencing constraints are vendor-specific and
enforced by the translators, not here.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Literal, Mapping, Optional

from .tool_call import ToolCall


# Message roles used across providers.
Role = Literal["system", "user", "assistant", "tool"]


@dataclass
class Message:
    """A chat message in the internal conversation model.

    Attributes:
        role: Author role (``"system"``, ``"user"``, ``"assistant"`` or ``"tool"``).
        content: Text content; ``None`` for assistant turns that only call tools.
        tool_call_id: For ``tool`` messages, the id of the call being answered.
        name: For ``tool`` messages, the name of the tool that produced the result.
        tool_calls: For ``assistant`` messages, the calls the model requested.
            Entries may be ``ToolCall`` objects or raw flat/nested mappings.
    """

    role: Role
    content: Optional[str] = None
    tool_call_id: Optional[str] = None
    name: Optional[str] = None
    tool_calls: Optional[List[Any]] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Message":
        """Build a message from a plain mapping (unknown keys are ignored)."""
        content = data.get("content")
        return cls(
            role=data.get("role", "user"),
            content=content if content is None or isinstance(content, str) else str(content),
            tool_call_id=data.get("tool_call_id"),
            name=data.get("name"),
            tool_calls=list(data["tool_calls"]) if data.get("tool_calls") else None,
        )

    def normalized_tool_calls(self) -> List[ToolCall]:
        """Return ``tool_calls`` coerced into ``ToolCall`` instances."""
        return [ToolCall.coerce(tc) for tc in (self.tool_calls or [])]


__all__ = ["Message", "Role"]
