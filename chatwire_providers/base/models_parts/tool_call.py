"""
Tool call DTO.

A tool call is a model-requested invocation of an external function. Vendors
report it either flat (``{id, name, arguments}``) or OpenAI-nested
(``{id, function: {name, arguments}}``); ``ToolCall.coerce`` accepts both.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping


def _field(obj: Any, key: str) -> Any:
    if isinstance(obj, Mapping):
        return obj.get(key)
    return getattr(obj, key, None)


@dataclass
class ToolCall:
    """Normalized tool invocation.

    Attributes:
        id: Vendor-assigned call identifier (``""`` when absent).
        name: Function name.
        arguments: JSON-encoded argument object as a string.
    """

    id: str = ""
    name: str = ""
    arguments: str = "{}"

    @classmethod
    def coerce(cls, obj: Any) -> "ToolCall":
        """Build a ``ToolCall`` from a flat or nested mapping (or a ``ToolCall``).

        Missing or falsy ``arguments`` default to ``"{}"``; the nested
        ``function`` block wins over flat keys when both are present.
        """
        if isinstance(obj, ToolCall):
            return obj
        function = _field(obj, "function") or {}
        name = _field(function, "name") or _field(obj, "name") or ""
        arguments = _field(function, "arguments") or _field(obj, "arguments") or "{}"
        return cls(
            id=str(_field(obj, "id") or ""),
            name=str(name),
            arguments=arguments if isinstance(arguments, str) else "{}",
        )

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "name": self.name, "arguments": self.arguments}


__all__ = ["ToolCall"]
