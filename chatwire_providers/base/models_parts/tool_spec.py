"""Tool specification DTO (immutable per request)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class ToolSpec:
    """Function the model may call.

    Attributes:
        name: Function name exposed to the model.
        description: Free-form description (may be empty).
        parameters: JSON-schema-like object describing the arguments.
    """

    name: str
    description: str = ""
    parameters: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ToolSpec":
        return cls(
            name=str(data.get("name") or ""),
            description=str(data.get("description") or ""),
            parameters=dict(data.get("parameters") or {}),
        )


__all__ = ["ToolSpec"]
