"""Correlation fields shared by every provider log event."""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional


@dataclass
class LogContext:
    """Provider/model/request identifiers plus free-form ``extra`` fields.

    ``to_dict`` flattens ``extra`` into the top level and skips ``None``
    values so payloads only carry what is known.
    """

    provider: Optional[str] = None
    model: Optional[str] = None
    request_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {}
        for f in fields(self):
            if f.name == "extra":
                continue
            value = getattr(self, f.name)
            if value is not None:
                payload[f.name] = value
        for key, value in (self.extra or {}).items():
            if value is not None:
                payload[key] = value
        return payload


__all__ = ["LogContext"]
