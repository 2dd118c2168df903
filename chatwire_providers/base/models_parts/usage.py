"""Token usage DTO."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict


@dataclass
class Usage:
    """Prompt and completion token counts for one completion."""

    input_tokens: int = 0
    output_tokens: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"input_tokens": self.input_tokens, "output_tokens": self.output_tokens}


__all__ = ["Usage"]
