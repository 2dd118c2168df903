"""Single-class interface modules re-exported by ``base.interfaces``."""

from .llm_provider import LLMProvider

__all__ = ["LLMProvider"]
