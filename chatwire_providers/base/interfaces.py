"""
Provider-agnostic interfaces for the providers layer.

Re-exports the single-class modules under
``chatwire_providers.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import LLMProvider

__all__ = ["LLMProvider"]
