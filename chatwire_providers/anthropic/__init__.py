"""Anthropic Messages API provider package."""

from .client import AnthropicProvider

__all__ = ["AnthropicProvider"]
