"""Generic OpenAI-compatible provider and the built-in service presets."""

from .client import OpenAICompatibleProvider
from .services import OPENAI_COMPATIBLE_SERVICES, create_compatible_provider

__all__ = ["OpenAICompatibleProvider", "OPENAI_COMPATIBLE_SERVICES", "create_compatible_provider"]
