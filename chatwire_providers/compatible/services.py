"""Built-in OpenAI-compatible service presets.

Endpoints and default models come from
``config.defaults.COMPATIBLE_SERVICE_DEFAULTS``; per-service settings can be
overridden through the usual config merge (``GROQ_MODEL``, ``OLLAMA_BASE_URL``,
a ``groq:`` section in the config file...).
"""

from __future__ import annotations

from typing import Any, Dict, Mapping

from ..config.defaults import COMPATIBLE_SERVICE_DEFAULTS
from .client import OpenAICompatibleProvider

OPENAI_COMPATIBLE_SERVICES: Mapping[str, Mapping[str, Any]] = COMPATIBLE_SERVICE_DEFAULTS


def create_compatible_provider(service: str, **overrides: Any) -> OpenAICompatibleProvider:
    """Instantiate the preset named ``service`` (``KeyError`` when unknown).

    ``overrides`` are forwarded to ``OpenAICompatibleProvider`` and win over
    the preset's constructor flags.
    """
    preset = OPENAI_COMPATIBLE_SERVICES[service]
    kwargs: Dict[str, Any] = {
        "display_name": preset.get("display_name"),
        "requires_api_key": preset.get("requires_api_key", True),
        "native_tools": preset.get("native_tools", True),
    }
    kwargs.update(overrides)
    return OpenAICompatibleProvider(service, **kwargs)


__all__ = ["OPENAI_COMPATIBLE_SERVICES", "create_compatible_provider"]
