"""chatwire_providers.config.defaults
==================================

Small, stable default values (models, endpoints, runtime knobs). No I/O and
no imports from provider packages, so every layer can depend on it.
"""

from __future__ import annotations

from typing import Any, Dict

from ..base.constants import (
    DEFAULT_CACHE_MAX_ENTRIES,
    DEFAULT_CACHE_TTL_SECONDS,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_BASE_MS,
    DEFAULT_STREAM_READ_TIMEOUT,
)

# ---- First-party vendor endpoints ----
OPENAI_DEFAULT_MODEL = "gpt-4o-mini"
OPENAI_DEFAULT_BASE_URL = "https://api.openai.com/v1"

ANTHROPIC_DEFAULT_MODEL = "claude-sonnet-4-6"
ANTHROPIC_DEFAULT_BASE_URL = "https://api.anthropic.com/v1"

ECHO_MODEL = "echo"
LOCAL_MODEL = "local"
LOCAL_DEFAULT_SYSTEM_PROMPT = "You are a helpful assistant."

# ---- OpenAI-compatible services ----
# name -> constructor settings for OpenAICompatibleProvider
COMPATIBLE_SERVICE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "groq": {
        "base_url": "https://api.groq.com/openai/v1",
        "model": "llama-3.3-70b-versatile",
        "display_name": "Groq",
    },
    "openrouter": {
        "base_url": "https://openrouter.ai/api/v1",
        "model": "meta-llama/llama-3.3-70b-instruct",
        "display_name": "OpenRouter",
    },
    "together": {
        "base_url": "https://api.together.xyz/v1",
        "model": "meta-llama/Meta-Llama-3.1-70B-Instruct-Turbo",
        "display_name": "Together AI",
    },
    "fireworks": {
        "base_url": "https://api.fireworks.ai/inference/v1",
        "model": "accounts/fireworks/models/llama-v3p1-70b-instruct",
        "display_name": "Fireworks",
    },
    "mistral": {
        "base_url": "https://api.mistral.ai/v1",
        "model": "mistral-small-latest",
        "display_name": "Mistral",
    },
    "deepseek": {
        "base_url": "https://api.deepseek.com",
        "model": "deepseek-chat",
        "display_name": "DeepSeek",
    },
    "xai": {
        "base_url": "https://api.x.ai/v1",
        "model": "grok-2-latest",
        "display_name": "xAI (Grok)",
    },
    "perplexity": {
        "base_url": "https://api.perplexity.ai",
        "model": "sonar",
        "display_name": "Perplexity",
        "native_tools": False,
    },
    "ollama": {
        "base_url": "http://localhost:11434/v1",
        "model": "llama3.2",
        "display_name": "Ollama (local)",
        "requires_api_key": False,
    },
    "lmstudio": {
        "base_url": "http://localhost:1234/v1",
        "model": "default",
        "display_name": "LM Studio (local)",
        "requires_api_key": False,
    },
}

# ---- Runtime knobs (overridable via CHATWIRE_* env vars) ----
DEFAULT_RUNTIME_SETTINGS: Dict[str, float] = {
    "max_retries": DEFAULT_MAX_RETRIES,
    "retry_base_ms": DEFAULT_RETRY_BASE_MS,
    "cache_ttl_seconds": DEFAULT_CACHE_TTL_SECONDS,
    "cache_max_entries": DEFAULT_CACHE_MAX_ENTRIES,
    "http_timeout_seconds": DEFAULT_HTTP_TIMEOUT,
    "stream_read_timeout_seconds": DEFAULT_STREAM_READ_TIMEOUT,
}

__all__ = [
    "OPENAI_DEFAULT_MODEL",
    "OPENAI_DEFAULT_BASE_URL",
    "ANTHROPIC_DEFAULT_MODEL",
    "ANTHROPIC_DEFAULT_BASE_URL",
    "ECHO_MODEL",
    "LOCAL_MODEL",
    "LOCAL_DEFAULT_SYSTEM_PROMPT",
    "COMPATIBLE_SERVICE_DEFAULTS",
    "DEFAULT_RUNTIME_SETTINGS",
]
