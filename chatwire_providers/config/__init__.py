"""Unified configuration layer.

Merge order for ``get_provider_config(provider)`` (later wins):
    1. Built-in defaults (``config.defaults``)
    2. Optional JSON/YAML file named by ``CHATWIRE_CONFIG_FILE``
    3. Environment variables ``<PROVIDER>_MODEL``, ``<PROVIDER>_API_KEY``,
       ``<PROVIDER>_BASE_URL`` (a ``.env`` file is loaded first)
    4. In-code overrides passed to the helper

Placeholder credentials (``changeme``, ``placeholder``...) are ignored.

External config file example::

    openai:
      model: gpt-4.1-mini
    groq:
      api_key: gsk-...
    runtime:
      max_retries: 3

``get_runtime_settings()`` resolves the global knobs from the ``runtime``
section of the same file and ``CHATWIRE_*`` environment variables.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    ANTHROPIC_DEFAULT_BASE_URL,
    ANTHROPIC_DEFAULT_MODEL,
    COMPATIBLE_SERVICE_DEFAULTS,
    DEFAULT_RUNTIME_SETTINGS,
    OPENAI_DEFAULT_BASE_URL,
    OPENAI_DEFAULT_MODEL,
)
from .env import ENV_FIELD_MAP, env_var_name, is_placeholder, load_dotenv_once

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "openai": {"model": OPENAI_DEFAULT_MODEL, "base_url": OPENAI_DEFAULT_BASE_URL},
    "anthropic": {"model": ANTHROPIC_DEFAULT_MODEL, "base_url": ANTHROPIC_DEFAULT_BASE_URL},
    **{name: dict(values) for name, values in COMPATIBLE_SERVICE_DEFAULTS.items()},
}

_RUNTIME_ENV = {
    "max_retries": "CHATWIRE_MAX_RETRIES",
    "retry_base_ms": "CHATWIRE_RETRY_BASE_MS",
    "cache_ttl_seconds": "CHATWIRE_CACHE_TTL_SECONDS",
    "cache_max_entries": "CHATWIRE_CACHE_MAX_ENTRIES",
    "http_timeout_seconds": "CHATWIRE_HTTP_TIMEOUT_SECONDS",
    "stream_read_timeout_seconds": "CHATWIRE_STREAM_READ_TIMEOUT_SECONDS",
}

_FILE_CACHE: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class RuntimeSettings:
    """Process-wide knobs shared by retry, cache and HTTP layers."""

    max_retries: int = 2
    retry_base_ms: float = 1000.0
    cache_ttl_seconds: float = 1800.0
    cache_max_entries: int = 500
    http_timeout_seconds: float = 60.0
    stream_read_timeout_seconds: float = 300.0


def _load_external_config() -> Dict[str, Any]:
    """Parse ``$CHATWIRE_CONFIG_FILE`` (JSON first, then YAML); cached per process."""
    global _FILE_CACHE  # noqa: PLW0603 - documented module cache
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("CHATWIRE_CONFIG_FILE")
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def reset_config_cache() -> None:
    """Forget the parsed config file so the next lookup re-reads it."""
    global _FILE_CACHE  # noqa: PLW0603
    _FILE_CACHE = None


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field in ENV_FIELD_MAP:
        name = env_var_name(provider, field)
        val = os.getenv(name) if name else None
        if val:
            out[field] = val
    return out


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``api_key`` values that look like placeholders are dropped.
    """
    load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = dict(DEFAULTS.get(name, {}))

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    if is_placeholder(cfg.get("api_key")):
        cfg.pop("api_key")
    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


def _coerce_number(raw: Any, default: float) -> float:
    try:
        val = float(raw)
    except (TypeError, ValueError):
        return default
    return val if val >= 0 else default


def get_runtime_settings() -> RuntimeSettings:
    """Resolve global knobs: defaults -> ``runtime`` file section -> ``CHATWIRE_*`` env."""
    load_dotenv_once()
    merged: Dict[str, Any] = dict(DEFAULT_RUNTIME_SETTINGS)
    file_section = _load_external_config().get("runtime")
    if isinstance(file_section, dict):
        merged |= {k: v for k, v in file_section.items() if k in merged}
    for key, env_name in _RUNTIME_ENV.items():
        if (raw := os.getenv(env_name)) is not None:
            merged[key] = raw
    return RuntimeSettings(
        max_retries=int(_coerce_number(merged["max_retries"], DEFAULT_RUNTIME_SETTINGS["max_retries"])),
        retry_base_ms=_coerce_number(merged["retry_base_ms"], DEFAULT_RUNTIME_SETTINGS["retry_base_ms"]),
        cache_ttl_seconds=_coerce_number(merged["cache_ttl_seconds"], DEFAULT_RUNTIME_SETTINGS["cache_ttl_seconds"]),
        cache_max_entries=int(
            _coerce_number(merged["cache_max_entries"], DEFAULT_RUNTIME_SETTINGS["cache_max_entries"])
        ),
        http_timeout_seconds=_coerce_number(
            merged["http_timeout_seconds"], DEFAULT_RUNTIME_SETTINGS["http_timeout_seconds"]
        ),
        stream_read_timeout_seconds=_coerce_number(
            merged["stream_read_timeout_seconds"], DEFAULT_RUNTIME_SETTINGS["stream_read_timeout_seconds"]
        ),
    )


__all__ = [
    "DEFAULTS",
    "RuntimeSettings",
    "get_provider_config",
    "get_model",
    "get_runtime_settings",
    "reset_config_cache",
]
