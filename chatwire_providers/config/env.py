"""chatwire_providers.config.env
=============================

Environment helpers: placeholder detection, env-var naming and a tiny
``.env`` loader. Helpers never raise on unknown providers or unset variables.
"""

from __future__ import annotations

import os
from typing import Optional

ENV_FIELD_MAP = {
    "model": "MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "base_url": "BASE_URL",
}

_DOTENV_LOADED = False


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if ``val`` looks like a placeholder rather than a real credential.

    Heuristics (case-insensitive): contains ``placeholder``, ``changeme`` or
    ``example``, or starts with ``test_``.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def env_var_name(provider: str, field: str) -> Optional[str]:
    """Return ``<PROVIDER>_<SUFFIX>`` for a config field, e.g. ``GROQ_API_KEY``."""
    suffix = ENV_FIELD_MAP.get(field)
    if not suffix or not provider:
        return None
    return f"{provider.upper().replace('-', '_')}_{suffix}"


def load_dotenv_once() -> None:
    """Load ``KEY=VALUE`` lines from ``$DOTENV_FILE`` (default ``.env``) once.

    Existing variables are only overwritten when they hold placeholders.
    """
    global _DOTENV_LOADED  # noqa: PLW0603 - module-level init-once guard
    if _DOTENV_LOADED:
        return
    _DOTENV_LOADED = True
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        return
    with open(path, "r", encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            k, v = line.split("=", 1)
            k = k.strip()
            v = v.strip().strip('"').strip("'")
            if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                os.environ[k] = v


def reset_dotenv_guard() -> None:
    """Allow the next ``load_dotenv_once`` call to read the file again (tests)."""
    global _DOTENV_LOADED  # noqa: PLW0603
    _DOTENV_LOADED = False


__all__ = [
    "ENV_FIELD_MAP",
    "is_placeholder",
    "env_var_name",
    "load_dotenv_once",
    "reset_dotenv_guard",
]
