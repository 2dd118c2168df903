"""Pytest configuration for the chatwire_providers test suite.

Isolates configuration from the developer environment (no ``.env`` file, no
external config file, no real vendor keys) and provides helpers for stubbing
HTTP with ``httpx.MockTransport`` and capturing structured log lines.
"""

from __future__ import annotations

import importlib
import json
import logging
from typing import Callable, Iterator, List

import httpx
import pytest

from chatwire_providers import config as config_mod
from chatwire_providers.config import env as env_mod

_VENDOR_ENV_PREFIXES = (
    "OPENAI",
    "ANTHROPIC",
    "GROQ",
    "OPENROUTER",
    "TOGETHER",
    "FIREWORKS",
    "MISTRAL",
    "DEEPSEEK",
    "XAI",
    "PERPLEXITY",
    "OLLAMA",
    "LMSTUDIO",
)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path) -> Iterator[None]:
    """Point config lookups at an empty environment for every test."""

    monkeypatch.setenv("DOTENV_FILE", str(tmp_path / "missing.env"))
    monkeypatch.delenv("CHATWIRE_CONFIG_FILE", raising=False)
    for prefix in _VENDOR_ENV_PREFIXES:
        for suffix in ("API_KEY", "MODEL", "BASE_URL"):
            monkeypatch.delenv(f"{prefix}_{suffix}", raising=False)
    for name in (
        "CHATWIRE_MAX_RETRIES",
        "CHATWIRE_RETRY_BASE_MS",
        "CHATWIRE_CACHE_TTL_SECONDS",
        "CHATWIRE_CACHE_MAX_ENTRIES",
        "CHATWIRE_HTTP_TIMEOUT_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    env_mod.reset_dotenv_guard()
    config_mod.reset_config_cache()
    yield
    env_mod.reset_dotenv_guard()
    config_mod.reset_config_cache()


class ListHandler(logging.Handler):
    """Collect formatted log messages; JSON payloads are decoded."""

    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.events: List[dict] = []

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - exercised via tests
        try:
            self.events.append(json.loads(record.getMessage()))
        except ValueError:
            self.events.append({"msg": record.getMessage()})


@pytest.fixture()
def log_events() -> Iterator[List[dict]]:
    """Attach a collector to the shared ``chatwire`` logger."""

    from chatwire_providers.base.logging import get_logger

    base = get_logger()
    handler = ListHandler()
    base.addHandler(handler)
    try:
        yield handler.events
    finally:
        base.removeHandler(handler)


@pytest.fixture()
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Build an ``httpx.AsyncClient`` routed through a handler function."""

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _factory


@pytest.fixture()
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> List[float]:
    """Stub the retry backoff sleep; returns the recorded delays in seconds."""

    retry_mod = importlib.import_module("chatwire_providers.base.resilience.retry")

    delays: List[float] = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr(retry_mod, "_sleep", _sleep)
    return delays
