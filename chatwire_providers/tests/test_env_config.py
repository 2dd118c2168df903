from __future__ import annotations

import json

import pytest

from chatwire_providers import config as config_mod
from chatwire_providers.config import get_model, get_provider_config, get_runtime_settings
from chatwire_providers.config.env import env_var_name, is_placeholder, reset_dotenv_guard


def test_defaults_only():
    cfg = get_provider_config("openai")
    assert cfg["model"] == "gpt-4o-mini"  # nosec B101 - asserts are appropriate in unit tests
    assert cfg["base_url"] == "https://api.openai.com/v1"  # nosec B101
    assert "api_key" not in cfg  # nosec B101
    assert get_provider_config("unknown-thing") == {}  # nosec B101


def test_merge_order_file_env_overrides(tmp_path, monkeypatch):
    path = tmp_path / "chatwire.yaml"
    path.write_text("openai:\n  model: from-file\n  base_url: https://file.test/v1\n", encoding="utf-8")
    monkeypatch.setenv("CHATWIRE_CONFIG_FILE", str(path))
    config_mod.reset_config_cache()
    assert get_model("openai") == "from-file"  # nosec B101

    monkeypatch.setenv("OPENAI_MODEL", "from-env")
    cfg = get_provider_config("openai")
    assert cfg["model"] == "from-env"  # nosec B101
    assert cfg["base_url"] == "https://file.test/v1"  # nosec B101

    cfg = get_provider_config("openai", {"model": "from-code", "base_url": None})
    assert cfg["model"] == "from-code"  # nosec B101
    assert cfg["base_url"] == "https://file.test/v1"  # nosec B101


def test_json_config_file_is_accepted(tmp_path, monkeypatch):
    path = tmp_path / "chatwire.json"
    path.write_text(json.dumps({"groq": {"model": "json-model"}, "runtime": {"max_retries": 5}}), encoding="utf-8")
    monkeypatch.setenv("CHATWIRE_CONFIG_FILE", str(path))
    config_mod.reset_config_cache()
    assert get_model("groq") == "json-model"  # nosec B101
    assert get_runtime_settings().max_retries == 5  # nosec B101


def test_unparseable_config_file_is_ignored(tmp_path, monkeypatch):
    path = tmp_path / "broken.yaml"
    path.write_text("openai: [unterminated\n", encoding="utf-8")
    monkeypatch.setenv("CHATWIRE_CONFIG_FILE", str(path))
    config_mod.reset_config_cache()
    assert get_model("openai") == "gpt-4o-mini"  # nosec B101


@pytest.mark.parametrize(
    "value, expected",
    [
        ("changeme", True),
        ("YOUR_PLACEHOLDER_KEY", True),
        ("sk-example-123", True),
        ("test_abc", True),
        ("sk-live-abc", False),
        (None, False),
    ],
)
def test_placeholder_detection(value, expected):
    assert is_placeholder(value) is expected  # nosec B101


def test_placeholder_api_key_is_dropped(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "changeme")
    assert "api_key" not in get_provider_config("openai")  # nosec B101
    monkeypatch.setenv("OPENAI_API_KEY", "sk-real")
    assert get_provider_config("openai")["api_key"] == "sk-real"  # nosec B101


def test_env_var_names():
    assert env_var_name("groq", "api_key") == "GROQ_API_KEY"  # nosec B101
    assert env_var_name("my-backend", "base_url") == "MY_BACKEND_BASE_URL"  # nosec B101
    assert env_var_name("groq", "unknown") is None  # nosec B101


def test_dotenv_file_is_loaded_once(tmp_path, monkeypatch):
    dotenv = tmp_path / ".env"
    dotenv.write_text(
        "# comment\nGROQ_API_KEY='gsk-from-dotenv'\nMISTRAL_API_KEY=should-not-win\n", encoding="utf-8"
    )
    monkeypatch.setenv("DOTENV_FILE", str(dotenv))
    monkeypatch.setenv("GROQ_API_KEY", "placeholder")
    monkeypatch.setenv("MISTRAL_API_KEY", "sk-real")
    reset_dotenv_guard()

    assert get_provider_config("groq")["api_key"] == "gsk-from-dotenv"  # nosec B101
    assert get_provider_config("mistral")["api_key"] == "sk-real"  # nosec B101


def test_runtime_settings_from_env(monkeypatch):
    assert get_runtime_settings().max_retries == 2  # nosec B101
    monkeypatch.setenv("CHATWIRE_MAX_RETRIES", "4")
    monkeypatch.setenv("CHATWIRE_RETRY_BASE_MS", "250")
    monkeypatch.setenv("CHATWIRE_HTTP_TIMEOUT_SECONDS", "not-a-number")
    settings = get_runtime_settings()
    assert settings.max_retries == 4  # nosec B101
    assert settings.retry_base_ms == 250.0  # nosec B101
    assert settings.http_timeout_seconds == 60.0  # nosec B101
