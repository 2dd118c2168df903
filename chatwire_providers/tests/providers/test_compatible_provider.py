from __future__ import annotations

import json

import httpx
import pytest

from chatwire_providers.base.errors import ProviderError
from chatwire_providers.base.models import ChatRequest, Message, ToolSpec
from chatwire_providers.compatible.client import OpenAICompatibleProvider
from chatwire_providers.compatible.services import OPENAI_COMPATIBLE_SERVICES, create_compatible_provider

_TOOL_REQUEST = ChatRequest(
    messages=[Message("user", "hi")],
    tools=[ToolSpec(name="lookup", parameters={"type": "object"})],
)


def _ok(text: str = "ok") -> httpx.Response:
    return httpx.Response(200, json={"choices": [{"message": {"content": text}}]})


@pytest.mark.asyncio
async def test_trailing_slash_and_optional_auth(mock_client):
    seen = []

    def handler(request):
        seen.append(request)
        return _ok()

    provider = OpenAICompatibleProvider(
        "mybackend",
        base_url="http://gpu-box:8000/v1/",
        model="qwen",
        requires_api_key=False,
        http_client=mock_client(handler),
    )
    await provider.chat(_TOOL_REQUEST)

    request = seen[0]
    assert str(request.url) == "http://gpu-box:8000/v1/chat/completions"  # nosec B101 - asserts are appropriate in unit tests
    assert "authorization" not in request.headers  # nosec B101
    assert json.loads(request.content)["model"] == "qwen"  # nosec B101
    assert provider.base_url == "http://gpu-box:8000/v1"  # nosec B101


@pytest.mark.asyncio
async def test_native_tools_disabled_drops_tools(mock_client):
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return _ok()

    provider = OpenAICompatibleProvider(
        "plain", base_url="https://example.test/v1", api_key="k", native_tools=False, http_client=mock_client(handler)
    )
    await provider.chat(_TOOL_REQUEST)
    assert "tools" not in bodies[0]  # nosec B101
    assert provider.supports_native_tools is False  # nosec B101


@pytest.mark.asyncio
async def test_extra_headers_and_display_name_in_errors(mock_client, no_sleep):
    seen = []

    def handler(request):
        seen.append(request)
        return httpx.Response(403, text="forbidden")

    provider = OpenAICompatibleProvider(
        "router",
        base_url="https://router.test/api/v1",
        api_key="k",
        display_name="Router",
        extra_headers={"HTTP-Referer": "https://app.test"},
        http_client=mock_client(handler),
    )
    with pytest.raises(ProviderError, match="Router 403: forbidden"):
        await provider.chat(_TOOL_REQUEST)
    assert seen[0].headers["http-referer"] == "https://app.test"  # nosec B101
    assert seen[0].headers["authorization"] == "Bearer k"  # nosec B101


@pytest.mark.asyncio
async def test_requires_key_by_default(mock_client):
    provider = OpenAICompatibleProvider("groq", display_name="Groq", http_client=mock_client(lambda r: _ok()))
    with pytest.raises(ProviderError, match="Groq API key required"):
        await provider.chat(_TOOL_REQUEST)


@pytest.mark.asyncio
async def test_availability_rules(mock_client):
    probes = []

    def up(request):
        probes.append(str(request.url))
        return httpx.Response(200, json={"data": []})

    def down(request):
        raise httpx.ConnectError("connection refused", request=request)

    local_up = OpenAICompatibleProvider(
        "ollama", base_url="http://localhost:11434/v1", requires_api_key=False, http_client=mock_client(up)
    )
    assert await local_up.is_available() is True  # nosec B101
    assert probes == ["http://localhost:11434/v1/models"]  # nosec B101

    local_down = OpenAICompatibleProvider(
        "lmstudio", base_url="http://127.0.0.1:1234/v1", requires_api_key=False, http_client=mock_client(down)
    )
    assert await local_down.is_available() is False  # nosec B101

    local_error = OpenAICompatibleProvider(
        "custom", base_url="http://localhost:9/v1", http_client=mock_client(lambda r: httpx.Response(500))
    )
    assert await local_error.is_available() is False  # nosec B101

    remote = OpenAICompatibleProvider("r", base_url="https://remote.test/v1", http_client=mock_client(down))
    assert await remote.is_available() is True  # nosec B101

    nowhere = OpenAICompatibleProvider("none", http_client=mock_client(up))
    assert await nowhere.is_available() is False  # nosec B101


def test_presets_and_env_overrides(monkeypatch):
    assert {"groq", "openrouter", "ollama", "lmstudio", "perplexity"} <= set(OPENAI_COMPATIBLE_SERVICES)  # nosec B101

    perplexity = create_compatible_provider("perplexity")
    assert perplexity.supports_native_tools is False  # nosec B101
    assert perplexity.display_name == "Perplexity"  # nosec B101

    ollama = create_compatible_provider("ollama")
    assert ollama.requires_api_key is False  # nosec B101
    assert ollama.base_url == "http://localhost:11434/v1"  # nosec B101

    monkeypatch.setenv("GROQ_MODEL", "llama-3.1-8b-instant")
    monkeypatch.setenv("GROQ_API_KEY", "gsk-env")
    groq = create_compatible_provider("groq")
    assert groq.default_model == "llama-3.1-8b-instant"  # nosec B101
    assert groq.base_url == "https://api.groq.com/openai/v1"  # nosec B101

    with pytest.raises(KeyError):
        create_compatible_provider("nope")
