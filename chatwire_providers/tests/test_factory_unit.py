from __future__ import annotations

import httpx
import pytest
from pydantic import ValidationError

from chatwire_providers.anthropic.client import AnthropicProvider
from chatwire_providers.base.dto import AdapterParams
from chatwire_providers.base.factory import (
    ProviderFactory,
    UnknownProviderError,
    create_default_providers,
    create_provider,
)
from chatwire_providers.compatible.client import OpenAICompatibleProvider
from chatwire_providers.echo.client import EchoProvider
from chatwire_providers.local.client import LocalSessionProvider
from chatwire_providers.openai.client import OpenAIProvider


def test_create_first_party_adapters():
    assert isinstance(ProviderFactory.create("echo"), EchoProvider)  # nosec B101 - asserts are appropriate in unit tests
    assert isinstance(ProviderFactory.create("LOCAL"), LocalSessionProvider)  # nosec B101
    assert isinstance(create_provider("openai"), OpenAIProvider)  # nosec B101
    assert isinstance(create_provider(" anthropic "), AnthropicProvider)  # nosec B101


def test_create_compatible_preset():
    provider = ProviderFactory.create("groq", api_key="gsk-1")
    assert isinstance(provider, OpenAICompatibleProvider)  # nosec B101
    assert provider.name == "groq"  # nosec B101
    assert provider.display_name == "Groq"  # nosec B101


def test_params_are_merged_and_kwargs_win():
    params = AdapterParams(model="gpt-4.1", api_key="sk-params", base_url="https://proxy.test/v1")
    provider = ProviderFactory.create("openai", params=params, model="gpt-4o")
    assert provider.default_model == "gpt-4o"  # nosec B101
    assert provider._base_url == "https://proxy.test/v1"  # nosec B101
    assert provider._api_key == "sk-params"  # nosec B101


def test_timeout_param_builds_owned_client():
    provider = ProviderFactory.create("openai", params=AdapterParams(timeout_seconds=5))
    client = provider._http()
    assert isinstance(client, httpx.AsyncClient)  # nosec B101
    assert client.timeout.read == 5  # nosec B101


def test_params_validation():
    with pytest.raises(ValidationError):
        AdapterParams(timeout_seconds=0)


def test_unknown_provider_and_bad_arguments():
    with pytest.raises(UnknownProviderError, match="Unknown provider 'nope'"):
        ProviderFactory.create("nope")
    with pytest.raises(UnknownProviderError, match="Invalid arguments"):
        ProviderFactory.create("echo", bogus=True)
    with pytest.raises(UnknownProviderError, match="Invalid arguments"):
        ProviderFactory.create("groq", bogus=True)


def test_supported_lists_first_party_then_presets():
    names = ProviderFactory.supported()
    assert names[:4] == ("echo", "local", "openai", "anthropic")  # nosec B101
    assert "ollama" in names and "groq" in names  # nosec B101


@pytest.mark.asyncio
async def test_default_registry_contents(mock_client):
    client = mock_client(lambda r: httpx.Response(200, json={}))
    registry = create_default_providers(http_client=client)
    assert registry.names() == list(ProviderFactory.supported())  # nosec B101
    assert registry.get("openai")._client is client  # nosec B101
    best = await registry.get_best_available()
    assert best is registry.get("echo")  # nosec B101
    await registry.aclose()
    assert client.is_closed is False  # nosec B101
    await client.aclose()
