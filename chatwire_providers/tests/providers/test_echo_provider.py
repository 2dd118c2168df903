from __future__ import annotations

import pytest

from chatwire_providers.base.cancellation import CancellationToken
from chatwire_providers.base.models import ChatOptions, ChatRequest, Message
from chatwire_providers.echo.client import ECHO_NOTICE, NO_USER_MESSAGE, EchoProvider


@pytest.mark.asyncio
async def test_echoes_last_user_message():
    provider = EchoProvider()
    request = ChatRequest(
        messages=[Message("user", "first"), Message("assistant", "reply"), Message("user", "second")]
    )
    response = await provider.chat(request)
    assert response.content == f'You said: "second"\n\n{ECHO_NOTICE}'  # nosec B101 - asserts are appropriate in unit tests
    assert response.model == "echo"  # nosec B101
    assert response.usage.input_tokens == 0  # nosec B101
    assert await provider.is_available() is True  # nosec B101


@pytest.mark.asyncio
async def test_no_user_message():
    response = await EchoProvider().chat(ChatRequest(messages=[Message("system", "rules")]))
    assert response.content == NO_USER_MESSAGE  # nosec B101


@pytest.mark.asyncio
async def test_default_stream_is_text_then_done():
    chunks = [c async for c in EchoProvider().chat_stream(ChatRequest(messages=[Message("user", "hey")]))]
    assert [c.type for c in chunks] == ["text", "done"]  # nosec B101
    assert chunks[0].text == chunks[1].response.content  # nosec B101


@pytest.mark.asyncio
async def test_default_stream_respects_cancellation():
    token = CancellationToken()
    token.cancel()
    request = ChatRequest(messages=[Message("user", "hey")])
    chunks = [c async for c in EchoProvider().chat_stream(request, options=ChatOptions(signal=token))]
    assert chunks == []  # nosec B101
