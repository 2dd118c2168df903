"""Echo provider: a zero-cost, always-available stand-in.

Replies by quoting the last user message so the surrounding application keeps
working when no real backend is configured. Streaming uses the contract's
default (full text, then done).
"""

from __future__ import annotations

from typing import Optional

from ..base.logging import LogContext, get_logger, log_event
from ..base.interfaces import LLMProvider
from ..base.models import ChatOptions, ChatRequest, ChatResponse
from ..base.validation import validate_chat_response
from ..config.defaults import ECHO_MODEL

ECHO_NOTICE = "[Echo mode: connect a real provider for intelligent responses]"
NO_USER_MESSAGE = "[Echo] No user message found."


class EchoProvider(LLMProvider):
    name = "echo"
    display_name = "Echo (no LLM)"

    def __init__(self) -> None:
        self._logger = get_logger("chatwire.providers.echo")

    async def chat(
        self,
        request: ChatRequest,
        api_key: Optional[str] = None,
        model_override: Optional[str] = None,
        options: Optional[ChatOptions] = None,
    ) -> ChatResponse:
        last_user = next((m for m in reversed(request.messages) if m.role == "user"), None)
        if last_user is None:
            content = NO_USER_MESSAGE
        else:
            content = f'You said: "{last_user.content or ""}"\n\n{ECHO_NOTICE}'
        log_event(self._logger, "chat.end", LogContext(provider=self.name, model=ECHO_MODEL), chars=len(content))
        return validate_chat_response({"content": content, "model": ECHO_MODEL}, fallback_model=ECHO_MODEL)


__all__ = ["EchoProvider", "ECHO_NOTICE", "NO_USER_MESSAGE"]
