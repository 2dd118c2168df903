"""OpenAI provider.

``POST {base_url}/chat/completions`` with bearer auth (default base URL
``https://api.openai.com/v1``, default model ``gpt-4o-mini``). Credentials and
overrides resolve through ``config.get_provider_config("openai")``, so
``OPENAI_API_KEY``/``OPENAI_MODEL``/``OPENAI_BASE_URL`` apply.
"""

from __future__ import annotations

from ..base.openai_style_parts.base import BaseOpenAIStyleProvider


class OpenAIProvider(BaseOpenAIStyleProvider):
    name = "openai"
    display_name = "OpenAI"
    requires_api_key = True
    supports_streaming = True
    supports_native_tools = True


__all__ = ["OpenAIProvider"]
