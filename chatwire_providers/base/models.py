"""
Provider-agnostic domain models (DTOs) public surface.

This module re-exports the one-class-per-file implementations under
``chatwire_providers.base.models_parts`` so callers have one stable import path.
"""

from .models_parts.tool_call import ToolCall
from .models_parts.usage import Usage
from .models_parts.chat_response import ChatResponse
from .models_parts.tool_spec import ToolSpec
from .models_parts.message import Message, Role
from .models_parts.chat_request import ChatRequest
from .models_parts.chat_options import ChatOptions
from .models_parts.stream_chunk import (
    DoneChunk,
    ErrorChunk,
    StreamChunk,
    TextChunk,
    ToolDeltaChunk,
    ToolStartChunk,
)

__all__ = [
    "ToolCall",
    "Usage",
    "ChatResponse",
    "ToolSpec",
    "Message",
    "Role",
    "ChatRequest",
    "ChatOptions",
    "TextChunk",
    "ToolStartChunk",
    "ToolDeltaChunk",
    "DoneChunk",
    "ErrorChunk",
    "StreamChunk",
]
