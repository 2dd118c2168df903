"""
Streaming chunk DTOs.

``StreamChunk`` is a tagged union keyed by the ``type`` field. A stream always
terminates in exactly one ``DoneChunk`` (carrying the full response) or one
``ErrorChunk``, except when it is cancelled, in which case it just stops.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

from .chat_response import ChatResponse


@dataclass
class TextChunk:
    text: str
    type: Literal["text"] = field(default="text", init=False)


@dataclass
class ToolStartChunk:
    """First sighting of a tool call's name at stream position ``index``."""

    index: int
    id: str
    name: str
    type: Literal["tool_start"] = field(default="tool_start", init=False)


@dataclass
class ToolDeltaChunk:
    """Argument fragment appended to the tool call at ``index``."""

    index: int
    arguments: str
    type: Literal["tool_delta"] = field(default="tool_delta", init=False)


@dataclass
class DoneChunk:
    response: ChatResponse
    type: Literal["done"] = field(default="done", init=False)


@dataclass
class ErrorChunk:
    error: str
    type: Literal["error"] = field(default="error", init=False)


StreamChunk = Union[TextChunk, ToolStartChunk, ToolDeltaChunk, DoneChunk, ErrorChunk]


__all__ = [
    "TextChunk",
    "ToolStartChunk",
    "ToolDeltaChunk",
    "DoneChunk",
    "ErrorChunk",
    "StreamChunk",
]
