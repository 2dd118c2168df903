"""Structural types for an on-device language model runtime.

A backend creates prompt sessions seeded with initial (system) prompts.
Sessions may expose ``prompt_streaming``; runtimes differ in whether that
stream yields accumulated text or deltas, and the provider handles both.
"""

from __future__ import annotations

from typing import AsyncIterator, Dict, List, Optional, Protocol, runtime_checkable

# Availability values reported by ``LanguageModelBackend.availability``
USABLE_AVAILABILITY = frozenset({"available", "downloadable"})


@runtime_checkable
class LanguageModelSession(Protocol):
    input_usage: Optional[int]

    async def prompt(self, text: str) -> str: ...

    def destroy(self) -> None: ...


@runtime_checkable
class StreamingLanguageModelSession(LanguageModelSession, Protocol):
    def prompt_streaming(self, text: str) -> AsyncIterator[str]: ...


@runtime_checkable
class LanguageModelBackend(Protocol):
    async def availability(self) -> str: ...

    async def create(self, initial_prompts: List[Dict[str, str]]) -> LanguageModelSession: ...


__all__ = [
    "USABLE_AVAILABILITY",
    "LanguageModelSession",
    "StreamingLanguageModelSession",
    "LanguageModelBackend",
]
