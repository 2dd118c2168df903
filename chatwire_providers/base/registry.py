"""Provider registry.

Holds provider instances by name, probes their availability concurrently and
picks a sensible default: the designated local provider when usable, else the
echo provider, else the first registered provider.
"""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional

from .interfaces import LLMProvider
from .logging import LogContext, get_logger, log_event

_logger = get_logger("chatwire.registry")


@dataclass(frozen=True)
class ProviderAvailability:
    name: str
    display_name: str
    available: bool
    requires_api_key: bool
    supports_streaming: bool
    supports_native_tools: bool


class ProviderRegistry:
    """Name-keyed provider collection (insertion order preserved)."""

    def __init__(self, *, local_provider: str = "local", fallback_provider: str = "echo") -> None:
        self._providers: Dict[str, LLMProvider] = {}
        self.local_provider = local_provider
        self.fallback_provider = fallback_provider

    def register(self, provider: LLMProvider) -> None:
        """Add or replace ``provider`` under ``provider.name``."""
        self._providers[provider.name] = provider

    def get(self, name: str) -> Optional[LLMProvider]:
        return self._providers.get(name)

    def has(self, name: str) -> bool:
        return name in self._providers

    def names(self) -> List[str]:
        return list(self._providers)

    async def _probe(self, provider: LLMProvider) -> bool:
        try:
            return bool(await provider.is_available())
        except Exception as exc:  # probe failures must not propagate
            log_event(
                _logger,
                "registry.probe_failed",
                LogContext(provider=provider.name),
                error=str(exc) or type(exc).__name__,
            )
            return False

    async def list_with_availability(self) -> List[ProviderAvailability]:
        """Probe every provider concurrently; failed probes report ``available=False``."""
        providers = list(self._providers.values())
        results = await asyncio.gather(*(self._probe(p) for p in providers))
        return [
            ProviderAvailability(
                name=p.name,
                display_name=p.display_name,
                available=available,
                requires_api_key=p.requires_api_key,
                supports_streaming=p.supports_streaming,
                supports_native_tools=p.supports_native_tools,
            )
            for p, available in zip(providers, results)
        ]

    async def get_best_available(self) -> Optional[LLMProvider]:
        """Return the local provider when available, else echo, else any provider.

        ``None`` only when the registry is empty.
        """
        local = self._providers.get(self.local_provider)
        if local is not None and await self._probe(local):
            return local
        fallback = self._providers.get(self.fallback_provider)
        if fallback is not None:
            return fallback
        return next(iter(self._providers.values()), None)

    async def aclose(self) -> None:
        """Close every registered provider."""
        for provider in self._providers.values():
            await provider.aclose()


__all__ = ["ProviderAvailability", "ProviderRegistry"]
