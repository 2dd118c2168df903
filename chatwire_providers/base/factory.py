"""Provider factory utilities.

Purpose
-------
Create provider adapters by canonical name. First-party adapters are imported
lazily with ``importlib``; names of OpenAI-compatible service presets
(``groq``, ``ollama``...) resolve through
``compatible.services.create_compatible_provider``.
``create_default_providers`` builds the standard registry.

Failure modes
-------------
Unknown names, import failures, missing classes and constructor errors all
raise :class:`UnknownProviderError` with an actionable message.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any, Dict, Mapping, Optional, Tuple, Type

import httpx

from .dto.adapter_params import AdapterParams
from .http.client import build_async_client
from .registry import ProviderRegistry


class UnknownProviderError(Exception):
    """Raised when a provider cannot be resolved or initialized."""


class ProviderFactory:
    """Create provider adapters from a canonical name (e.g. ``"openai"``)."""

    _PROVIDERS: Dict[str, Dict[str, str]] = {
        "echo": {"module": "chatwire_providers.echo.client", "class": "EchoProvider"},
        "local": {"module": "chatwire_providers.local.client", "class": "LocalSessionProvider"},
        "openai": {"module": "chatwire_providers.openai.client", "class": "OpenAIProvider"},
        "anthropic": {"module": "chatwire_providers.anthropic.client", "class": "AnthropicProvider"},
    }

    @classmethod
    def create(
        cls,
        provider: str,
        *,
        params: Optional[AdapterParams] = None,
        **kwargs: Any,
    ) -> Any:
        """Create a provider adapter instance.

        Parameters
        ----------
        provider:
            Canonical provider name or compatible service preset name.
        params:
            Optional :class:`AdapterParams`; explicit ``kwargs`` win over it.
        **kwargs:
            Adapter-specific constructor arguments (``http_client``,
            ``backend``, ``retry_config``...).

        Raises
        ------
        UnknownProviderError
            Unknown name, import failure, missing class or constructor error.
        """
        merged = cls._coerce_params(params, kwargs)
        name = (provider or "").lower().strip()

        from ..compatible.services import OPENAI_COMPATIBLE_SERVICES, create_compatible_provider

        if name not in cls._PROVIDERS:
            if name not in OPENAI_COMPATIBLE_SERVICES:
                raise UnknownProviderError(f"Unknown provider '{provider}'")
            try:
                return create_compatible_provider(name, **merged)
            except TypeError as exc:
                raise UnknownProviderError(
                    f"Invalid arguments for provider '{provider}': {exc}"
                ) from exc

        spec = cls._PROVIDERS[name]
        module_path, class_name = spec["module"], spec["class"]
        try:
            mod = import_module(module_path)
        except ImportError as exc:  # pragma: no cover - import failure path
            raise UnknownProviderError(
                f"Cannot import '{module_path}' for provider '{provider}': {exc}"
            ) from exc
        try:
            klass: Type = getattr(mod, class_name)
        except AttributeError as exc:
            raise UnknownProviderError(
                f"'{module_path}' has no class '{class_name}' (provider '{provider}')"
            ) from exc
        try:
            return klass(**merged)
        except TypeError as exc:
            raise UnknownProviderError(
                f"Invalid arguments for provider '{provider}': {exc}"
            ) from exc

    @classmethod
    def supported(cls) -> Tuple[str, ...]:
        """Return first-party names followed by compatible service presets."""
        from ..compatible.services import OPENAI_COMPATIBLE_SERVICES

        return tuple(cls._PROVIDERS) + tuple(OPENAI_COMPATIBLE_SERVICES)

    @staticmethod
    def _coerce_params(params: Optional[AdapterParams], kwargs: Mapping[str, Any]) -> Dict[str, Any]:
        """Merge ``AdapterParams`` into ``kwargs`` (kwargs win).

        ``None`` fields and empty ``extra_headers`` are dropped so adapter
        defaults stay in effect; ``timeout_seconds`` becomes an owned
        ``http_client`` unless one was passed explicitly.
        """
        if params is None:
            return dict(kwargs)
        merged: Dict[str, Any] = params.model_dump(exclude_none=True)
        if not merged.get("extra_headers"):
            merged.pop("extra_headers", None)
        timeout = merged.pop("timeout_seconds", None)
        if timeout is not None and "http_client" not in kwargs:
            merged["http_client"] = build_async_client(timeout=timeout)
        merged.update(kwargs)
        return merged


def create_provider(provider: str, **kwargs: Any) -> Any:
    """Shortcut for :meth:`ProviderFactory.create`."""
    return ProviderFactory.create(provider, **kwargs)


def create_default_providers(
    *,
    local_backend: Any = None,
    http_client: Optional[httpx.AsyncClient] = None,
    registry: Optional[ProviderRegistry] = None,
) -> ProviderRegistry:
    """Register echo, local, OpenAI, Anthropic and every compatible preset.

    Parameters:
        local_backend: On-device runtime for the ``local`` provider (it stays
            registered but unavailable when ``None``).
        http_client: Shared client injected into every HTTP provider.
        registry: Registry to populate (a new one by default).
    """
    target = registry if registry is not None else ProviderRegistry()
    http_kwargs: Dict[str, Any] = {"http_client": http_client} if http_client is not None else {}
    target.register(ProviderFactory.create("echo"))
    target.register(ProviderFactory.create("local", backend=local_backend))
    for name in ProviderFactory.supported():
        if name in ("echo", "local"):
            continue
        target.register(ProviderFactory.create(name, **http_kwargs))
    return target


__all__ = [
    "UnknownProviderError",
    "ProviderFactory",
    "create_provider",
    "create_default_providers",
]
