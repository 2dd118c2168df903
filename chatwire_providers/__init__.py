"""chatwire_providers: one chat contract over heterogeneous LLM HTTP APIs.

Public entry points live under ``chatwire_providers.base`` (models, errors,
cache, registry, pricing) and the per-vendor provider packages
(``echo``, ``local``, ``openai``, ``anthropic``, ``compatible``).
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
