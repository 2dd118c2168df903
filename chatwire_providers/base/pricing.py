"""Static model pricing and cost estimation.

Rates are USD per 1,000 tokens. ``cached_input`` is the discounted rate for
prompt tokens served from the vendor's prompt cache; when a row has none, cached
tokens are billed at the normal input rate. Models missing from the table
(including unknown or self-hosted ones) cost ``0``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class PricingRow:
    input: float
    output: float
    cached_input: Optional[float] = None


MODEL_PRICING: Dict[str, PricingRow] = {
    # OpenAI
    "gpt-4o": PricingRow(input=0.0025, output=0.010, cached_input=0.00125),
    "gpt-4o-mini": PricingRow(input=0.00015, output=0.0006),
    "gpt-4.1": PricingRow(input=0.002, output=0.008, cached_input=0.001),
    "gpt-4.1-mini": PricingRow(input=0.0004, output=0.0016),
    "gpt-4.1-nano": PricingRow(input=0.0001, output=0.0004),
    "o3-mini": PricingRow(input=0.0011, output=0.0044),
    # Anthropic
    "claude-sonnet-4-6": PricingRow(input=0.003, output=0.015, cached_input=0.0015),
    "claude-haiku-4-5-20251001": PricingRow(input=0.0008, output=0.004, cached_input=0.0004),
    "claude-opus-4-6": PricingRow(input=0.015, output=0.075, cached_input=0.0075),
    # Groq
    "llama-3.3-70b-versatile": PricingRow(input=0.00059, output=0.00079),
    "llama-3.1-8b-instant": PricingRow(input=0.00005, output=0.00008),
    # Mistral
    "mistral-small-latest": PricingRow(input=0.0001, output=0.0003),
    "mistral-large-latest": PricingRow(input=0.002, output=0.006),
    # DeepSeek
    "deepseek-chat": PricingRow(input=0.00014, output=0.00028, cached_input=0.00007),
    "deepseek-reasoner": PricingRow(input=0.00055, output=0.00219),
    # Free
    "chrome-ai": PricingRow(input=0.0, output=0.0),
    "local": PricingRow(input=0.0, output=0.0),
    "echo": PricingRow(input=0.0, output=0.0),
}


def _usage_value(usage: Any, key: str) -> float:
    raw = usage.get(key) if isinstance(usage, Mapping) else getattr(usage, key, None)
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        return 0.0
    return float(raw)


def estimate_cost(model: str, usage: Any) -> float:
    """Estimate the USD cost of one completion.

    Parameters:
        model: Model name as reported in ``ChatResponse.model``.
        usage: A ``Usage`` DTO or a mapping with ``input_tokens`` and
            ``output_tokens`` and, optionally, ``cache_read_input_tokens``.

    Returns:
        ``(input - cached)/1000 * input + cached/1000 * cached_rate
        + output/1000 * output``; ``0.0`` for unknown models or no usage.
    """
    row = MODEL_PRICING.get(model)
    if row is None or usage is None:
        return 0.0
    input_tokens = _usage_value(usage, "input_tokens")
    output_tokens = _usage_value(usage, "output_tokens")
    cached_tokens = _usage_value(usage, "cache_read_input_tokens")
    regular_input = max(0.0, input_tokens - cached_tokens)
    cached_rate = row.cached_input if row.cached_input is not None else row.input
    return (
        (regular_input / 1000) * row.input
        + (cached_tokens / 1000) * cached_rate
        + (output_tokens / 1000) * row.output
    )


__all__ = ["PricingRow", "MODEL_PRICING", "estimate_cost"]
