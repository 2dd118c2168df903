"""Typed parameter object for provider construction.

Purpose
-------
Carry the common constructor settings accepted by the factory (model,
credential, endpoint, headers, flags) through one validated object, with
explicit keyword arguments still allowed to override it.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation and ``.model_dump()``.

Failure modes
-------------
- ``pydantic.ValidationError`` when a field has the wrong type (e.g. a
  non-numeric ``timeout_seconds``).
"""
from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, Field


class AdapterParams(BaseModel):
    """Common provider adapter initialization parameters.

    Attributes
    ----------
    model:
        Default model for the adapter.
    api_key:
        Credential; falls back to ``<PROVIDER>_API_KEY`` when omitted.
    base_url:
        Endpoint override (proxies, self-hosted gateways, compatible backends).
    display_name:
        Human-readable name used in error messages (compatible backends).
    requires_api_key, native_tools:
        Capability flags for OpenAI-compatible backends.
    extra_headers:
        Static headers added to every request (compatible backends).
    timeout_seconds:
        HTTP timeout for the adapter's own client.
    """

    model: Optional[str] = None
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    display_name: Optional[str] = None
    requires_api_key: Optional[bool] = None
    native_tools: Optional[bool] = None
    extra_headers: Dict[str, str] = Field(default_factory=dict)
    timeout_seconds: Optional[float] = Field(default=None, gt=0)


__all__ = ["AdapterParams"]
