"""Validated boundary DTOs (pydantic)."""

from .adapter_params import AdapterParams

__all__ = ["AdapterParams"]
