"""Echo provider package."""

from .client import EchoProvider

__all__ = ["EchoProvider"]
