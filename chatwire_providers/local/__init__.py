"""On-device (local session) provider package."""

from .backend import LanguageModelBackend, LanguageModelSession
from .client import LocalSessionProvider
from .session_pool import SessionPool

__all__ = ["LanguageModelBackend", "LanguageModelSession", "LocalSessionProvider", "SessionPool"]
