"""Unified provider error taxonomy public surface.

Re-exports the one-class-per-file implementations under
``chatwire_providers.base.errors_parts``.
"""

from .errors_parts.error_category import ErrorCategory
from .errors_parts.classification import ErrorClassification, classify_error
from .errors_parts.provider_error import ProviderError

__all__ = ["ErrorCategory", "ErrorClassification", "ProviderError", "classify_error"]
