"""Implementation modules for ``base.cancellation``."""
