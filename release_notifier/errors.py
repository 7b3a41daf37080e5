"""
Error types for the Release Notifier.

Transient failures (fetch, parse, unreadable store) are absorbed where they
happen and never raise. The exceptions below are fatal: they abort the run
so the scheduler sees a non-zero exit and retries the whole check.
"""

from typing import Optional


class ReleaseNotifierError(Exception):
    """Base class for fatal release notifier errors."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error


class StoreWriteError(ReleaseNotifierError):
    """Raised when the last observed version cannot be persisted."""


class TemplateRenderError(ReleaseNotifierError):
    """Raised when the notification template cannot be loaded or rendered."""
