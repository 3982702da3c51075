"""Exception types raised at the record-store and handler boundary."""

from __future__ import annotations


class FinanceTrackerError(Exception):
    """Base class for all finance tracker errors."""


class AuthorizationError(FinanceTrackerError, PermissionError):
    """Caller is not signed in or does not own the record."""


class NotFoundError(FinanceTrackerError, LookupError):
    """The requested record id does not exist."""


class ValidationError(FinanceTrackerError, ValueError):
    """A mutation received malformed input."""


class DuplicateRecordError(ValidationError):
    """A uniqueness rule (e.g. one budget limit per category) was violated."""


class StoreError(FinanceTrackerError):
    """The underlying database call failed."""
