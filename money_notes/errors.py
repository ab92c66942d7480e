"""
Error taxonomy for the ledger core.

Every failure here is recoverable at the call site: retry, ignore, or
surface to the user. Data loss, not a crash, is what we guard against.
"""

from typing import Any, Optional


class LedgerError(Exception):
    """Base exception for the ledger core."""
    pass


class NotFoundError(LedgerError):
    """A category or pending entry does not exist (or may not be touched)."""
    pass


class PersistenceError(LedgerError):
    """
    A storage write or read failed.

    `entity` carries whatever the operation produced before the failure,
    e.g. the PendingBill that was kept in memory by an optimistic add.
    """

    def __init__(self, message: str, entity: Optional[Any] = None):
        self.entity = entity
        super().__init__(message)


class CorruptBlobError(PersistenceError):
    """A stored blob could not be decoded (bad JSON, schema or version)."""
    pass


class ValidationError(LedgerError):
    """Caller-supplied data violates a constraint."""

    def __init__(self, message: str, issues: Optional[list] = None):
        self.issues = issues or []
        super().__init__(message)
