"""Audit logging package."""

from money_notes.audit.logger import (
    AuditLogger,
    AuditSink,
    InMemoryAuditSink,
    configure_logging,
)

__all__ = ["AuditLogger", "AuditSink", "InMemoryAuditSink", "configure_logging"]
