"""
Data Models Package

This package contains all Pydantic models used by the ledger core.
All data flowing through the system must conform to these schemas.
"""

from money_notes.models.bill import (
    Bill,
    BillDraft,
    BillFields,
    BillPage,
    BillQuery,
    BillType,
    LedgerEntry,
    Pagination,
    PendingBill,
    ValidationIssue,
    ValidationResult,
)
from money_notes.models.category import (
    CUSTOM_ID_PREFIX,
    SYSTEM_ID_PREFIX,
    Category,
    CategoryCreate,
    CategoryUpdate,
)
from money_notes.models.statistics import (
    BillSummary,
    CategoryStatistics,
    DailyStatistics,
    FullStatistics,
    GroupBy,
    TrendStatistics,
)
from money_notes.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Bill models
    "Bill",
    "BillDraft",
    "BillFields",
    "BillPage",
    "BillQuery",
    "BillType",
    "LedgerEntry",
    "Pagination",
    "PendingBill",
    "ValidationIssue",
    "ValidationResult",
    # Category models
    "CUSTOM_ID_PREFIX",
    "SYSTEM_ID_PREFIX",
    "Category",
    "CategoryCreate",
    "CategoryUpdate",
    # Statistics models
    "BillSummary",
    "CategoryStatistics",
    "DailyStatistics",
    "FullStatistics",
    "GroupBy",
    "TrendStatistics",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
