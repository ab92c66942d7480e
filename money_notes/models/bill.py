"""
Core Bill Models for Money Notes

These models define the schemas for every bill the ledger core touches.
They are designed to:
1. Keep amounts as Decimal end to end (never float)
2. Treat bill dates as calendar days, not timestamps
3. Be serializable for local storage and the network collaborator
4. Make confirmed and pending bills distinguishable at a glance

DESIGN DECISION: A confirmed Bill and a PendingBill share the same
business fields (BillFields) but never the same identity field.
A Bill has a server `id`; a PendingBill has a temporary `local_id`.
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class BillType(str, Enum):
    """Direction of money flow for a bill."""
    INCOME = "income"
    EXPENSE = "expense"


Amount = Annotated[
    Decimal,
    Field(ge=0, decimal_places=2, description="Amount in the ledger currency")
]


# =============================================================================
# CORE BILL MODELS
# =============================================================================

class BillDraft(BaseModel):
    """
    What the user entered for a new bill.

    This is the payload for both LocalLedgerStore.add_pending and
    BillGateway.submit_bill. Shape checks live here; business checks
    (category exists, amount plausible) live in BillDraftValidator.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    type: BillType = Field(
        ...,
        description="Income or expense"
    )
    amount: Amount
    category_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Category reference (system or custom ID)"
    )
    note: Optional[str] = Field(
        default=None,
        max_length=200,
        description="Free-text note"
    )
    bill_date: date = Field(
        ...,
        description="Transaction date (calendar day)"
    )


class BillFields(BillDraft):
    """Fields shared by confirmed and pending bills."""

    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the bill was created"
    )

    def to_draft(self) -> BillDraft:
        """Strip identity and timestamps back to the submitted payload."""
        return BillDraft(
            type=self.type,
            amount=self.amount,
            category_id=self.category_id,
            note=self.note,
            bill_date=self.bill_date,
        )


class Bill(BillFields):
    """
    A bill confirmed by the server.

    Immutable once confirmed, except through explicit update/delete
    calls issued to the network collaborator.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Server-assigned bill ID"
    )

    @property
    def entry_id(self) -> str:
        return self.id

    @property
    def synced(self) -> bool:
        return True


class PendingBill(BillFields):
    """
    A bill entered locally and not yet confirmed by the server.

    CRITICAL: A PendingBill is never updated in place. It is created once
    and destroyed once, either by reconciliation or by explicit discard.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    local_id: str = Field(
        ...,
        pattern=r"^local_",
        description="Temporary ID, unique for the store's lifetime"
    )
    synced: Literal[False] = False

    @property
    def entry_id(self) -> str:
        return self.local_id


LedgerEntry = Union[Bill, PendingBill]


# =============================================================================
# NETWORK COLLABORATOR MODELS
# =============================================================================

class BillQuery(BaseModel):
    """Filters for fetching confirmed bills from the server."""

    ledger_id: str
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    type: Optional[BillType] = None
    category_id: Optional[str] = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=50, ge=1, le=500)


class Pagination(BaseModel):
    """Pagination metadata returned alongside a page of bills."""

    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


class BillPage(BaseModel):
    """One page of confirmed bills."""

    items: list[Bill] = Field(default_factory=list)
    pagination: Pagination


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'invalid_value', 'unknown_category')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage draft validation.

    Stage 1: Shape checks (amount present and positive)
    Stage 2: Semantic checks (category, date, plausibility)
    """

    validated_at: datetime = Field(
        default_factory=utc_now
    )
    shape_valid: bool
    semantic_valid: bool
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.shape_valid and self.semantic_valid

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[str]:
        return [issue.message for issue in self.issues if issue.severity == "warning"]
