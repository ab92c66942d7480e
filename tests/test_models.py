"""Tests for the pydantic models."""

from datetime import date
from decimal import Decimal

import pytest

from money_notes.models.bill import (
    Bill,
    BillDraft,
    BillType,
    Pagination,
    PendingBill,
    ValidationIssue,
    ValidationResult,
)
from money_notes.models.category import Category
from tests.factories import make_bill, make_draft


class TestBillModels:
    """Tests for bill-related models."""

    def test_draft_creation(self):
        """Test BillDraft keeps Decimal amounts and calendar dates."""
        draft = make_draft(amount="42.50", note="  lunch  ")
        assert draft.amount == Decimal("42.50")
        assert draft.bill_date == date(2024, 3, 1)
        assert draft.note == "lunch"

    def test_draft_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            make_draft(amount="-1.00")

    def test_draft_rejects_sub_cent_amount(self):
        """Test that amounts with more than two decimals are rejected."""
        with pytest.raises(ValueError):
            make_draft(amount="1.005")

    def test_draft_rejects_long_note(self):
        """Test note length limit."""
        with pytest.raises(ValueError):
            make_draft(note="x" * 201)

    def test_confirmed_bill_identity(self):
        """Test a confirmed bill is identified by its server ID."""
        bill = make_bill("srv_9")
        assert bill.entry_id == "srv_9"
        assert bill.synced is True

    def test_pending_bill_identity(self):
        """Test a pending bill is identified by its temporary ID."""
        pending = PendingBill(local_id="local_1_abc", **make_draft().model_dump())
        assert pending.entry_id == "local_1_abc"
        assert pending.synced is False

    def test_pending_bill_requires_local_prefix(self):
        """Test that temporary IDs cannot look like server IDs."""
        with pytest.raises(ValueError):
            PendingBill(local_id="srv_1", **make_draft().model_dump())

    def test_pending_bill_cannot_be_synced(self):
        """Test that a pending bill is never marked synced."""
        with pytest.raises(ValueError):
            PendingBill(local_id="local_1", synced=True, **make_draft().model_dump())

    def test_pending_bill_is_immutable(self):
        """Test that pending bills cannot be edited in place."""
        pending = PendingBill(local_id="local_1", **make_draft().model_dump())
        with pytest.raises(ValueError):
            pending.amount = Decimal("1.00")

    def test_to_draft_strips_identity(self):
        """Test converting a bill back to its submitted payload."""
        bill = make_bill("srv_1", amount="5.00", bill_type=BillType.INCOME, category_id="sys_10")
        draft = bill.to_draft()
        assert isinstance(draft, BillDraft)
        assert not isinstance(draft, Bill)
        assert draft.amount == Decimal("5.00")
        assert draft.type == BillType.INCOME

    def test_pagination_has_next(self):
        """Test pagination helper."""
        assert Pagination(page=1, page_size=2, total=5, total_pages=3).has_next is True
        assert Pagination(page=3, page_size=2, total=5, total_pages=3).has_next is False
        assert Pagination(page=1, page_size=2, total=0, total_pages=0).has_next is False


class TestCategoryModel:
    """Tests for the Category model."""

    def test_system_category(self):
        category = Category(id="sys_1", name="Dining", icon="food", type=BillType.EXPENSE)
        assert category.is_custom is False

    def test_custom_category_needs_custom_prefix(self):
        """Test that custom categories stay in their own namespace."""
        with pytest.raises(ValueError, match="must start with 'custom_'"):
            Category(id="sys_99", name="Pets", icon="pet", type=BillType.EXPENSE, is_custom=True)

    def test_system_category_needs_system_prefix(self):
        with pytest.raises(ValueError, match="must start with 'sys_'"):
            Category(id="custom_1", name="Pets", icon="pet", type=BillType.EXPENSE)


class TestValidationResult:
    """Tests for ValidationResult model."""

    def test_validation_result_has_errors(self):
        """Test has_errors property."""
        result = ValidationResult(
            shape_valid=False,
            semantic_valid=False,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be greater than zero",
                    severity="error",
                ),
            ],
        )
        assert result.has_errors is True
        assert result.error_count == 1
        assert result.is_valid is False

    def test_validation_result_warnings_only(self):
        """Test that warnings don't count as errors."""
        result = ValidationResult(
            shape_valid=True,
            semantic_valid=True,
            issues=[
                ValidationIssue(
                    field="amount",
                    issue_type="suspicious_value",
                    message="Amount seems unusually high",
                    severity="warning",
                ),
            ],
        )
        assert result.has_errors is False
        assert result.warnings == ["Amount seems unusually high"]
        assert result.is_valid is True
