"""Tests for the BillDraftValidator."""

from datetime import date
from decimal import Decimal

import pytest

from money_notes.config import LedgerSettings
from money_notes.errors import ValidationError
from money_notes.models.bill import BillType
from money_notes.validation import BillDraftValidator
from tests.factories import make_draft

TODAY = date(2024, 3, 1)


@pytest.fixture
def validator(registry, settings):
    return BillDraftValidator(registry, settings=settings)


class TestBillDraftValidator:

    def test_valid_draft(self, validator):
        result = validator.validate(make_draft(amount="42.50"), today=TODAY)
        assert result.is_valid is True
        assert result.issues == []

    def test_zero_amount_fails_shape_stage(self, validator):
        result = validator.validate(make_draft(amount="0.00"), today=TODAY)
        assert result.shape_valid is False
        assert result.semantic_valid is False
        assert result.issues[0].field == "amount"

    def test_unknown_category(self, validator):
        result = validator.validate(make_draft(category_id="custom_nope"), today=TODAY)
        assert result.has_errors
        assert result.issues[0].issue_type == "unknown_category"

    def test_direction_mismatch(self, validator):
        draft = make_draft(bill_type=BillType.INCOME, category_id="sys_1")
        result = validator.validate(draft, today=TODAY)
        assert [i.issue_type for i in result.issues] == ["direction_mismatch"]

    def test_future_date(self, validator):
        result = validator.validate(make_draft(bill_date=date(2024, 3, 2)), today=TODAY)
        assert [i.issue_type for i in result.issues] == ["future_date"]

    def test_future_tolerance(self, registry, tmp_path):
        settings = LedgerSettings(storage_path=tmp_path / "s.json", future_date_tolerance_days=3)
        validator = BillDraftValidator(registry, settings=settings)
        assert validator.validate(make_draft(bill_date=date(2024, 3, 4)), today=TODAY).is_valid

    def test_large_amount_is_only_a_warning(self, registry, tmp_path):
        settings = LedgerSettings(storage_path=tmp_path / "s.json", max_bill_amount=Decimal("100"))
        validator = BillDraftValidator(registry, settings=settings)
        result = validator.validate(make_draft(amount="1500.00"), today=TODAY)
        assert result.is_valid is True
        assert result.warnings == ["Amount (¥1,500.00) seems unusually high"]

    def test_ensure_valid_raises_with_issues(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.ensure_valid(make_draft(category_id="custom_nope"), today=TODAY)
        assert exc_info.value.issues[0].field == "category_id"

    def test_ensure_valid_returns_result(self, validator):
        assert validator.ensure_valid(make_draft(), today=TODAY).is_valid


class TestParseDraft:

    def test_well_formed_data(self, validator):
        draft = validator.parse_draft({
            "type": "expense",
            "amount": "12.30",
            "category_id": "sys_1",
            "bill_date": "2024-03-01",
        })
        assert draft.amount == Decimal("12.30")
        assert draft.bill_date == TODAY

    def test_negative_amount_raises_core_error(self, validator):
        """Test model-level violations use the ledger's own ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            validator.parse_draft({
                "type": "expense",
                "amount": "-5.00",
                "category_id": "sys_1",
                "bill_date": "2024-03-01",
            })
        issues = exc_info.value.issues
        assert [i.field for i in issues] == ["amount"]
        assert issues[0].severity == "error"

    def test_every_bad_field_is_reported(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.parse_draft({"type": "gift", "amount": "1.005", "category_id": "sys_1"})
        fields = {i.field for i in exc_info.value.issues}
        assert fields == {"type", "amount", "bill_date"}
