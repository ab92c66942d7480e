"""
Two-Stage Bill Draft Validation

DESIGN DECISION: Validation happens before a draft reaches the ledger
store, in two distinct stages:

STAGE 1 - SHAPE VALIDATION:
- Amount must be greater than zero
- Category ID must be present

STAGE 2 - SEMANTIC VALIDATION:
- Category must exist and match the bill's direction
- Bill date must not be in the future (beyond the configured tolerance)
- Absurd amount detection

The store itself never validates; it trusts what it is given. The
network collaborator validates again on its side.

Raw input goes through parse_draft() first, so constraint violations
caught by the BillDraft model itself (negative amount, too many
decimals, over-long note) surface as the same ValidationError.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them and, through ensure_valid(), raises ValidationError.
"""

from datetime import date, timedelta
from typing import Any, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from money_notes.categories import CategoryRegistry
from money_notes.config import LedgerSettings, get_settings
from money_notes.errors import ValidationError
from money_notes.formatting import format_money
from money_notes.models.bill import BillDraft, ValidationIssue, ValidationResult


class BillDraftValidator:
    """
    Validates bill drafts through a two-stage pipeline.

    Stage 1: Shape validation (needs nothing but the draft)
    Stage 2: Semantic validation (needs the category registry)
    """

    def __init__(
        self,
        registry: CategoryRegistry,
        settings: Optional[LedgerSettings] = None,
    ):
        self._registry = registry
        self._settings = settings or get_settings()

    def _validate_shape(self, draft: BillDraft) -> tuple[bool, list[ValidationIssue]]:
        issues = []

        if draft.amount <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            ))

        if not draft.category_id:
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="missing",
                message="A category is required",
                severity="error",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        draft: BillDraft,
        today: date,
    ) -> tuple[bool, list[ValidationIssue]]:
        issues = []

        category = self._registry.find(draft.category_id)
        if category is None:
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="unknown_category",
                message=f"Category {draft.category_id} does not exist",
                severity="error",
            ))
        elif category.type != draft.type:
            issues.append(ValidationIssue(
                field="category_id",
                issue_type="direction_mismatch",
                message=(
                    f"Category {category.name} is for {category.type.value}, "
                    f"not {draft.type.value}"
                ),
                severity="error",
            ))

        max_date = today + timedelta(days=self._settings.future_date_tolerance_days)
        if draft.bill_date > max_date:
            issues.append(ValidationIssue(
                field="bill_date",
                issue_type="future_date",
                message=f"Bill date ({draft.bill_date}) is in the future",
                severity="error",
            ))

        if draft.amount > self._settings.max_bill_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=(
                    f"Amount ({format_money(draft.amount, self._settings.currency)}) "
                    "seems unusually high"
                ),
                severity="warning",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def parse_draft(self, data: Mapping[str, Any]) -> BillDraft:
        """
        Build a BillDraft from raw input (form fields, an API payload).

        Field constraints (negative amount, sub-cent precision, note
        length) are enforced by the model itself; any violation is
        reported as the core ValidationError, one issue per field.

        Raises:
            ValidationError: If the data does not form a draft
        """
        try:
            return BillDraft.model_validate(data)
        except PydanticValidationError as e:
            issues = [
                ValidationIssue(
                    field=".".join(str(part) for part in error["loc"]) or "draft",
                    issue_type=error["type"],
                    message=error["msg"],
                    severity="error",
                )
                for error in e.errors()
            ]
            messages = "; ".join(f"{i.field}: {i.message}" for i in issues)
            raise ValidationError(f"Bill is not valid: {messages}", issues=issues) from e

    def validate(self, draft: BillDraft, today: Optional[date] = None) -> ValidationResult:
        """
        Run the full two-stage pipeline.

        Stage 2 only runs when stage 1 passes.
        """
        all_issues = []
        shape_valid, shape_issues = self._validate_shape(draft)
        all_issues.extend(shape_issues)

        semantic_valid = False
        if shape_valid:
            semantic_valid, semantic_issues = self._validate_semantic(draft, today or date.today())
            all_issues.extend(semantic_issues)

        return ValidationResult(
            shape_valid=shape_valid,
            semantic_valid=semantic_valid,
            issues=all_issues,
        )

    def ensure_valid(self, draft: BillDraft, today: Optional[date] = None) -> ValidationResult:
        """
        Validate and raise on any error-level issue.

        Raises:
            ValidationError: Carrying every issue found
        """
        result = self.validate(draft, today=today)
        if result.has_errors:
            messages = "; ".join(i.message for i in result.issues if i.severity == "error")
            raise ValidationError(f"Bill is not valid: {messages}", issues=result.issues)
        return result
