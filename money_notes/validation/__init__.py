"""Validation package."""

from money_notes.validation.validator import BillDraftValidator

__all__ = ["BillDraftValidator"]
