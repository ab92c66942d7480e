"""
Statistics Result Models

These are the read models handed to the UI layer. Every numeric field
is a Decimal and every field has a zero default, so an empty input
produces a valid (all-zero) result rather than an error.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from money_notes.models.bill import BillType

ZERO = Decimal("0")


class GroupBy(str, Enum):
    """Calendar granularity for trend buckets."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class CategoryStatistics(BaseModel):
    """Totals for one category within one direction."""

    category_id: str
    category_name: str
    category_icon: Optional[str] = None
    type: BillType
    amount: Decimal = ZERO
    count: int = Field(default=0, ge=0)
    percentage: Decimal = Field(
        default=ZERO,
        description="Share of the direction total, 0-100"
    )


class BillSummary(BaseModel):
    """Totals and per-category breakdown over a bill collection."""

    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    balance: Decimal = ZERO
    by_category: list[CategoryStatistics] = Field(default_factory=list)


class DailyStatistics(BaseModel):
    """Income and expense for a single calendar day."""

    date: date
    income: Decimal = ZERO
    expense: Decimal = ZERO


class TrendStatistics(BaseModel):
    """Income, expense and balance for one calendar bucket."""

    period: str = Field(..., description="Bucket label, e.g. 2024-03 or 2024-W09")
    start: date
    end: date
    income: Decimal = ZERO
    expense: Decimal = ZERO
    balance: Decimal = ZERO


class FullStatistics(BaseModel):
    """Summary, daily series and trend computed in one pass for a range."""

    summary: BillSummary
    daily: list[DailyStatistics] = Field(default_factory=list)
    trend: list[TrendStatistics] = Field(default_factory=list)
