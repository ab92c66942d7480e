"""
Statistics Aggregation

DESIGN DECISION: Aggregation is a pure function of the bills passed in.
The caller hands over LocalLedgerStore.merged_view() (optionally narrowed
with select_bills), so statistics always reflect pending and confirmed
bills together. Nothing is cached between calls.

GUARANTEES:
- Never raises on empty input: totals are zero, series are zero-filled
- Never raises on an unknown category ID: the fallback label is used
- Never divides by zero: a direction with a zero total reports 0% for
  every category
- Amounts stay Decimal throughout
"""

from collections import OrderedDict
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional, Union

import structlog

from money_notes.categories import CategoryRegistry
from money_notes.config import LedgerSettings, get_settings
from money_notes.models.bill import BillFields, BillType
from money_notes.models.statistics import (
    ZERO,
    BillSummary,
    CategoryStatistics,
    DailyStatistics,
    FullStatistics,
    GroupBy,
    TrendStatistics,
)
from money_notes.statistics.periods import (
    bucket_end,
    bucket_label,
    bucket_start,
    iter_days,
    next_bucket,
)

HUNDRED = Decimal("100")

# Breakdown rows are grouped expense first, then income
DIRECTION_ORDER = (BillType.EXPENSE, BillType.INCOME)


def select_bills(
    bills: Iterable[BillFields],
    start: Optional[date] = None,
    end: Optional[date] = None,
    direction: Optional[BillType] = None,
    category_id: Optional[str] = None,
) -> list[BillFields]:
    """Narrow a bill collection to a date range, direction and category."""
    selected = []
    for bill in bills:
        if start and bill.bill_date < start:
            continue
        if end and bill.bill_date > end:
            continue
        if direction and bill.type != direction:
            continue
        if category_id and bill.category_id != category_id:
            continue
        selected.append(bill)
    return selected


class StatisticsAggregator:
    """
    Computes totals, category breakdowns, daily series and trends.

    Holds the CategoryRegistry only to label categories at aggregation
    time, so a renamed category shows its new name on old bills.
    """

    def __init__(
        self,
        registry: CategoryRegistry,
        settings: Optional[LedgerSettings] = None,
    ):
        self._registry = registry
        self._settings = settings or get_settings()
        self._logger = structlog.get_logger(__name__)
        self._percent_quantum = Decimal(1).scaleb(-self._settings.percentage_places)

    def summarize(self, bills: Iterable[BillFields]) -> BillSummary:
        """Income/expense totals, balance and per-category breakdown."""
        bills = list(bills)
        total_income = self._total(bills, BillType.INCOME)
        total_expense = self._total(bills, BillType.EXPENSE)

        by_category: list[CategoryStatistics] = []
        for direction in DIRECTION_ORDER:
            by_category.extend(self.category_breakdown(bills, direction))

        return BillSummary(
            total_income=total_income,
            total_expense=total_expense,
            balance=total_income - total_expense,
            by_category=by_category,
        )

    def category_breakdown(
        self,
        bills: Iterable[BillFields],
        direction: BillType,
    ) -> list[CategoryStatistics]:
        """
        Per-category amount, count and percentage for one direction.

        Ordered by amount descending; ties keep first-seen order.
        """
        groups: "OrderedDict[str, list]" = OrderedDict()
        for bill in bills:
            if bill.type != direction:
                continue
            entry = groups.setdefault(bill.category_id, [ZERO, 0])
            entry[0] += bill.amount
            entry[1] += 1

        direction_total = sum((amount for amount, _ in groups.values()), ZERO)

        rows = []
        for category_id, (amount, count) in groups.items():
            name, icon = self._registry.label_for(category_id)
            rows.append(CategoryStatistics(
                category_id=category_id,
                category_name=name,
                category_icon=icon,
                type=direction,
                amount=amount,
                count=count,
                percentage=self._percentage(amount, direction_total),
            ))

        rows.sort(key=lambda row: row.amount, reverse=True)
        return rows

    def daily_series(
        self,
        bills: Iterable[BillFields],
        start: date,
        end: date,
    ) -> list[DailyStatistics]:
        """
        One entry per calendar day in [start, end], ascending.

        Days without bills are zero-filled so charts get a dense series.
        """
        if start > end:
            return []

        days: "OrderedDict[date, list]" = OrderedDict(
            (day, [ZERO, ZERO]) for day in iter_days(start, end)
        )
        for bill in bills:
            entry = days.get(bill.bill_date)
            if entry is None:
                continue
            if bill.type == BillType.INCOME:
                entry[0] += bill.amount
            else:
                entry[1] += bill.amount

        return [
            DailyStatistics(date=day, income=income, expense=expense)
            for day, (income, expense) in days.items()
        ]

    def trend(
        self,
        bills: Iterable[BillFields],
        group_by: Union[GroupBy, str] = GroupBy.MONTH,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[TrendStatistics]:
        """
        Income, expense and balance per calendar bucket, ascending.

        Bills outside [start, end] are ignored. When both bounds are
        given, buckets without bills are emitted as zero entries if the
        whole bucket lies inside the range; partial buckets at the edges
        only appear when they hold bills.
        """
        group_by = self._coerce_group_by(group_by)
        buckets: dict[date, list] = {}
        for bill in select_bills(bills, start=start, end=end):
            key = bucket_start(bill.bill_date, group_by)
            entry = buckets.setdefault(key, [ZERO, ZERO])
            if bill.type == BillType.INCOME:
                entry[0] += bill.amount
            else:
                entry[1] += bill.amount

        if start is not None and end is not None and start <= end:
            current = bucket_start(start, group_by)
            while current <= end:
                inside = current >= start and bucket_end(current, group_by) <= end
                if inside and current not in buckets:
                    buckets[current] = [ZERO, ZERO]
                current = next_bucket(current, group_by)

        return [
            TrendStatistics(
                period=bucket_label(key, group_by),
                start=key,
                end=bucket_end(key, group_by),
                income=income,
                expense=expense,
                balance=income - expense,
            )
            for key, (income, expense) in sorted(buckets.items())
        ]

    def full_statistics(
        self,
        bills: Iterable[BillFields],
        start: date,
        end: date,
        group_by: Union[GroupBy, str] = GroupBy.MONTH,
    ) -> FullStatistics:
        """Summary, daily series and trend for one date range."""
        in_range = select_bills(bills, start=start, end=end)
        return FullStatistics(
            summary=self.summarize(in_range),
            daily=self.daily_series(in_range, start, end),
            trend=self.trend(in_range, group_by, start=start, end=end),
        )

    def _total(self, bills: list[BillFields], direction: BillType) -> Decimal:
        return sum((bill.amount for bill in bills if bill.type == direction), ZERO)

    def _percentage(self, amount: Decimal, total: Decimal) -> Decimal:
        if total == 0:
            return ZERO
        return (amount / total * HUNDRED).quantize(self._percent_quantum, rounding=ROUND_HALF_UP)

    def _coerce_group_by(self, group_by: Union[GroupBy, str]) -> GroupBy:
        try:
            return GroupBy(group_by)
        except ValueError:
            self._logger.warning("unknown_group_by", group_by=str(group_by), fallback="month")
            return GroupBy.MONTH
