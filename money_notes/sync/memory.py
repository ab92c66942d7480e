"""
In-memory bill server.

Stands in for the real API in tests and offline demos. It honours the
gateway idempotency contract and can be told to fail or to hold a
request until released.
"""

import asyncio
import math
from datetime import date
from typing import Optional

from money_notes.models.bill import Bill, BillDraft, BillPage, BillQuery, Pagination
from money_notes.sync.gateway import BillGateway, GatewayError


class InMemoryBillGateway(BillGateway):
    """A tiny bill server living in a dict."""

    def __init__(self):
        self._bills: dict[str, list[Bill]] = {}
        self._by_key: dict[str, Bill] = {}
        self._counter = 0
        self._failures: list[GatewayError] = []
        self.hold: Optional[asyncio.Event] = None
        self.submit_calls = 0

    def fail_next(self, count: int = 1, transient: bool = True) -> None:
        """Make the next `count` calls raise GatewayError."""
        for _ in range(count):
            self._failures.append(GatewayError("Simulated gateway failure", transient=transient))

    def seed(self, ledger_id: str, bills: list[Bill]) -> None:
        self._bills.setdefault(ledger_id, []).extend(bills)

    def bills_in(self, ledger_id: str) -> list[Bill]:
        return list(self._bills.get(ledger_id, []))

    async def _before_call(self) -> None:
        if self.hold is not None:
            await self.hold.wait()
        if self._failures:
            raise self._failures.pop(0)

    async def submit_bill(
        self,
        ledger_id: str,
        draft: BillDraft,
        idempotency_key: str,
    ) -> Bill:
        self.submit_calls += 1
        await self._before_call()

        existing = self._by_key.get(idempotency_key)
        if existing is not None:
            return existing

        self._counter += 1
        bill = Bill(id=f"srv_{self._counter}", **draft.model_dump())
        self._bills.setdefault(ledger_id, []).append(bill)
        self._by_key[idempotency_key] = bill
        return bill

    async def fetch_bills(self, query: BillQuery) -> BillPage:
        await self._before_call()

        matching = [
            bill for bill in self._bills.get(query.ledger_id, [])
            if _matches(bill, query.start_date, query.end_date)
            and (query.type is None or bill.type == query.type)
            and (query.category_id is None or bill.category_id == query.category_id)
        ]
        matching.sort(key=lambda b: b.bill_date, reverse=True)

        total = len(matching)
        offset = (query.page - 1) * query.page_size
        return BillPage(
            items=matching[offset:offset + query.page_size],
            pagination=Pagination(
                page=query.page,
                page_size=query.page_size,
                total=total,
                total_pages=math.ceil(total / query.page_size),
            ),
        )


def _matches(bill: Bill, start: Optional[date], end: Optional[date]) -> bool:
    if start and bill.bill_date < start:
        return False
    if end and bill.bill_date > end:
        return False
    return True
