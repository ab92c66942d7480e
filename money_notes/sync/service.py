"""
Sync Service

Moves pending bills to the server and feeds confirmations back into the
LocalLedgerStore.

Flow for one pending bill:
1. Read the PendingBill from the store (never removed at this point)
2. Submit it through the gateway, keyed by its temporary ID
3. On success, reconcile: pending entry out, confirmed bill in

A failure or a cancellation anywhere before step 3 leaves the pending
bill exactly where it was, ready for the next attempt. Because the
gateway is idempotent by temporary ID, retrying a bill whose first
attempt actually reached the server cannot create a duplicate.
"""

import asyncio
from datetime import date
from typing import Optional

import structlog
from pydantic import BaseModel, Field
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from money_notes.audit import AuditLogger
from money_notes.config import LedgerSettings, get_settings
from money_notes.errors import NotFoundError, PersistenceError
from money_notes.ledger import LocalLedgerStore
from money_notes.models.audit import AuditEventBuilder
from money_notes.models.bill import Bill, BillQuery, PendingBill
from money_notes.sync.gateway import BillGateway, GatewayError


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, GatewayError) and error.transient


class SyncReport(BaseModel):
    """Outcome of pushing every pending bill."""

    synced: dict[str, str] = Field(
        default_factory=dict,
        description="Temporary ID -> server ID for confirmed bills"
    )
    failed: dict[str, str] = Field(
        default_factory=dict,
        description="Temporary ID -> error message for bills still pending"
    )
    needs_flush: bool = Field(
        default=False,
        description="Local save of the pending list failed and must be retried"
    )

    @property
    def all_synced(self) -> bool:
        return not self.failed


class SyncService:
    """
    Submits pending bills for one ledger and refreshes confirmed bills.

    Runs on the same event loop as the UI. Only gateway calls suspend;
    every store mutation happens between awaits.
    """

    def __init__(
        self,
        store: LocalLedgerStore,
        gateway: BillGateway,
        ledger_id: str,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._store = store
        self._gateway = gateway
        self._ledger_id = ledger_id
        self._audit = audit_logger or AuditLogger()
        self._settings = settings or get_settings()
        self._logger = structlog.get_logger(__name__)

    @property
    def ledger_id(self) -> str:
        return self._ledger_id

    async def submit(self, local_id: str) -> Bill:
        """
        Submit one pending bill and reconcile it.

        Raises:
            NotFoundError: If no pending bill has this ID
            GatewayError: If every attempt failed (bill stays pending)
            PersistenceError: If reconciliation could not save locally
                (memory is reconciled; flush the store later)
            asyncio.CancelledError: If cancelled (bill stays pending)
        """
        pending = self._store.get_pending(local_id)
        if pending is None:
            raise NotFoundError(f"Pending bill not found: {local_id}")

        try:
            bill = await self._submit_with_retry(pending)
        except asyncio.CancelledError:
            self._audit.log(AuditEventBuilder.submit_cancelled(local_id))
            raise
        except GatewayError as e:
            self._audit.log(AuditEventBuilder.submit_failed(local_id, str(e)))
            raise

        self._store.reconcile(local_id, bill)
        return bill

    async def sync_pending(self) -> SyncReport:
        """
        Submit every pending bill, oldest first.

        One bill failing does not stop the others.
        """
        report = SyncReport()
        for pending in self._store.pending:
            try:
                bill = await self.submit(pending.local_id)
            except NotFoundError:
                # Discarded while an earlier submission was in flight
                continue
            except GatewayError as e:
                report.failed[pending.local_id] = str(e)
                continue
            except PersistenceError as e:
                report.needs_flush = True
                if e.entity is not None:
                    report.synced[pending.local_id] = e.entity.id
                continue
            report.synced[pending.local_id] = bill.id

        self._logger.info(
            "sync_pending_finished",
            ledger_id=self._ledger_id,
            synced=len(report.synced),
            failed=len(report.failed),
        )
        return report

    async def refresh(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        page_size: int = 100,
    ) -> list[Bill]:
        """
        Fetch every page of confirmed bills and replace the store's set.

        The confirmed set is only replaced once all pages arrived; a
        failure part-way leaves the previous set in place. Bills
        reconciled while the pages were in flight are kept even if the
        fetched pages predate them.

        Raises:
            GatewayError: If any page could not be fetched
        """
        token = self._store.confirmation_token()
        bills: list[Bill] = []
        page = 1
        while True:
            result = await self._gateway.fetch_bills(BillQuery(
                ledger_id=self._ledger_id,
                start_date=start_date,
                end_date=end_date,
                page=page,
                page_size=page_size,
            ))
            bills.extend(result.items)
            if not result.pagination.has_next:
                break
            page += 1

        self._store.set_confirmed(bills, since=token)
        self._logger.info("confirmed_bills_refreshed", ledger_id=self._ledger_id, count=len(bills))
        return bills

    async def _submit_with_retry(self, pending: PendingBill) -> Bill:
        retrying = AsyncRetrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(self._settings.submit_max_attempts),
            wait=wait_exponential(
                multiplier=self._settings.submit_retry_wait_seconds,
                max=30,
            ),
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                bill = await self._gateway.submit_bill(
                    self._ledger_id,
                    pending.to_draft(),
                    idempotency_key=pending.local_id,
                )
        return bill
