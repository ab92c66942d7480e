"""
Local Ledger Store

Holds the two halves of a ledger as the client sees it:

- confirmed: bills the server has assigned an ID to (last fetch + any
  confirmations received since)
- pending: bills entered locally that the server has not confirmed yet

and produces the merged view the UI reads.

DESIGN DECISION: The two halves are separate collections and pending
bills are never edited in place. A network round trip can suspend at any
point; while it does, the UI may keep reading merged_view() and adding
new pending bills without any locking, because reconciliation only ever
removes one pending entry and inserts one confirmed entry.

PERSISTENCE POLICY: Pending mutations are optimistic. Memory is updated
first so the UI stays responsive; if the write fails the store is marked
dirty, PersistenceError is raised (carrying the affected entry), and
flush() retries the write later. Losing a user's bill is worse than a
delayed write.

RECONCILIATION POLICY: Confirming an unknown temporary ID is a logged
no-op. Duplicate confirmations are tolerated and a discarded entry is
never resurrected.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

import structlog

from money_notes.audit import AuditLogger
from money_notes.errors import CorruptBlobError, NotFoundError, PersistenceError
from money_notes.ids import IdGenerator
from money_notes.models.audit import AuditEventBuilder
from money_notes.models.bill import Bill, BillDraft, BillType, LedgerEntry, PendingBill
from money_notes.storage import KeyValueStore, StorageKeys, load_items, save_items

LOCAL_ID_PREFIX = "local_"


class LocalLedgerStore:
    """
    Confirmed + pending bills for one ledger in one application session.

    All methods are synchronous and must be called from a single thread
    of control (the UI / event loop thread).
    """

    def __init__(
        self,
        storage: KeyValueStore,
        audit_logger: Optional[AuditLogger] = None,
        id_generator: Optional[IdGenerator] = None,
    ):
        self._storage = storage
        self._audit = audit_logger or AuditLogger()
        self._ids = id_generator or IdGenerator(LOCAL_ID_PREFIX)
        self._logger = structlog.get_logger(__name__)

        # Keyed by server ID; dict order is fetch order
        self._confirmed: dict[str, Bill] = {}
        self._pending: list[PendingBill] = []
        self._dirty = False

        # Bumped on every reconcile; server ID -> generation it was confirmed in
        self._generation = 0
        self._confirmed_in: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Loading and snapshots
    # ------------------------------------------------------------------

    def load(self) -> list[PendingBill]:
        """
        Restore pending bills saved by a previous session.

        Raises:
            CorruptBlobError: If the stored blob cannot be decoded or
                repeats a temporary ID
        """
        pending = load_items(self._storage, StorageKeys.LOCAL_BILLS.value, PendingBill)
        seen: set[str] = set()
        for bill in pending:
            if bill.local_id in seen:
                raise CorruptBlobError(f"Stored pending bills repeat {bill.local_id}")
            seen.add(bill.local_id)
            self._ids.reserve(bill.local_id)

        self._pending = pending
        self._dirty = False
        self._logger.info("pending_bills_loaded", count=len(pending))
        return list(pending)

    @property
    def confirmed(self) -> list[Bill]:
        return list(self._confirmed.values())

    @property
    def pending(self) -> list[PendingBill]:
        return list(self._pending)

    @property
    def needs_flush(self) -> bool:
        """True when the last pending write failed and must be retried."""
        return self._dirty

    def get_pending(self, local_id: str) -> Optional[PendingBill]:
        for bill in self._pending:
            if bill.local_id == local_id:
                return bill
        return None

    # ------------------------------------------------------------------
    # Confirmed bills
    # ------------------------------------------------------------------

    def confirmation_token(self) -> int:
        """
        Marker for "now", taken before a fetch starts.

        Pass it back to set_confirmed() so bills reconciled while the
        fetch was in flight survive the replacement.
        """
        return self._generation

    def set_confirmed(self, bills: Iterable[Bill], since: Optional[int] = None) -> None:
        """
        Replace the confirmed set (after a fetch). Pending is untouched.

        If the server returns the same ID twice, the later copy wins and
        keeps the position of the first.

        With `since` (a confirmation_token()), bills reconciled after that
        token and missing from `bills` are kept, after the fetched ones.
        Without it the replacement is total.
        """
        confirmed: dict[str, Bill] = {}
        for bill in bills:
            confirmed[bill.id] = bill
        fetched_ids = set(confirmed)

        if since is not None:
            kept = [
                bill for bill_id, bill in self._confirmed.items()
                if bill_id not in fetched_ids and self._confirmed_in.get(bill_id, -1) > since
            ]
            for bill in kept:
                confirmed[bill.id] = bill
            if kept:
                self._logger.info("confirmed_bills_kept_over_stale_fetch", count=len(kept))

        # Only bills the server has not reported yet need tracking
        self._confirmed_in = {
            bill_id: generation
            for bill_id, generation in self._confirmed_in.items()
            if bill_id in confirmed and bill_id not in fetched_ids
        }
        self._confirmed = confirmed
        self._audit.log(AuditEventBuilder.confirmed_replaced(len(confirmed)))

    # ------------------------------------------------------------------
    # Pending bills
    # ------------------------------------------------------------------

    def add_pending(self, draft: BillDraft) -> PendingBill:
        """
        Record a bill entered locally.

        The draft is trusted; validation belongs to the caller
        (see BillDraftValidator).

        Raises:
            PersistenceError: If the pending list could not be saved. The
                bill is still kept in memory and returned on the error's
                `entity` attribute; flush() retries the write.
        """
        pending = PendingBill(
            local_id=self._ids.next_id(),
            **draft.model_dump(),
        )
        self._pending.append(pending)
        self._audit.log(AuditEventBuilder.pending_added(
            pending.local_id, pending.type.value, str(pending.amount),
        ))
        self._persist_pending(entity=pending)
        return pending

    def reconcile(self, local_id: str, server_bill: Bill) -> bool:
        """
        Swap a pending bill for its server-confirmed counterpart.

        The server bill is inserted into the confirmed set right away so
        the merged view never drops the entry in between.

        Returns:
            True if a pending entry was removed, False if the ID was
            unknown (already reconciled or discarded) - a logged no-op.

        Raises:
            PersistenceError: If the shortened pending list could not be
                saved. Memory is already updated; flush() retries.
        """
        index = self._pending_index(local_id)
        if index is None:
            self._audit.log(AuditEventBuilder.reconcile_ignored(local_id, server_bill.id))
            return False

        del self._pending[index]
        self._generation += 1
        self._confirmed[server_bill.id] = server_bill
        self._confirmed_in[server_bill.id] = self._generation
        self._audit.log(AuditEventBuilder.pending_reconciled(local_id, server_bill.id))
        self._persist_pending(entity=server_bill)
        return True

    def discard_pending(self, local_id: str) -> PendingBill:
        """
        Drop a pending bill without reconciliation (user cancelled it).

        Raises:
            NotFoundError: If no pending bill has this ID
            PersistenceError: If the shortened pending list could not be
                saved. Memory is already updated; flush() retries.
        """
        index = self._pending_index(local_id)
        if index is None:
            raise NotFoundError(f"Pending bill not found: {local_id}")

        discarded = self._pending.pop(index)
        self._audit.log(AuditEventBuilder.pending_discarded(local_id))
        self._persist_pending(entity=discarded)
        return discarded

    def flush(self) -> bool:
        """
        Retry a failed pending write.

        Returns True if there was something to write and it succeeded,
        False if the store was already clean.

        Raises:
            PersistenceError: If the write fails again
        """
        if not self._dirty:
            return False
        self._persist_pending()
        self._audit.log(AuditEventBuilder.persistence_recovered(StorageKeys.LOCAL_BILLS.value))
        return True

    # ------------------------------------------------------------------
    # Read model
    # ------------------------------------------------------------------

    def merged_view(self) -> list[LedgerEntry]:
        """
        Confirmed and pending bills, newest bill date first.

        Sorting is by calendar day only and is stable: within one day,
        confirmed bills keep fetch order and come before pending bills,
        which keep insertion order. Surfacing today's pending bills first
        is a UI policy, not something the store does.
        """
        entries: list[LedgerEntry] = [*self._confirmed.values(), *self._pending]
        return sorted(entries, key=lambda entry: entry.bill_date, reverse=True)

    def bills_on(self, day: date) -> list[LedgerEntry]:
        return [entry for entry in self.merged_view() if entry.bill_date == day]

    def today_income(self, today: Optional[date] = None) -> Decimal:
        return self._day_total(today or date.today(), BillType.INCOME)

    def today_expense(self, today: Optional[date] = None) -> Decimal:
        return self._day_total(today or date.today(), BillType.EXPENSE)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _day_total(self, day: date, bill_type: BillType) -> Decimal:
        return sum(
            (entry.amount for entry in self.bills_on(day) if entry.type == bill_type),
            Decimal("0"),
        )

    def _pending_index(self, local_id: str) -> Optional[int]:
        for index, bill in enumerate(self._pending):
            if bill.local_id == local_id:
                return index
        return None

    def _persist_pending(self, entity=None) -> None:
        key = StorageKeys.LOCAL_BILLS.value
        try:
            save_items(self._storage, key, self._pending, PendingBill)
        except PersistenceError as e:
            self._dirty = True
            self._audit.log(AuditEventBuilder.persistence_failed(key, str(e)))
            raise PersistenceError(f"Could not save pending bills locally: {e}", entity=entity) from e
        self._dirty = False
