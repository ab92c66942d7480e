"""Tests for the LocalLedgerStore."""

from datetime import date
from decimal import Decimal

import pytest

from money_notes.errors import CorruptBlobError, NotFoundError, PersistenceError
from money_notes.ids import IdGenerator
from money_notes.ledger import LocalLedgerStore
from money_notes.models.audit import AuditEventType
from money_notes.models.bill import Bill, BillType, PendingBill
from money_notes.storage import StorageKeys
from tests.factories import make_bill, make_draft


def _ids(entries) -> list[str]:
    return [entry.entry_id for entry in entries]


class TestAddPending:

    def test_add_then_reconcile(self, store):
        """Test the full offline entry -> server confirmation cycle."""
        pending = store.add_pending(make_draft(amount="42.50", bill_date=date(2024, 3, 1)))
        assert pending.synced is False
        assert pending.local_id.startswith("local_")
        assert _ids(store.merged_view()) == [pending.local_id]

        server_bill = Bill(id="srv_9", **pending.to_draft().model_dump())
        assert store.reconcile(pending.local_id, server_bill) is True

        view = store.merged_view()
        assert _ids(view) == ["srv_9"]
        assert view[0].amount == Decimal("42.50")
        assert store.pending == []

    def test_temporary_ids_are_unique(self, store):
        ids = {store.add_pending(make_draft()).local_id for _ in range(50)}
        assert len(ids) == 50

    def test_add_persists_pending_list(self, store, storage):
        store.add_pending(make_draft())
        assert storage.read_string(StorageKeys.LOCAL_BILLS.value) is not None

    def test_failed_write_keeps_bill_and_marks_dirty(self, store, storage, audit_sink):
        """Test optimistic add: the bill stays visible when saving fails."""
        storage.fail_writes = True
        with pytest.raises(PersistenceError) as exc_info:
            store.add_pending(make_draft())

        kept = exc_info.value.entity
        assert isinstance(kept, PendingBill)
        assert _ids(store.merged_view()) == [kept.local_id]
        assert store.needs_flush is True
        assert audit_sink.of_type(AuditEventType.PERSISTENCE_FAILED)

    def test_flush_retries_failed_write(self, store, storage):
        storage.fail_writes = True
        with pytest.raises(PersistenceError):
            store.add_pending(make_draft())

        storage.fail_writes = False
        assert store.flush() is True
        assert store.needs_flush is False
        assert store.flush() is False

        reloaded = LocalLedgerStore(storage)
        assert len(reloaded.load()) == 1

    def test_flush_failing_again_stays_dirty(self, store, storage):
        storage.fail_writes = True
        with pytest.raises(PersistenceError):
            store.add_pending(make_draft())
        with pytest.raises(PersistenceError):
            store.flush()
        assert store.needs_flush is True


class TestReconcile:

    def test_unknown_id_is_a_noop(self, store, audit_sink):
        confirmed = make_bill("srv_1")
        assert store.reconcile("local_unknown", confirmed) is False
        assert store.merged_view() == []
        assert audit_sink.of_type(AuditEventType.RECONCILE_IGNORED)

    def test_duplicate_confirmation_is_tolerated(self, store):
        pending = store.add_pending(make_draft())
        server_bill = Bill(id="srv_1", **pending.to_draft().model_dump())

        assert store.reconcile(pending.local_id, server_bill) is True
        assert store.reconcile(pending.local_id, server_bill) is False
        assert _ids(store.merged_view()) == ["srv_1"]

    def test_discarded_bill_is_not_resurrected(self, store):
        pending = store.add_pending(make_draft())
        store.discard_pending(pending.local_id)

        server_bill = Bill(id="srv_1", **pending.to_draft().model_dump())
        assert store.reconcile(pending.local_id, server_bill) is False
        assert store.merged_view() == []

    def test_reconcile_removes_from_storage(self, store, storage):
        pending = store.add_pending(make_draft())
        store.reconcile(pending.local_id, make_bill("srv_1"))
        assert LocalLedgerStore(storage).load() == []

    def test_reconcile_keeps_other_pending(self, store):
        first = store.add_pending(make_draft(amount="1.00"))
        second = store.add_pending(make_draft(amount="2.00"))
        store.reconcile(first.local_id, make_bill("srv_1", amount="1.00"))
        assert [p.local_id for p in store.pending] == [second.local_id]

    def test_refresh_after_reconcile_has_no_duplicate(self, store):
        pending = store.add_pending(make_draft())
        server_bill = make_bill("srv_1")
        store.reconcile(pending.local_id, server_bill)
        store.set_confirmed([server_bill])
        assert _ids(store.merged_view()) == ["srv_1"]

    def test_fetch_older_than_reconcile_keeps_bill(self, store):
        """Test a fetch started before a reconcile cannot drop that bill."""
        store.set_confirmed([make_bill("srv_old")])
        token = store.confirmation_token()
        pending = store.add_pending(make_draft())
        store.reconcile(pending.local_id, make_bill("srv_new"))

        store.set_confirmed([make_bill("srv_old")], since=token)

        assert _ids(store.merged_view()) == ["srv_old", "srv_new"]

    def test_fetch_newer_than_reconcile_replaces_fully(self, store):
        pending = store.add_pending(make_draft())
        store.reconcile(pending.local_id, make_bill("srv_1"))
        token = store.confirmation_token()

        store.set_confirmed([make_bill("srv_2")], since=token)

        assert _ids(store.merged_view()) == ["srv_2"]

    def test_reported_bill_is_no_longer_protected(self, store):
        token = store.confirmation_token()
        pending = store.add_pending(make_draft())
        store.reconcile(pending.local_id, make_bill("srv_1"))
        store.set_confirmed([make_bill("srv_1")], since=token)

        store.set_confirmed([], since=token)

        assert store.merged_view() == []


class TestDiscard:

    def test_discard_removes_entry(self, store, audit_sink):
        pending = store.add_pending(make_draft())
        assert store.discard_pending(pending.local_id) == pending
        assert store.pending == []
        assert audit_sink.of_type(AuditEventType.PENDING_DISCARDED)

    def test_discard_unknown_raises(self, store):
        with pytest.raises(NotFoundError):
            store.discard_pending("local_missing")


class TestMergedView:

    def test_sorted_by_date_descending(self, store):
        store.set_confirmed([
            make_bill("srv_old", bill_date=date(2024, 1, 1)),
            make_bill("srv_new", bill_date=date(2024, 3, 5)),
        ])
        pending = store.add_pending(make_draft(bill_date=date(2024, 2, 1)))
        assert _ids(store.merged_view()) == ["srv_new", pending.local_id, "srv_old"]

    def test_same_day_keeps_source_order(self, store):
        """Test stability: confirmed in fetch order, then pending in insertion order."""
        day = date(2024, 3, 1)
        store.set_confirmed([make_bill("srv_b", bill_date=day), make_bill("srv_a", bill_date=day)])
        first = store.add_pending(make_draft(bill_date=day))
        second = store.add_pending(make_draft(bill_date=day))
        assert _ids(store.merged_view()) == ["srv_b", "srv_a", first.local_id, second.local_id]

    def test_idempotent(self, store):
        store.set_confirmed([make_bill("srv_1"), make_bill("srv_2", bill_date=date(2024, 1, 1))])
        store.add_pending(make_draft(bill_date=date(2024, 2, 1)))
        assert store.merged_view() == store.merged_view()

    def test_set_confirmed_leaves_pending(self, store):
        pending = store.add_pending(make_draft())
        store.set_confirmed([make_bill("srv_1")])
        store.set_confirmed([])
        assert _ids(store.merged_view()) == [pending.local_id]

    def test_set_confirmed_deduplicates_server_ids(self, store):
        store.set_confirmed([make_bill("srv_1", amount="1.00"), make_bill("srv_1", amount="2.00")])
        (only,) = store.merged_view()
        assert only.amount == Decimal("2.00")

    def test_today_totals(self, store):
        today = date(2024, 3, 1)
        store.set_confirmed([
            make_bill("srv_1", amount="100.00", bill_type=BillType.INCOME,
                      category_id="sys_10", bill_date=today),
            make_bill("srv_2", amount="7.00", bill_date=date(2024, 2, 29)),
        ])
        store.add_pending(make_draft(amount="12.30", bill_date=today))
        store.add_pending(make_draft(amount="0.70", bill_date=today))

        assert store.today_income(today) == Decimal("100.00")
        assert store.today_expense(today) == Decimal("13.00")
        assert len(store.bills_on(today)) == 3


class TestLoad:

    def test_load_restores_pending_in_order(self, store, storage):
        first = store.add_pending(make_draft(amount="1.00"))
        second = store.add_pending(make_draft(amount="2.00"))

        reloaded = LocalLedgerStore(storage)
        assert [p.local_id for p in reloaded.load()] == [first.local_id, second.local_id]

    def test_loaded_ids_are_never_reissued(self, storage):
        frozen_clock = lambda: 1_700_000_000.0
        store = LocalLedgerStore(storage, id_generator=IdGenerator("local_", clock=frozen_clock))
        existing = store.add_pending(make_draft())

        reloaded = LocalLedgerStore(storage, id_generator=IdGenerator("local_", clock=frozen_clock))
        reloaded.load()
        fresh = reloaded.add_pending(make_draft())
        assert fresh.local_id != existing.local_id

    def test_load_rejects_corrupt_blob(self, storage):
        storage.write_string(StorageKeys.LOCAL_BILLS.value, "[{]")
        with pytest.raises(CorruptBlobError):
            LocalLedgerStore(storage).load()


class TestIdGenerator:

    def test_frozen_clock_still_increases(self):
        generator = IdGenerator("local_", clock=lambda: 1.0)
        stamps = [int(generator.next_id().split("_")[1]) for _ in range(5)]
        assert stamps == sorted(set(stamps))
        assert len(stamps) == 5

    def test_clock_going_backwards(self):
        times = iter([10.0, 5.0])
        generator = IdGenerator("local_", clock=lambda: next(times))
        first = int(generator.next_id().split("_")[1])
        second = int(generator.next_id().split("_")[1])
        assert second > first
