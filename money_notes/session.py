"""
Ledger Session

Composition root for the ledger core. One LedgerSession is created per
application session and handed to the UI layer; there are no
process-wide singletons behind it.

The session wires:
- CategoryRegistry (labels and icons)
- LocalLedgerStore (merged view, reconciliation)
- StatisticsAggregator (summary, daily series, trend)
- BillDraftValidator (checks drafts before they reach the store)
- LedgerSelection (current ledger ID)
- SyncService, once a gateway and ledger are available
"""

from datetime import date
from typing import Any, Mapping, Optional, Union

import structlog

from money_notes.audit import AuditLogger, AuditSink
from money_notes.categories import CategoryRegistry
from money_notes.config import LedgerSettings, get_settings
from money_notes.formatting import current_month_range
from money_notes.ledger import LedgerSelection, LocalLedgerStore
from money_notes.models.bill import BillDraft, BillType, PendingBill
from money_notes.models.statistics import FullStatistics, GroupBy
from money_notes.statistics import StatisticsAggregator, select_bills
from money_notes.storage import JsonFileKeyValueStore, KeyValueStore
from money_notes.sync import BillGateway, SyncService
from money_notes.validation import BillDraftValidator


class LedgerSession:
    """Owned state for one application session."""

    def __init__(
        self,
        storage: KeyValueStore,
        gateway: Optional[BillGateway] = None,
        audit_sink: Optional[AuditSink] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self.settings = settings or get_settings()
        self.storage = storage
        self.audit = AuditLogger(audit_sink)
        self.registry = CategoryRegistry(storage, self.audit, settings=self.settings)
        self.store = LocalLedgerStore(storage, self.audit)
        self.statistics = StatisticsAggregator(self.registry, settings=self.settings)
        self.validator = BillDraftValidator(self.registry, settings=self.settings)
        self.selection = LedgerSelection(storage)
        self._gateway = gateway
        self._sync: Optional[SyncService] = None
        self._logger = structlog.get_logger(__name__)

    def start(self) -> None:
        """Restore everything the previous session left in storage."""
        self.registry.load()
        self.store.load()
        self.selection.restore()
        self._logger.info(
            "ledger_session_started",
            pending=len(self.store.pending),
            custom_categories=len(self.registry.custom_categories),
            ledger_id=self.selection.current_ledger_id,
        )

    def enter_bill(
        self,
        draft: Union[BillDraft, Mapping[str, Any]],
        today: Optional[date] = None,
    ) -> PendingBill:
        """
        Validate a draft (or raw form data) and record it as pending.

        Raises:
            ValidationError: If the draft is not acceptable
            PersistenceError: If it could not be saved locally (the bill
                is still shown; see LocalLedgerStore.add_pending)
        """
        if not isinstance(draft, BillDraft):
            draft = self.validator.parse_draft(draft)
        self.validator.ensure_valid(draft, today=today)
        return self.store.add_pending(draft)

    @property
    def sync(self) -> SyncService:
        """
        Sync service for the current ledger.

        Raises:
            RuntimeError: If no gateway was given or no ledger is selected
        """
        ledger_id = self.selection.current_ledger_id
        if self._gateway is None or ledger_id is None:
            raise RuntimeError("Sync needs a gateway and a selected ledger")
        if self._sync is None or self._sync.ledger_id != ledger_id:
            self._sync = SyncService(
                self.store,
                self._gateway,
                ledger_id,
                audit_logger=self.audit,
                settings=self.settings,
            )
        return self._sync

    def statistics_for(
        self,
        start: Optional[date] = None,
        end: Optional[date] = None,
        group_by: Union[GroupBy, str] = GroupBy.DAY,
        direction: Optional[BillType] = None,
    ) -> FullStatistics:
        """
        Statistics over the current merged view for a date range.

        Defaults to the current calendar month.
        """
        if start is None or end is None:
            month_start, month_end = current_month_range()
            start = start or month_start
            end = end or month_end
        bills = select_bills(self.store.merged_view(), direction=direction)
        return self.statistics.full_statistics(bills, start, end, group_by)


def create_session(
    gateway: Optional[BillGateway] = None,
    settings: Optional[LedgerSettings] = None,
    audit_sink: Optional[AuditSink] = None,
) -> LedgerSession:
    """
    Factory function to create a started session backed by the
    configured storage file.
    """
    settings = settings or get_settings()
    session = LedgerSession(
        JsonFileKeyValueStore(settings.storage_path),
        gateway=gateway,
        audit_sink=audit_sink,
        settings=settings,
    )
    session.start()
    return session
