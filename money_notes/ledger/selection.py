"""Which ledger the session is looking at, remembered across restarts."""

from typing import Optional

import structlog

from money_notes.storage import KeyValueStore, StorageKeys


class LedgerSelection:
    """
    Persists the current ledger ID.

    Unlike the pending-bill list, losing this value only costs the user a
    tap, so set() writes through and lets PersistenceError propagate
    without any retry bookkeeping.
    """

    def __init__(self, storage: KeyValueStore):
        self._storage = storage
        self._current: Optional[str] = None
        self._logger = structlog.get_logger(__name__)

    @property
    def current_ledger_id(self) -> Optional[str]:
        return self._current

    def restore(self) -> Optional[str]:
        saved = self._storage.read_string(StorageKeys.CURRENT_LEDGER_ID.value)
        self._current = saved or None
        return self._current

    def set(self, ledger_id: str) -> None:
        if not ledger_id:
            raise ValueError("Ledger ID must not be empty")
        self._storage.write_string(StorageKeys.CURRENT_LEDGER_ID.value, ledger_id)
        self._current = ledger_id
        self._logger.info("current_ledger_changed", ledger_id=ledger_id)

    def choose_default(self, available_ids: list[str]) -> Optional[str]:
        """
        Make sure the selection points at an existing ledger.

        Keeps the current ID when it is still available, otherwise falls
        back to the first available ledger.
        """
        if self._current in available_ids:
            return self._current
        if not available_ids:
            return None
        self.set(available_ids[0])
        return self._current
