"""Local ledger package."""

from money_notes.ledger.selection import LedgerSelection
from money_notes.ledger.store import LOCAL_ID_PREFIX, LocalLedgerStore

__all__ = ["LOCAL_ID_PREFIX", "LedgerSelection", "LocalLedgerStore"]
