"""Network collaborator contract and sync service."""

from money_notes.sync.gateway import BillGateway, GatewayError
from money_notes.sync.memory import InMemoryBillGateway
from money_notes.sync.service import SyncReport, SyncService

__all__ = [
    "BillGateway",
    "GatewayError",
    "InMemoryBillGateway",
    "SyncReport",
    "SyncService",
]
