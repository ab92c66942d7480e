"""
Abstract Bill Gateway (network collaborator)

DESIGN DECISION: The ledger core never talks HTTP. It depends on this
interface, which the app implements on top of its API client. This
allows us to:
1. Keep transport, auth and token refresh out of the core
2. Use an in-memory server for tests and offline demos
3. Make the idempotency contract explicit

CONTRACT: submit_bill must be idempotent by `idempotency_key` (the
temporary local ID). Submitting the same key twice returns the bill
created the first time instead of creating a duplicate.
"""

from abc import ABC, abstractmethod

from money_notes.models.bill import Bill, BillDraft, BillPage, BillQuery


class GatewayError(Exception):
    """
    The network collaborator could not complete a call.

    `transient` errors (timeouts, 5xx, offline) are worth retrying;
    permanent ones (4xx validation) are not.
    """

    def __init__(self, message: str, transient: bool = True):
        self.transient = transient
        super().__init__(message)


class BillGateway(ABC):
    """Server operations the ledger core relies on."""

    @abstractmethod
    async def submit_bill(
        self,
        ledger_id: str,
        draft: BillDraft,
        idempotency_key: str,
    ) -> Bill:
        """
        Create a bill on the server.

        Args:
            ledger_id: Ledger the bill belongs to
            draft: The bill as entered by the user
            idempotency_key: Temporary local ID of the pending bill

        Returns:
            The confirmed bill with its server-assigned ID

        Raises:
            GatewayError: If the bill could not be created
        """
        pass

    @abstractmethod
    async def fetch_bills(self, query: BillQuery) -> BillPage:
        """
        Fetch one page of confirmed bills, newest bill date first.

        Raises:
            GatewayError: If the page could not be fetched
        """
        pass
