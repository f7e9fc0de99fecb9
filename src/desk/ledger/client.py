"""Abstract ledger client interface.

Defines the contract between the desk and the chain: typed account reads,
transaction assembly from order/transfer specs, and broadcast. The order
builder and account projector never see transaction bytes, blockhashes or
signatures; everything chain-specific stays behind this interface.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

from desk.account.models import RawAccountState, RawSubaccount
from desk.account.variants import DEFAULT_LEDGER_CODES, LedgerCodes
from desk.ledger.types import BroadcastResult
from desk.orders.models import OrderSpec, TransferSpec


class LedgerClient(ABC):
    """Abstract base class for ledger (chain) clients."""

    @property
    def codes(self) -> LedgerCodes:
        """Ordinal tables for tags this client reports as integers."""
        return DEFAULT_LEDGER_CODES

    @abstractmethod
    async def connect(self) -> None:
        """Open connections and load whatever the client needs up front."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release connections."""
        ...

    @abstractmethod
    async def fetch_account_state(self, user_account: str) -> RawAccountState:
        """Fetch a fresh snapshot of one subaccount.

        Raises:
            AccountNotFound: If the account does not exist.
        """
        ...

    @abstractmethod
    async def list_subaccounts(self, authority: str) -> list[RawSubaccount]:
        """List all subaccounts owned by a wallet authority."""
        ...

    @abstractmethod
    async def assemble_order_transaction(
        self, authority: str, sub_account_id: int, specs: Sequence[OrderSpec]
    ) -> str:
        """Bundle order specs into one unsigned transaction.

        Returns:
            The serialized unsigned transaction, base64-encoded, for the
            wallet to sign.
        """
        ...

    @abstractmethod
    async def assemble_transfer_transaction(self, authority: str, spec: TransferSpec) -> str:
        """Build one unsigned deposit or withdraw transaction, base64-encoded."""
        ...

    @abstractmethod
    async def send_transaction(self, signed_transaction: str) -> BroadcastResult:
        """Broadcast a signed, base64-encoded transaction and await confirmation."""
        ...
