"""Account state projection: raw subaccount snapshots to display records."""

from desk.account.models import (
    AccountView,
    BalanceRecord,
    OrderRecord,
    PositionRecord,
    RawAccountState,
    RawOrder,
    RawPerpPosition,
    RawSpotPosition,
    RawSubaccount,
    SubaccountRecord,
)
from desk.account.projector import project_account, project_subaccounts
from desk.account.variants import DEFAULT_LEDGER_CODES, LedgerCodes

__all__ = [
    "AccountView",
    "BalanceRecord",
    "DEFAULT_LEDGER_CODES",
    "LedgerCodes",
    "OrderRecord",
    "PositionRecord",
    "RawAccountState",
    "RawOrder",
    "RawPerpPosition",
    "RawSpotPosition",
    "RawSubaccount",
    "SubaccountRecord",
    "project_account",
    "project_subaccounts",
]
