"""Custom exceptions for the trading desk.

Validation failures in order construction are returned as OrderError values;
the exceptions here cover lookups and the ledger boundary, plus a raising
wrapper for callers that prefer exceptions over returned errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from desk.models import MarketKind
    from desk.orders.models import OrderError


class DeskError(Exception):
    """Base exception for all desk errors."""


class MarketNotFound(DeskError):
    """Raised when a (kind, market index) pair is absent from the market reference."""

    def __init__(self, kind: MarketKind, market_index: int) -> None:
        super().__init__(f"{kind.value} market {market_index} not found")
        self.kind = kind
        self.market_index = market_index


class OrderRejected(DeskError):
    """Raised by require_order_specs when an intent fails validation."""

    def __init__(self, error: OrderError) -> None:
        super().__init__(f"{error.code.value}: {error.message}")
        self.error = error


class LedgerError(DeskError):
    """Raised when the ledger boundary cannot serve a request."""


class AccountNotFound(LedgerError):
    """Raised when a user account or authority has no on-chain state."""
