"""Raw ledger state and projected, display-ready account records.

Raw types carry on-chain integers exactly as the ledger reports them. Tagged
fields (balance type, market type, order type, direction) are left undecoded
here; desk.account.variants decodes them during projection.

Projected records are Decimal-valued and frozen.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from desk.models import MarketKind, OrderStatus, OrderType, PositionDirection


@dataclass(frozen=True)
class RawSpotPosition:
    """Spot balance as stored on the subaccount."""

    market_index: int
    scaled_balance: int
    balance_type: Any
    token_amount: int
    oracle_price: int  # market's last oracle price, 1e6

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RawSpotPosition:
        return cls(
            market_index=int(data["market_index"]),
            scaled_balance=int(data["scaled_balance"]),
            balance_type=data["balance_type"],
            token_amount=int(data.get("token_amount", 0)),
            oracle_price=int(data.get("oracle_price", 0)),
        )


@dataclass(frozen=True)
class RawPerpPosition:
    """Perp position as stored on the subaccount."""

    market_index: int
    base_asset_amount: int  # signed, 1e9
    quote_asset_amount: int  # signed, 1e6
    quote_entry_amount: int | None
    oracle_price: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RawPerpPosition:
        entry = data.get("quote_entry_amount")
        return cls(
            market_index=int(data["market_index"]),
            base_asset_amount=int(data["base_asset_amount"]),
            quote_asset_amount=int(data.get("quote_asset_amount", 0)),
            quote_entry_amount=int(entry) if entry is not None else None,
            oracle_price=int(data.get("oracle_price", 0)),
        )


@dataclass(frozen=True)
class RawOrder:
    """Open order as stored on the subaccount."""

    order_id: int
    market_index: int
    market_type: Any
    order_type: Any
    direction: Any
    price: int
    base_asset_amount: int

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RawOrder:
        return cls(
            order_id=int(data["order_id"]),
            market_index=int(data["market_index"]),
            market_type=data["market_type"],
            order_type=data["order_type"],
            direction=data["direction"],
            price=int(data.get("price", 0)),
            base_asset_amount=int(data.get("base_asset_amount", 0)),
        )


@dataclass(frozen=True)
class RawAccountState:
    """Snapshot of one subaccount, fetched fresh for each projection."""

    sub_account_id: int
    authority: str
    spot_positions: tuple[RawSpotPosition, ...] = ()
    perp_positions: tuple[RawPerpPosition, ...] = ()
    open_orders: tuple[RawOrder, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RawAccountState:
        return cls(
            sub_account_id=int(data.get("sub_account_id", 0)),
            authority=str(data.get("authority", "")),
            spot_positions=tuple(
                RawSpotPosition.from_dict(p) for p in data.get("spot_positions", ())
            ),
            perp_positions=tuple(
                RawPerpPosition.from_dict(p) for p in data.get("perp_positions", ())
            ),
            open_orders=tuple(RawOrder.from_dict(o) for o in data.get("open_orders", ())),
        )


@dataclass(frozen=True)
class RawSubaccount:
    """Subaccount listing entry for an authority."""

    sub_account_id: int
    authority: str
    delegate: str = ""
    name: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RawSubaccount:
        return cls(
            sub_account_id=int(data["sub_account_id"]),
            authority=str(data.get("authority", "")),
            delegate=str(data.get("delegate", "")),
            name=str(data.get("name") or ""),
        )


@dataclass(frozen=True)
class BalanceRecord:
    """Spot balance. Amount is negative for borrows."""

    market_index: int
    symbol: str
    amount: Decimal
    usd_value: Decimal
    is_deposit: bool


@dataclass(frozen=True)
class PositionRecord:
    """Perp position with a simplified mark-to-market PnL estimate.

    ``pnl`` ignores funding accrual; it is not realized PnL.
    """

    market_index: int
    symbol: str
    base_asset_amount: Decimal  # signed, negative for shorts
    quote_asset_amount: Decimal
    entry_price: Decimal
    mark_price: Decimal
    pnl: Decimal
    is_long: bool
    side: PositionDirection


@dataclass(frozen=True)
class OrderRecord:
    """Open order in human units."""

    order_id: int
    market_index: int
    market_type: MarketKind
    symbol: str
    direction: PositionDirection
    order_type: OrderType
    price: Decimal
    size: Decimal
    status: OrderStatus = OrderStatus.OPEN


@dataclass(frozen=True)
class SubaccountRecord:
    sub_account_id: int
    name: str
    authority: str
    delegate: str


@dataclass(frozen=True)
class AccountView:
    """Everything the dashboard shows for one subaccount."""

    sub_account_id: int
    authority: str
    balances: list[BalanceRecord] = field(default_factory=list)
    positions: list[PositionRecord] = field(default_factory=list)
    orders: list[OrderRecord] = field(default_factory=list)
