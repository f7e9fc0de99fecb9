"""Tests for the account state projector.

Verifies:
- Balance amounts scale by each spot market's own decimals; borrows are negative
- Zero balances and zero positions never appear
- Perp PnL estimate for longs and shorts
- Open order decoding via tags and supplied ordinal tables
- Per-item omission when a market cannot be resolved
- Determinism across repeated calls
"""

from decimal import Decimal

import pytest

from desk.account.models import (
    RawAccountState,
    RawOrder,
    RawPerpPosition,
    RawSpotPosition,
    RawSubaccount,
)
from desk.account.projector import project_account, project_subaccounts
from desk.account.variants import LedgerCodes
from desk.markets import MarketReference
from desk.models import BalanceType, MarketKind, OrderStatus, OrderType, PositionDirection


def _spot(market_index: int, token_amount: int, balance_type="deposit", oracle=1_000_000, scaled=1):
    return RawSpotPosition(
        market_index=market_index,
        scaled_balance=scaled,
        balance_type=balance_type,
        token_amount=token_amount,
        oracle_price=oracle,
    )


def _perp(market_index: int, base: int, quote: int, entry: int | None = None, oracle=150_000_000):
    return RawPerpPosition(
        market_index=market_index,
        base_asset_amount=base,
        quote_asset_amount=quote,
        quote_entry_amount=entry,
        oracle_price=oracle,
    )


def _order(order_id: int, market_index=0, market_type="perp", order_type="limit",
           direction="long", price=150_000_000, size=1_500_000_000) -> RawOrder:
    return RawOrder(
        order_id=order_id,
        market_index=market_index,
        market_type=market_type,
        order_type=order_type,
        direction=direction,
        price=price,
        base_asset_amount=size,
    )


def _state(spot=(), perp=(), orders=()) -> RawAccountState:
    return RawAccountState(
        sub_account_id=3,
        authority="Wallet111",
        spot_positions=tuple(spot),
        perp_positions=tuple(perp),
        open_orders=tuple(orders),
    )


class TestBalances:

    def test_deposit_uses_market_decimals(self, markets: MarketReference) -> None:
        view = project_account(_state(spot=[_spot(0, 1_500_000)]), markets)

        (balance,) = view.balances
        assert balance.symbol == "USDC"
        assert balance.amount == Decimal("1.5")
        assert balance.usd_value == Decimal("1.5")
        assert balance.is_deposit is True

    def test_borrow_is_negative(self, markets: MarketReference) -> None:
        raw = _spot(1, -2_000_000_000, balance_type={"borrow": {}}, oracle=150_000_000)
        (balance,) = project_account(_state(spot=[raw]), markets).balances

        assert balance.symbol == "SOL"
        assert balance.amount == Decimal("-2")
        assert balance.usd_value == Decimal("300")
        assert balance.is_deposit is False

    def test_zero_scaled_balance_skipped(self, markets: MarketReference) -> None:
        raw = _spot(0, 5_000_000, scaled=0)
        assert project_account(_state(spot=[raw]), markets).balances == []

    def test_symbol_falls_back_to_index(self, markets: MarketReference) -> None:
        (balance,) = project_account(_state(spot=[_spot(7, 100_000_000)]), markets).balances

        assert balance.symbol == "SPOT-7"
        assert balance.amount == Decimal("1")

    def test_unknown_market_dropped_others_kept(self, markets: MarketReference) -> None:
        view = project_account(
            _state(spot=[_spot(42, 1_000_000), _spot(0, 2_000_000)]), markets
        )

        assert [b.market_index for b in view.balances] == [0]
        assert view.balances[0].amount == Decimal("2")

    @pytest.mark.parametrize(
        ("tag", "is_deposit"),
        [
            ({"deposit": {}}, True),
            ("Borrow", False),
            (BalanceType.DEPOSIT, True),
            (0, True),
            (1, False),
        ],
    )
    def test_balance_type_tags(self, markets: MarketReference, tag, is_deposit: bool) -> None:
        (balance,) = project_account(
            _state(spot=[_spot(0, 1_000_000, balance_type=tag)]), markets
        ).balances
        assert balance.is_deposit is is_deposit

    def test_undecodable_balance_type_dropped(self, markets: MarketReference) -> None:
        view = project_account(
            _state(spot=[_spot(0, 1_000_000, balance_type="frozen")]), markets
        )
        assert view.balances == []


class TestPositions:

    def test_long_pnl(self, markets: MarketReference) -> None:
        raw = _perp(0, 2_000_000_000, -300_000_000, entry=-300_000_000, oracle=160_000_000)
        (position,) = project_account(_state(perp=[raw]), markets).positions

        assert position.symbol == "SOL-PERP"
        assert position.is_long is True
        assert position.side == PositionDirection.LONG
        assert position.base_asset_amount == Decimal("2")
        assert position.quote_asset_amount == Decimal("-300")
        assert position.entry_price == Decimal("-300")
        assert position.mark_price == Decimal("160")
        # 2 * 160 - 300
        assert position.pnl == Decimal("20")

    def test_short_pnl(self, markets: MarketReference) -> None:
        raw = _perp(1, -1_000_000_000, 155_000_000, oracle=150_000_000)
        (position,) = project_account(_state(perp=[raw]), markets).positions

        assert position.symbol == "BTC-PERP"
        assert position.is_long is False
        assert position.side == PositionDirection.SHORT
        assert position.base_asset_amount == Decimal("-1")
        # -(1 * 150) + 155
        assert position.pnl == Decimal("5")

    def test_missing_entry_amount_is_zero(self, markets: MarketReference) -> None:
        (position,) = project_account(
            _state(perp=[_perp(0, 1_000_000_000, -150_000_000, entry=None)]), markets
        ).positions
        assert position.entry_price == Decimal("0")

    def test_zero_base_skipped(self, markets: MarketReference) -> None:
        view = project_account(_state(perp=[_perp(0, 0, -5_000_000)]), markets)
        assert view.positions == []

    def test_unknown_market_dropped_others_correct(self, markets: MarketReference) -> None:
        view = project_account(
            _state(perp=[
                _perp(0, 1_000_000_000, -140_000_000, oracle=150_000_000),
                _perp(99, 1_000_000_000, -100_000_000),
                _perp(1, -500_000_000, 40_000_000, oracle=60_000_000),
            ]),
            markets,
        )

        assert [p.market_index for p in view.positions] == [0, 1]
        assert view.positions[0].pnl == Decimal("10")
        # -(0.5 * 60) + 40
        assert view.positions[1].pnl == Decimal("10")


class TestOrders:

    def test_perp_limit_order(self, markets: MarketReference) -> None:
        (order,) = project_account(
            _state(orders=[_order(5, market_type={"perp": {}}, order_type={"limit": {}},
                                  direction={"long": {}})]),
            markets,
        ).orders

        assert order.order_id == 5
        assert order.symbol == "SOL-PERP"
        assert order.market_type == MarketKind.PERP
        assert order.order_type == OrderType.LIMIT
        assert order.direction == PositionDirection.LONG
        assert order.price == Decimal("150")
        assert order.size == Decimal("1.5")
        assert order.status == OrderStatus.OPEN

    def test_spot_order_uses_spot_table_and_decimals(self, markets: MarketReference) -> None:
        (order,) = project_account(
            _state(orders=[_order(6, market_index=1, market_type="spot", size=500_000_000)]),
            markets,
        ).orders

        assert order.symbol == "SOL"
        assert order.market_type == MarketKind.SPOT
        assert order.size == Decimal("0.5")

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ({"market": {}}, OrderType.MARKET),
            ({"triggerMarket": {}}, OrderType.TRIGGER_MARKET),
            ("TRIGGER_LIMIT", OrderType.TRIGGER_LIMIT),
            ("oracle", OrderType.ORACLE),
            (3, OrderType.TRIGGER_LIMIT),
            ({"somethingNew": {}}, OrderType.UNKNOWN),
            (99, OrderType.UNKNOWN),
        ],
    )
    def test_order_type_by_tag(self, markets: MarketReference, tag, expected: OrderType) -> None:
        (order,) = project_account(_state(orders=[_order(1, order_type=tag)]), markets).orders
        assert order.order_type == expected

    def test_integer_codes_follow_supplied_table(self, markets: MarketReference) -> None:
        codes = LedgerCodes(direction={0: "short", 1: "long"})
        raw = _state(orders=[_order(1, direction=0, market_type=1)])

        (default_order,) = project_account(raw, markets).orders
        (custom_order,) = project_account(raw, markets, codes).orders

        assert default_order.direction == PositionDirection.LONG
        assert custom_order.direction == PositionDirection.SHORT

    def test_unresolvable_orders_dropped(self, markets: MarketReference) -> None:
        view = project_account(
            _state(orders=[
                _order(1, market_index=42),
                _order(2, direction="sideways"),
                _order(3, market_type={"spot": {}, "perp": {}}),
                _order(4),
            ]),
            markets,
        )
        assert [o.order_id for o in view.orders] == [4]


class TestAccountView:

    def test_passes_through_account_identity(self, markets: MarketReference) -> None:
        view = project_account(_state(), markets)

        assert view.sub_account_id == 3
        assert view.authority == "Wallet111"
        assert view.balances == view.positions == view.orders == []

    def test_deterministic(self, markets: MarketReference) -> None:
        raw = _state(
            spot=[_spot(0, 1_234_567), _spot(1, -10, balance_type="borrow")],
            perp=[_perp(0, 3_000_000_000, -420_000_000, entry=-420_000_000)],
            orders=[_order(1), _order(2, order_type="triggerMarket")],
        )
        assert project_account(raw, markets) == project_account(raw, markets)

    def test_from_dict_snapshot(self, markets: MarketReference, ledger_snapshot: dict) -> None:
        raw = RawAccountState.from_dict(ledger_snapshot["accounts"]["UserAcct111"])
        view = project_account(raw, markets)

        assert [b.amount for b in view.balances] == [Decimal("1.5"), Decimal("-2")]
        assert view.positions[0].pnl == Decimal("20")
        assert view.orders[0].direction == PositionDirection.SHORT


def test_project_subaccounts_sorted_with_default_names() -> None:
    records = project_subaccounts([
        RawSubaccount(sub_account_id=2, authority="W", delegate="D2", name="Scalps"),
        RawSubaccount(sub_account_id=0, authority="W", delegate="D0"),
    ])

    assert [r.sub_account_id for r in records] == [0, 2]
    assert records[0].name == "Subaccount 0"
    assert records[1].name == "Scalps"
