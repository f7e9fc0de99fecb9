"""Shared test fixtures for the trading desk."""

from decimal import Decimal

import pytest

from desk.markets import MarketRef, MarketReference
from desk.models import MarketKind
from desk.orders.models import TradeIntent


@pytest.fixture
def markets() -> MarketReference:
    """Small reference table: two perps, three spots (one without a symbol)."""
    return MarketReference([
        MarketRef(0, MarketKind.PERP, 9, "SOL-PERP"),
        MarketRef(1, MarketKind.PERP, 9, "BTC-PERP"),
        MarketRef(0, MarketKind.SPOT, 6, "USDC"),
        MarketRef(1, MarketKind.SPOT, 9, "SOL"),
        MarketRef(7, MarketKind.SPOT, 8, None),
    ])


@pytest.fixture
def sol_perp(markets: MarketReference) -> MarketRef:
    return markets.require(MarketKind.PERP, 0)


@pytest.fixture
def usdc_spot(markets: MarketReference) -> MarketRef:
    return markets.require(MarketKind.SPOT, 0)


def _make_intent(**overrides) -> TradeIntent:
    fields = {
        "market_index": 0,
        "side": "LONG",
        "size": Decimal("1"),
        "order_type": "MARKET",
    }
    fields.update(overrides)
    return TradeIntent(**fields)


@pytest.fixture
def make_intent():
    """Factory for intents: LONG 1 SOL-PERP market order unless overridden."""
    return _make_intent


@pytest.fixture
def ledger_snapshot() -> dict:
    """Snapshot with one subaccount holding balances, positions and orders."""
    return {
        "accounts": {
            "UserAcct111": {
                "sub_account_id": 0,
                "authority": "Wallet111",
                "spot_positions": [
                    {
                        "market_index": 0,
                        "scaled_balance": 1_500_000_000,
                        "balance_type": {"deposit": {}},
                        "token_amount": 1_500_000,
                        "oracle_price": 1_000_000,
                    },
                    {
                        "market_index": 1,
                        "scaled_balance": 2_000_000_000,
                        "balance_type": {"borrow": {}},
                        "token_amount": -2_000_000_000,
                        "oracle_price": 150_000_000,
                    },
                ],
                "perp_positions": [
                    {
                        "market_index": 0,
                        "base_asset_amount": 2_000_000_000,
                        "quote_asset_amount": -300_000_000,
                        "quote_entry_amount": -300_000_000,
                        "oracle_price": 160_000_000,
                    },
                ],
                "open_orders": [
                    {
                        "order_id": 17,
                        "market_index": 0,
                        "market_type": {"perp": {}},
                        "order_type": {"limit": {}},
                        "direction": {"short": {}},
                        "price": 175_000_000,
                        "base_asset_amount": 2_000_000_000,
                    },
                ],
            },
        },
        "subaccounts": {
            "Wallet111": [
                {"sub_account_id": 1, "authority": "Wallet111", "delegate": "Deleg1", "name": "Hedge"},
                {"sub_account_id": 0, "authority": "Wallet111", "delegate": "Deleg0"},
            ],
        },
    }
