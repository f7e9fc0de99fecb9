"""Decoding of tagged enum values reported by the ledger.

The on-chain program encodes enums as tagged variants. Depending on the
decoder in front of it, a tag reaches us as:
  - a single-key mapping: {"triggerMarket": {}}
  - an Enum member or plain string: "TRIGGER_MARKET", "triggerMarket"
  - a bare integer ordinal

Names are compared case- and underscore-insensitively. Integer ordinals are
only meaningful through a LedgerCodes table supplied by the ledger client,
because the ordinal-to-variant mapping belongs to the program, not to us.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from desk.models import BalanceType, MarketKind, OrderType, PositionDirection


def _frozen(mapping: dict[int, str]) -> Mapping[int, str]:
    return MappingProxyType(mapping)


@dataclass(frozen=True)
class LedgerCodes:
    """Ordinal -> variant name tables for each tagged field."""

    balance_type: Mapping[int, str] = field(
        default_factory=lambda: _frozen({0: "deposit", 1: "borrow"})
    )
    market_type: Mapping[int, str] = field(
        default_factory=lambda: _frozen({0: "spot", 1: "perp"})
    )
    direction: Mapping[int, str] = field(
        default_factory=lambda: _frozen({0: "long", 1: "short"})
    )
    order_type: Mapping[int, str] = field(
        default_factory=lambda: _frozen(
            {0: "market", 1: "limit", 2: "triggerMarket", 3: "triggerLimit", 4: "oracle"}
        )
    )


DEFAULT_LEDGER_CODES = LedgerCodes()


def variant_name(value: Any, codes: Mapping[int, str] | None = None) -> str | None:
    """Return the normalized variant name of a tag, or None if undecodable."""
    if isinstance(value, Mapping):
        if len(value) != 1:
            return None
        (name,) = value.keys()
        return _normalize(name)
    if isinstance(value, Enum):
        return _normalize(value.name)
    if isinstance(value, str):
        return _normalize(value)
    if isinstance(value, int) and not isinstance(value, bool):
        if codes is None or value not in codes:
            return None
        return _normalize(codes[value])
    return None


def _normalize(name: Any) -> str | None:
    if not isinstance(name, str) or not name:
        return None
    return name.replace("_", "").replace("-", "").lower()


_BALANCE_TYPES = {"deposit": BalanceType.DEPOSIT, "borrow": BalanceType.BORROW}
_MARKET_KINDS = {"spot": MarketKind.SPOT, "perp": MarketKind.PERP}
_DIRECTIONS = {"long": PositionDirection.LONG, "short": PositionDirection.SHORT}
_ORDER_TYPES = {
    "market": OrderType.MARKET,
    "limit": OrderType.LIMIT,
    "triggermarket": OrderType.TRIGGER_MARKET,
    "triggerlimit": OrderType.TRIGGER_LIMIT,
    "oracle": OrderType.ORACLE,
}


def decode_balance_type(value: Any, codes: LedgerCodes = DEFAULT_LEDGER_CODES) -> BalanceType | None:
    return _BALANCE_TYPES.get(variant_name(value, codes.balance_type))


def decode_market_kind(value: Any, codes: LedgerCodes = DEFAULT_LEDGER_CODES) -> MarketKind | None:
    return _MARKET_KINDS.get(variant_name(value, codes.market_type))


def decode_direction(value: Any, codes: LedgerCodes = DEFAULT_LEDGER_CODES) -> PositionDirection | None:
    return _DIRECTIONS.get(variant_name(value, codes.direction))


def decode_order_type(value: Any, codes: LedgerCodes = DEFAULT_LEDGER_CODES) -> OrderType:
    """Order type by tag; anything unrecognized reports as UNKNOWN."""
    return _ORDER_TYPES.get(variant_name(value, codes.order_type), OrderType.UNKNOWN)
