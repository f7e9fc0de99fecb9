"""Shared enums for the trading desk.

Wire values match the labels the HTTP layer sends and receives
("LONG", "TRIGGER_MARKET", ...).
"""

from enum import Enum


class PositionDirection(str, Enum):
    """Order or position direction."""

    LONG = "LONG"
    SHORT = "SHORT"

    def opposite(self) -> "PositionDirection":
        return PositionDirection.SHORT if self is PositionDirection.LONG else PositionDirection.LONG


class OrderType(str, Enum):
    """Order type.

    ORACLE and UNKNOWN only appear when reporting open orders; they cannot be
    placed through the order builder.
    """

    MARKET = "MARKET"
    LIMIT = "LIMIT"
    TRIGGER_MARKET = "TRIGGER_MARKET"
    TRIGGER_LIMIT = "TRIGGER_LIMIT"
    ORACLE = "ORACLE"
    UNKNOWN = "UNKNOWN"


PLACEABLE_ORDER_TYPES = frozenset(
    {OrderType.MARKET, OrderType.LIMIT, OrderType.TRIGGER_MARKET, OrderType.TRIGGER_LIMIT}
)

TRIGGER_ORDER_TYPES = frozenset({OrderType.TRIGGER_MARKET, OrderType.TRIGGER_LIMIT})


class TriggerCondition(str, Enum):
    """Oracle price condition that arms a trigger order."""

    ABOVE = "ABOVE"
    BELOW = "BELOW"


class MarketKind(str, Enum):
    """Market type."""

    SPOT = "SPOT"
    PERP = "PERP"


class BalanceType(str, Enum):
    """Spot balance direction."""

    DEPOSIT = "DEPOSIT"
    BORROW = "BORROW"


class OrderStatus(str, Enum):
    """Reported order status. Partial fills are not tracked."""

    OPEN = "OPEN"
