"""Order construction data models.

CRITICAL: All human-facing quantities use Decimal. Integer fields on
OrderSpec/TransferSpec are already scaled to on-chain precision.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from desk.models import MarketKind, OrderType, PositionDirection, TriggerCondition
from desk.precision import to_decimal


class OrderErrorCode(str, Enum):
    """Validation failures. Deterministic in the input, so never retryable."""

    INVALID_SIZE = "InvalidSize"
    INVALID_SIDE = "InvalidSide"
    INVALID_ORDER_TYPE = "InvalidOrderType"
    MISSING_LIMIT_PRICE = "MissingLimitPrice"
    MISSING_TRIGGER_PRICE = "MissingTriggerPrice"
    INVALID_LADDER_RANGE = "InvalidLadderRange"
    INVALID_BRACKET_PRICE = "InvalidBracketPrice"
    INVALID_AMOUNT = "InvalidAmount"
    INVALID_MARKET = "InvalidMarket"


@dataclass(frozen=True)
class OrderError:
    """A rejected intent, reported to the caller verbatim."""

    code: OrderErrorCode
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code.value, "message": self.message}


@dataclass(frozen=True)
class LadderParams:
    """Scaled (laddered) limit order parameters.

    Fields stay optional so that an incomplete ladder request is reported as
    InvalidLadderRange rather than silently placed as a single order.
    """

    leg_count: int | None
    min_price: Decimal | None
    max_price: Decimal | None


@dataclass(frozen=True)
class TradeIntent:
    """A user's trade request, decoded but not yet validated.

    ``side`` and ``order_type`` are kept as received so that the builder can
    report InvalidSide / InvalidOrderType instead of failing during decoding.
    """

    market_index: int
    side: str
    size: Decimal | None
    order_type: str = OrderType.MARKET.value
    price: Decimal | None = None
    trigger_price: Decimal | None = None
    take_profit_price: Decimal | None = None
    stop_loss_price: Decimal | None = None
    ladder: LadderParams | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> TradeIntent:
        """Decode an already JSON-parsed request body.

        Accepts either a nested ``ladder`` object or the flat
        ``is_scaled_order`` / ``scaled_order_*`` fields used by the order form.

        Raises:
            ValueError: If ``market_index`` is missing or not an integer.
        """
        market_index = _to_int(payload.get("market_index"))
        if market_index is None:
            raise ValueError("market_index is required")

        ladder: LadderParams | None = None
        raw_ladder = payload.get("ladder")
        if isinstance(raw_ladder, Mapping):
            ladder = LadderParams(
                leg_count=_to_int(raw_ladder.get("leg_count")),
                min_price=to_decimal(raw_ladder.get("min_price")),
                max_price=to_decimal(raw_ladder.get("max_price")),
            )
        elif payload.get("is_scaled_order"):
            ladder = LadderParams(
                leg_count=_to_int(payload.get("scaled_order_count")),
                min_price=to_decimal(payload.get("scaled_order_min_price")),
                max_price=to_decimal(payload.get("scaled_order_max_price")),
            )

        order_type = payload.get("order_type") or OrderType.MARKET.value

        return cls(
            market_index=market_index,
            side=str(payload.get("side") or payload.get("direction") or "").upper(),
            size=to_decimal(payload.get("size")),
            order_type=str(order_type).upper(),
            price=to_decimal(payload.get("price")),
            trigger_price=to_decimal(payload.get("trigger_price")),
            take_profit_price=to_decimal(payload.get("take_profit_price")),
            stop_loss_price=to_decimal(payload.get("stop_loss_price")),
            ladder=ladder,
        )


@dataclass(frozen=True)
class OrderSpec:
    """A fully populated order instruction, ready for an instruction builder.

    Every field has an explicit value; fields a given order does not use are
    zero / neutral rather than absent.
    """

    market_index: int
    market_type: MarketKind
    direction: PositionDirection
    base_asset_amount: int
    order_type: OrderType
    price: int = 0
    trigger_price: int = 0
    trigger_condition: TriggerCondition = TriggerCondition.ABOVE
    reduce_only: bool = False
    post_only: bool = False
    user_order_id: int = 0
    immediate_or_cancel: bool = False
    max_ts: int = 0
    oracle_price_offset: int = 0
    auction_duration: int = 0
    auction_start_price: int = 0
    auction_end_price: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key in ("market_type", "direction", "order_type", "trigger_condition"):
            data[key] = data[key].value
        return data


class TransferKind(str, Enum):
    """Collateral movement between wallet and subaccount."""

    DEPOSIT = "DEPOSIT"
    WITHDRAW = "WITHDRAW"


@dataclass(frozen=True)
class TransferSpec:
    """A scaled spot token transfer for a subaccount."""

    kind: TransferKind
    market_index: int
    amount: int
    sub_account_id: int
    reduce_only: bool = False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["kind"] = self.kind.value
        return data


def _to_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    dec = to_decimal(value)
    if dec is None or dec != dec.to_integral_value():
        return None
    return int(dec)
