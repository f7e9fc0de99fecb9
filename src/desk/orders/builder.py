"""Order plan construction: TradeIntent -> ordered list of OrderSpec.

Pure and deterministic. Validation failures are returned as OrderError
values; nothing here raises for bad input except require_order_specs.

Plan modes, mutually exclusive, in priority order:
1. Ladder: leg_count LIMIT orders spread from min_price to max_price.
2. Single: one order of the requested type, followed by optional
   reduce-only take-profit and stop-loss legs.

Rounding (always truncation, see desk.precision):
  - Ladder price step = (max - min) // (legs - 1) in scaled integers, so legs
    are not perfectly even when the range does not divide.
  - Ladder leg size = total // legs. The remainder is dropped unless
    redistribute_remainder is set, in which case the last leg absorbs it.

Every scaled size and price must fit the ledger's u64 fields.
"""

from dataclasses import replace
from decimal import Decimal

from desk.exceptions import OrderRejected
from desk.markets import MarketRef
from desk.models import (
    PLACEABLE_ORDER_TYPES,
    TRIGGER_ORDER_TYPES,
    MarketKind,
    OrderType,
    PositionDirection,
    TriggerCondition,
)
from desk.orders.models import (
    LadderParams,
    OrderError,
    OrderErrorCode,
    OrderSpec,
    TradeIntent,
)
from desk.precision import fits_onchain, scale, scale_base, scale_quote, within_input_range

# Open-order slots per subaccount on the exchange
DEFAULT_MAX_LADDER_LEGS = 32


def build_order_specs(
    intent: TradeIntent,
    market: MarketRef,
    *,
    redistribute_remainder: bool = False,
    max_ladder_legs: int = DEFAULT_MAX_LADDER_LEGS,
) -> list[OrderSpec] | OrderError:
    """Turn a trade intent into the order specs to submit in one transaction.

    Args:
        intent: Decoded, unvalidated trade intent.
        market: Reference data for the intent's market.
        redistribute_remainder: Ladder only. Add the size left over by integer
            division to the last leg instead of dropping it.
        max_ladder_legs: Ladder only. Largest accepted leg count.

    Returns:
        A non-empty list of OrderSpec, or an OrderError describing the first
        validation failure.
    """
    if intent.size is None or intent.size <= 0:
        return OrderError(OrderErrorCode.INVALID_SIZE, "size must be greater than zero")

    try:
        direction = PositionDirection(intent.side)
    except ValueError:
        return OrderError(
            OrderErrorCode.INVALID_SIDE, f"side must be LONG or SHORT, got {intent.side!r}"
        )

    try:
        order_type = OrderType(intent.order_type)
    except ValueError:
        order_type = None
    if order_type not in PLACEABLE_ORDER_TYPES:
        return OrderError(
            OrderErrorCode.INVALID_ORDER_TYPE,
            f"unsupported order type {intent.order_type!r}",
        )

    if not within_input_range(intent.size):
        return OrderError(OrderErrorCode.INVALID_SIZE, f"size {intent.size} is out of range")
    base_amount = _scale_size(intent.size, market)
    if base_amount <= 0:
        return OrderError(
            OrderErrorCode.INVALID_SIZE,
            f"size {intent.size} is below the market's minimum unit",
        )
    if not fits_onchain(base_amount):
        return OrderError(OrderErrorCode.INVALID_SIZE, f"size {intent.size} is out of range")

    if intent.ladder is not None:
        return _build_ladder(
            intent,
            market,
            direction,
            base_amount,
            intent.ladder,
            redistribute_remainder,
            max_ladder_legs,
        )
    return _build_single(intent, market, direction, order_type, base_amount)


def require_order_specs(
    intent: TradeIntent,
    market: MarketRef,
    *,
    redistribute_remainder: bool = False,
    max_ladder_legs: int = DEFAULT_MAX_LADDER_LEGS,
) -> list[OrderSpec]:
    """Same as build_order_specs, but raises OrderRejected on failure."""
    result = build_order_specs(
        intent,
        market,
        redistribute_remainder=redistribute_remainder,
        max_ladder_legs=max_ladder_legs,
    )
    if isinstance(result, OrderError):
        raise OrderRejected(result)
    return result


def trigger_condition_for(direction: PositionDirection) -> TriggerCondition:
    """Entry trigger: longs arm above the trigger price, shorts below."""
    if direction is PositionDirection.LONG:
        return TriggerCondition.ABOVE
    return TriggerCondition.BELOW


def stop_condition_for(entry: PositionDirection) -> TriggerCondition:
    """Stop-loss trigger: fires when price moves against the entry."""
    if entry is PositionDirection.LONG:
        return TriggerCondition.BELOW
    return TriggerCondition.ABOVE


def _scale_size(size: Decimal, market: MarketRef) -> int:
    if market.kind is MarketKind.SPOT:
        return scale(size, market.decimals)
    return scale_base(size)


def _positive(value: Decimal | None) -> bool:
    return value is not None and value > 0


def _scaled_price(value: Decimal | None) -> int | None:
    """Scaled quote price, or None unless it is positive and fits on-chain."""
    if not _positive(value) or not within_input_range(value):
        return None
    scaled = scale_quote(value)
    if scaled <= 0 or not fits_onchain(scaled):
        return None
    return scaled


def _build_ladder(
    intent: TradeIntent,
    market: MarketRef,
    direction: PositionDirection,
    base_amount: int,
    ladder: LadderParams,
    redistribute_remainder: bool,
    max_ladder_legs: int,
) -> list[OrderSpec] | OrderError:
    if ladder.leg_count is None or ladder.leg_count < 2:
        return OrderError(
            OrderErrorCode.INVALID_LADDER_RANGE, "ladder needs at least 2 legs"
        )
    if ladder.leg_count > max_ladder_legs:
        return OrderError(
            OrderErrorCode.INVALID_LADDER_RANGE,
            f"ladder allows at most {max_ladder_legs} legs, got {ladder.leg_count}",
        )

    min_price = _scaled_price(ladder.min_price)
    max_price = _scaled_price(ladder.max_price)
    if min_price is None or max_price is None:
        return OrderError(
            OrderErrorCode.INVALID_LADDER_RANGE,
            "ladder prices must be greater than zero and within range",
        )
    if min_price >= max_price:
        return OrderError(
            OrderErrorCode.INVALID_LADDER_RANGE,
            f"ladder min price {ladder.min_price} must be below max price {ladder.max_price}",
        )

    legs = ladder.leg_count
    step = (max_price - min_price) // (legs - 1)

    leg_size, remainder = divmod(base_amount, legs)
    if leg_size <= 0:
        return OrderError(
            OrderErrorCode.INVALID_SIZE,
            f"size {intent.size} is too small to split into {legs} legs",
        )

    specs = [
        OrderSpec(
            market_index=intent.market_index,
            market_type=market.kind,
            direction=direction,
            base_asset_amount=leg_size,
            order_type=OrderType.LIMIT,
            price=min_price + step * i,
        )
        for i in range(legs)
    ]
    if redistribute_remainder and remainder:
        specs[-1] = replace(specs[-1], base_asset_amount=leg_size + remainder)
    return specs


def _build_single(
    intent: TradeIntent,
    market: MarketRef,
    direction: PositionDirection,
    order_type: OrderType,
    base_amount: int,
) -> list[OrderSpec] | OrderError:
    price = 0
    if order_type in (OrderType.LIMIT, OrderType.TRIGGER_LIMIT):
        price = _scaled_price(intent.price)
        if price is None:
            return OrderError(
                OrderErrorCode.MISSING_LIMIT_PRICE,
                f"{order_type.value} orders need a price greater than zero and within range",
            )
    trigger_price = 0
    if order_type in TRIGGER_ORDER_TYPES:
        trigger_price = _scaled_price(intent.trigger_price)
        if trigger_price is None:
            return OrderError(
                OrderErrorCode.MISSING_TRIGGER_PRICE,
                f"{order_type.value} orders need a trigger price greater than zero "
                "and within range",
            )

    # Zero or absent means "no bracket leg"
    brackets: dict[str, int | None] = {}
    for name, value in (
        ("take profit", intent.take_profit_price),
        ("stop loss", intent.stop_loss_price),
    ):
        if value is None or value == 0:
            brackets[name] = None
            continue
        scaled = _scaled_price(value)
        if scaled is None:
            return OrderError(
                OrderErrorCode.INVALID_BRACKET_PRICE,
                f"{name} price {value} must be greater than zero and within range",
            )
        brackets[name] = scaled

    entry = OrderSpec(
        market_index=intent.market_index,
        market_type=market.kind,
        direction=direction,
        base_asset_amount=base_amount,
        order_type=order_type,
        price=price,
    )
    if order_type in TRIGGER_ORDER_TYPES:
        entry = replace(
            entry,
            trigger_price=trigger_price,
            trigger_condition=trigger_condition_for(direction),
        )
    specs = [entry]

    take_profit = brackets["take profit"]
    if take_profit is not None:
        specs.append(
            OrderSpec(
                market_index=intent.market_index,
                market_type=market.kind,
                direction=direction.opposite(),
                base_asset_amount=base_amount,
                order_type=OrderType.LIMIT,
                price=take_profit,
                reduce_only=True,
            )
        )
    stop_price = brackets["stop loss"]
    if stop_price is not None:
        specs.append(
            OrderSpec(
                market_index=intent.market_index,
                market_type=market.kind,
                direction=direction.opposite(),
                base_asset_amount=base_amount,
                order_type=OrderType.TRIGGER_MARKET,
                price=stop_price,
                trigger_price=stop_price,
                trigger_condition=stop_condition_for(direction),
                reduce_only=True,
            )
        )
    return specs
