"""Deposit and withdraw construction for spot collateral.

Token amounts scale by the spot market's own ``decimals`` (USDC has 6,
SOL has 9, ...) and truncate toward zero.
"""

from decimal import Decimal

from desk.markets import MarketRef
from desk.models import MarketKind
from desk.orders.models import OrderError, OrderErrorCode, TransferKind, TransferSpec
from desk.precision import fits_onchain, scale, within_input_range


def build_transfer_spec(
    kind: TransferKind,
    amount: Decimal | None,
    market: MarketRef,
    sub_account_id: int,
    *,
    reduce_only: bool = False,
) -> TransferSpec | OrderError:
    """Build a scaled deposit or withdraw for one spot market.

    Args:
        kind: DEPOSIT into or WITHDRAW from the subaccount.
        amount: Human-readable token amount.
        market: Spot market reference (decimals are read from here).
        sub_account_id: Target subaccount.
        reduce_only: Withdraw only; never open a borrow to cover the amount.

    Returns:
        TransferSpec, or OrderError for a bad amount or a non-spot market.
    """
    if market.kind is not MarketKind.SPOT:
        return OrderError(
            OrderErrorCode.INVALID_MARKET,
            f"transfers need a spot market, got {market.label}",
        )
    if amount is None or amount <= 0:
        return OrderError(OrderErrorCode.INVALID_AMOUNT, "amount must be greater than zero")

    if not within_input_range(amount):
        return OrderError(OrderErrorCode.INVALID_AMOUNT, f"amount {amount} is out of range")

    scaled = scale(amount, market.decimals)
    if scaled <= 0:
        return OrderError(
            OrderErrorCode.INVALID_AMOUNT,
            f"amount {amount} is below one {market.label} unit",
        )
    if not fits_onchain(scaled):
        return OrderError(OrderErrorCode.INVALID_AMOUNT, f"amount {amount} is out of range")

    return TransferSpec(
        kind=kind,
        market_index=market.market_index,
        amount=scaled,
        sub_account_id=sub_account_id,
        reduce_only=reduce_only and kind is TransferKind.WITHDRAW,
    )
