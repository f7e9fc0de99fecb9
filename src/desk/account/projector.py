"""Account state projection: raw subaccount state -> display-ready records.

Pure and deterministic over its inputs. Items that cannot be understood (the
referenced market is missing from the reference table, or a tag does not
decode) are dropped individually and logged at debug level; everything else
is still projected.

Formulas (see desk.precision for the fixed-point scales):
  Balances:
    amount    = |token_amount| / 10**decimals, negated for borrows
    usd_value = |amount| * oracle_price / 1e6
  Positions:
    is_long       = base_asset_amount >= 0
    entry_price   = quote_entry_amount / 1e6 (0 if absent)
    mark_price    = oracle_price / 1e6
    current_value = |base_asset_amount| / 1e9 * mark_price
    pnl           = +current_value + quote_asset_amount / 1e6   (long)
                    -current_value + quote_asset_amount / 1e6   (short)
  The PnL is a mark-to-market estimate that ignores funding accrual.
"""

from collections.abc import Iterable
from decimal import Decimal

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
from desk.account.variants import (
    DEFAULT_LEDGER_CODES,
    LedgerCodes,
    decode_balance_type,
    decode_direction,
    decode_market_kind,
    decode_order_type,
)
from desk.logging import get_logger
from desk.markets import MarketReference
from desk.models import BalanceType, MarketKind, OrderStatus, PositionDirection
from desk.precision import BASE_DECIMALS, QUOTE_DECIMALS, unscale

logger = get_logger(__name__)


def project_account(
    raw: RawAccountState,
    markets: MarketReference,
    codes: LedgerCodes = DEFAULT_LEDGER_CODES,
) -> AccountView:
    """Project one subaccount snapshot into balances, positions and orders.

    Args:
        raw: Freshly fetched subaccount state.
        markets: Market reference table (decimals and symbols).
        codes: Ordinal tables for tags the ledger reports as integers.

    Returns:
        AccountView with one record per understood item, in input order.
    """
    balances: list[BalanceRecord] = []
    for spot in raw.spot_positions:
        if spot.scaled_balance == 0:
            continue
        balance = project_balance(spot, markets, codes)
        if balance is not None:
            balances.append(balance)

    positions: list[PositionRecord] = []
    for perp in raw.perp_positions:
        if perp.base_asset_amount == 0:
            continue
        position = project_position(perp, markets)
        if position is not None:
            positions.append(position)

    orders: list[OrderRecord] = []
    for raw_order in raw.open_orders:
        order = project_order(raw_order, markets, codes)
        if order is not None:
            orders.append(order)

    return AccountView(
        sub_account_id=raw.sub_account_id,
        authority=raw.authority,
        balances=balances,
        positions=positions,
        orders=orders,
    )


def project_balance(
    position: RawSpotPosition,
    markets: MarketReference,
    codes: LedgerCodes = DEFAULT_LEDGER_CODES,
) -> BalanceRecord | None:
    market = markets.get(MarketKind.SPOT, position.market_index)
    if market is None:
        logger.debug("balance_dropped_market_not_found", market_index=position.market_index)
        return None

    balance_type = decode_balance_type(position.balance_type, codes)
    if balance_type is None:
        logger.debug(
            "balance_dropped_unknown_balance_type",
            market_index=position.market_index,
            balance_type=repr(position.balance_type),
        )
        return None

    is_deposit = balance_type is BalanceType.DEPOSIT
    amount = unscale(abs(position.token_amount), market.decimals)
    usd_value = amount * unscale(position.oracle_price, QUOTE_DECIMALS)

    return BalanceRecord(
        market_index=position.market_index,
        symbol=market.label,
        amount=amount if is_deposit else -amount,
        usd_value=usd_value,
        is_deposit=is_deposit,
    )


def project_position(position: RawPerpPosition, markets: MarketReference) -> PositionRecord | None:
    market = markets.get(MarketKind.PERP, position.market_index)
    if market is None:
        logger.debug("position_dropped_market_not_found", market_index=position.market_index)
        return None

    is_long = position.base_asset_amount >= 0
    entry_price = (
        unscale(position.quote_entry_amount, QUOTE_DECIMALS)
        if position.quote_entry_amount
        else Decimal("0")
    )
    mark_price = unscale(position.oracle_price, QUOTE_DECIMALS)
    base_value = unscale(abs(position.base_asset_amount), BASE_DECIMALS)
    quote_value = unscale(position.quote_asset_amount, QUOTE_DECIMALS)
    current_value = base_value * mark_price

    if is_long:
        pnl = current_value + quote_value
    else:
        pnl = -current_value + quote_value

    return PositionRecord(
        market_index=position.market_index,
        symbol=market.label,
        base_asset_amount=base_value if is_long else -base_value,
        quote_asset_amount=quote_value,
        entry_price=entry_price,
        mark_price=mark_price,
        pnl=pnl,
        is_long=is_long,
        side=PositionDirection.LONG if is_long else PositionDirection.SHORT,
    )


def project_order(
    order: RawOrder,
    markets: MarketReference,
    codes: LedgerCodes = DEFAULT_LEDGER_CODES,
) -> OrderRecord | None:
    kind = decode_market_kind(order.market_type, codes)
    direction = decode_direction(order.direction, codes)
    if kind is None or direction is None:
        logger.debug(
            "order_dropped_undecodable",
            order_id=order.order_id,
            market_type=repr(order.market_type),
            direction=repr(order.direction),
        )
        return None

    market = markets.get(kind, order.market_index)
    if market is None:
        logger.debug(
            "order_dropped_market_not_found",
            order_id=order.order_id,
            market_kind=kind.value,
            market_index=order.market_index,
        )
        return None

    size_decimals = market.decimals if kind is MarketKind.SPOT else BASE_DECIMALS
    return OrderRecord(
        order_id=order.order_id,
        market_index=order.market_index,
        market_type=kind,
        symbol=market.label,
        direction=direction,
        order_type=decode_order_type(order.order_type, codes),
        price=unscale(order.price, QUOTE_DECIMALS),
        size=unscale(order.base_asset_amount, size_decimals),
        status=OrderStatus.OPEN,
    )


def project_subaccounts(subaccounts: Iterable[RawSubaccount]) -> list[SubaccountRecord]:
    """Subaccount listing, ordered by subaccount id, with default names."""
    return [
        SubaccountRecord(
            sub_account_id=sub.sub_account_id,
            name=sub.name or f"Subaccount {sub.sub_account_id}",
            authority=sub.authority,
            delegate=sub.delegate,
        )
        for sub in sorted(subaccounts, key=lambda s: s.sub_account_id)
    ]
