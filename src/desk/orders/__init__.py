"""Order construction: trade intents and transfers to scaled instruction specs."""

from desk.orders.builder import build_order_specs, require_order_specs
from desk.orders.models import (
    LadderParams,
    OrderError,
    OrderErrorCode,
    OrderSpec,
    TradeIntent,
    TransferKind,
    TransferSpec,
)
from desk.orders.transfers import build_transfer_spec

__all__ = [
    "LadderParams",
    "OrderError",
    "OrderErrorCode",
    "OrderSpec",
    "TradeIntent",
    "TransferKind",
    "TransferSpec",
    "build_order_specs",
    "build_transfer_spec",
    "require_order_specs",
]
