"""JSON API endpoints: order planning, transfers, account views and broadcast.

Handlers decode the request body, call the pure order builder / account
projector, and hand specs to the ledger client. Validation failures come
back as 400 with ``{"error": <code>, "message": ...}``.
"""

from __future__ import annotations

from dataclasses import asdict, is_dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

import structlog
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from desk.account.projector import project_account, project_subaccounts
from desk.config import OrderSettings
from desk.exceptions import AccountNotFound, LedgerError, MarketNotFound
from desk.ledger.client import LedgerClient
from desk.ledger.types import BroadcastFailed, BroadcastOk, BroadcastTimedOut
from desk.markets import MarketReference
from desk.models import MarketKind
from desk.orders.builder import build_order_specs
from desk.orders.models import OrderError, OrderSpec, TradeIntent, TransferKind
from desk.orders.transfers import build_transfer_spec
from desk.precision import to_decimal

log = structlog.get_logger(__name__)

router = APIRouter()


def _to_json(obj: Any) -> Any:
    """Recursively convert dataclasses, Decimals and enums for JSON responses."""
    if is_dataclass(obj) and not isinstance(obj, type):
        return _to_json(asdict(obj))
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, Decimal):
        return str(obj)
    if isinstance(obj, dict):
        return {k: _to_json(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_to_json(item) for item in obj]
    return obj


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


async def _json_body(request: Request) -> dict[str, Any] | None:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _ledger(request: Request) -> LedgerClient:
    return request.app.state.ledger


def _markets(request: Request) -> MarketReference:
    return request.app.state.markets


def _order_settings(request: Request) -> OrderSettings:
    return request.app.state.order_settings


def _sub_account_id(request: Request, body: dict[str, Any]) -> int | None:
    """Requested subaccount, the configured default when absent, None if malformed."""
    value = body.get("sub_account_id")
    if value is None:
        return _order_settings(request).default_sub_account_id
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _plan(request: Request, body: dict[str, Any]) -> list[OrderSpec] | JSONResponse:
    """Decode and build; returns specs or the error response to send."""
    try:
        intent = TradeIntent.from_payload(body)
    except ValueError as e:
        return _error(400, "InvalidRequest", str(e))

    try:
        market = _markets(request).require(MarketKind.PERP, intent.market_index)
    except MarketNotFound as e:
        return _error(404, "MarketNotFound", str(e))

    settings = _order_settings(request)
    result = build_order_specs(
        intent,
        market,
        redistribute_remainder=settings.redistribute_ladder_remainder,
        max_ladder_legs=settings.max_ladder_legs,
    )
    if isinstance(result, OrderError):
        log.info(
            "order_rejected",
            code=result.code.value,
            reason=result.message,
            market_index=intent.market_index,
        )
        return JSONResponse(status_code=400, content=result.to_dict())
    return result


@router.get("/markets")
async def get_markets(request: Request) -> JSONResponse:
    """Market reference table, spot then perp."""
    markets = _markets(request)
    return JSONResponse(content={
        "spot": [_to_json(m) for m in markets.markets(MarketKind.SPOT)],
        "perp": [_to_json(m) for m in markets.markets(MarketKind.PERP)],
    })


@router.post("/orders/preview")
async def preview_orders(request: Request) -> JSONResponse:
    """Build the order specs for an intent without assembling a transaction."""
    body = await _json_body(request)
    if body is None:
        return _error(400, "InvalidRequest", "request body must be a JSON object")

    planned = _plan(request, body)
    if isinstance(planned, JSONResponse):
        return planned
    return JSONResponse(content={"orders": [spec.to_dict() for spec in planned]})


@router.post("/orders")
async def place_orders(request: Request) -> JSONResponse:
    """Build the order specs and bundle them into one unsigned transaction."""
    body = await _json_body(request)
    if body is None:
        return _error(400, "InvalidRequest", "request body must be a JSON object")

    wallet = body.get("wallet_public_key")
    if not wallet:
        return _error(400, "InvalidRequest", "wallet_public_key is required")

    planned = _plan(request, body)
    if isinstance(planned, JSONResponse):
        return planned

    sub_account_id = _sub_account_id(request, body)
    if sub_account_id is None:
        return _error(400, "InvalidRequest", "sub_account_id must be an integer")

    try:
        transaction = await _ledger(request).assemble_order_transaction(
            str(wallet), sub_account_id, planned
        )
    except LedgerError as e:
        log.error("order_transaction_failed", error=str(e), wallet=wallet)
        return _error(502, "LedgerError", str(e))

    log.info("order_transaction_created", wallet=wallet, orders=len(planned))
    return JSONResponse(content={
        "transaction": transaction,
        "orders": [spec.to_dict() for spec in planned],
        "message": "Order transaction created successfully",
    })


async def _transfer(request: Request, kind: TransferKind) -> JSONResponse:
    body = await _json_body(request)
    if body is None:
        return _error(400, "InvalidRequest", "request body must be a JSON object")

    wallet = body.get("wallet_public_key")
    market_index = body.get("market_index")
    if not wallet or market_index is None or body.get("amount") in (None, ""):
        return _error(
            400, "InvalidRequest", "wallet_public_key, amount and market_index are required"
        )

    try:
        market = _markets(request).require(MarketKind.SPOT, int(market_index))
    except (TypeError, ValueError):
        return _error(400, "InvalidRequest", "market_index must be an integer")
    except MarketNotFound as e:
        return _error(404, "MarketNotFound", str(e))

    sub_account_id = _sub_account_id(request, body)
    if sub_account_id is None:
        return _error(400, "InvalidRequest", "sub_account_id must be an integer")

    result = build_transfer_spec(
        kind,
        to_decimal(body.get("amount")),
        market,
        sub_account_id,
        reduce_only=bool(body.get("reduce_only", False)),
    )
    if isinstance(result, OrderError):
        return JSONResponse(status_code=400, content=result.to_dict())

    try:
        transaction = await _ledger(request).assemble_transfer_transaction(str(wallet), result)
    except LedgerError as e:
        log.error("transfer_transaction_failed", kind=kind.value, error=str(e), wallet=wallet)
        return _error(502, "LedgerError", str(e))

    log.info(
        "transfer_transaction_created",
        kind=kind.value,
        wallet=wallet,
        market_index=result.market_index,
        amount=result.amount,
    )
    return JSONResponse(content={
        "transaction": transaction,
        "transfer": result.to_dict(),
        "message": f"{kind.value.capitalize()} transaction created successfully",
    })


@router.post("/deposit")
async def deposit(request: Request) -> JSONResponse:
    return await _transfer(request, TransferKind.DEPOSIT)


@router.post("/withdraw")
async def withdraw(request: Request) -> JSONResponse:
    return await _transfer(request, TransferKind.WITHDRAW)


@router.post("/account")
async def get_account(request: Request) -> JSONResponse:
    """Balances, positions and open orders for one subaccount."""
    body = await _json_body(request)
    user_account = body.get("user_account_public_key") if body else None
    if not user_account:
        return _error(400, "InvalidRequest", "user_account_public_key is required")

    ledger = _ledger(request)
    try:
        raw = await ledger.fetch_account_state(str(user_account))
    except AccountNotFound as e:
        return _error(404, "AccountNotFound", str(e))
    except LedgerError as e:
        log.error("account_fetch_failed", error=str(e), user_account=user_account)
        return _error(502, "LedgerError", str(e))

    view = project_account(raw, _markets(request), ledger.codes)
    return JSONResponse(content=_to_json(view))


@router.post("/subaccounts")
async def get_subaccounts(request: Request) -> JSONResponse:
    """All subaccounts for a wallet authority."""
    body = await _json_body(request)
    authority = body.get("wallet_address") if body else None
    if not authority:
        return _error(400, "InvalidRequest", "wallet_address is required")

    try:
        raw = await _ledger(request).list_subaccounts(str(authority))
    except LedgerError as e:
        log.error("subaccount_fetch_failed", error=str(e), authority=authority)
        return _error(502, "LedgerError", str(e))

    return JSONResponse(content={"subaccounts": _to_json(project_subaccounts(raw))})


@router.post("/transactions")
async def send_transaction(request: Request) -> JSONResponse:
    """Broadcast a wallet-signed transaction and report the outcome."""
    body = await _json_body(request)
    signed = body.get("signed_transaction") if body else None
    if not signed or not isinstance(signed, str):
        return _error(400, "InvalidRequest", "signed_transaction is required")

    try:
        outcome = await _ledger(request).send_transaction(signed)
    except LedgerError as e:
        log.error("broadcast_failed", error=str(e))
        return _error(502, "LedgerError", str(e))

    if isinstance(outcome, BroadcastOk):
        log.info("transaction_confirmed", signature=outcome.signature)
        return JSONResponse(content={
            "signature": outcome.signature,
            "message": "Transaction sent successfully",
        })
    if isinstance(outcome, BroadcastTimedOut):
        log.warning("transaction_confirmation_timeout", signature=outcome.signature)
        return JSONResponse(status_code=504, content={
            "error": "TransactionTimedOut",
            "message": "Transaction was not confirmed in time; it may still land",
            "signature": outcome.signature,
        })
    if isinstance(outcome, BroadcastFailed):
        log.warning("transaction_failed", reason=outcome.reason, signature=outcome.signature)
        return JSONResponse(status_code=502, content={
            "error": "TransactionFailed",
            "message": outcome.reason,
            "signature": outcome.signature,
        })
    raise TypeError(f"unexpected broadcast outcome {outcome!r}")
