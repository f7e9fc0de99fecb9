"""FastAPI application factory for the desk API."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from desk.api import routes
from desk.config import OrderSettings
from desk.ledger.client import LedgerClient
from desk.logging import bind_request_context, clear_request_context
from desk.markets import MarketReference


def create_app(
    ledger: LedgerClient,
    markets: MarketReference,
    order_settings: OrderSettings | None = None,
    lifespan: Any = None,
    cors_origins: Sequence[str] = (),
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        ledger: Ledger client used by the handlers. Connecting it is the
            caller's (or the lifespan's) job.
        markets: Market reference table shared by all requests.
        order_settings: Order construction settings. Defaults when None.
        lifespan: Optional async context manager for startup/shutdown.
            Used by main.py to connect and close the ledger client.
        cors_origins: Browser origins allowed to call the API (the wallet
            front end). No CORS headers when empty.

    Returns:
        Configured FastAPI application with routes under /api.
    """
    app = FastAPI(title="Subaccount Trading Desk", lifespan=lifespan)

    app.state.ledger = ledger
    app.state.markets = markets
    app.state.order_settings = order_settings or OrderSettings()

    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(cors_origins),
            allow_credentials=False,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_log_context(request: Request, call_next):
        bind_request_context(method=request.method, path=request.url.path)
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    app.include_router(routes.router, prefix="/api")

    return app
