"""Entry point for the desk API server.

Wires settings, logging, the market reference table and the ledger client
into the FastAPI app and serves it with uvicorn. The ledger client is
connected and closed by the app lifespan.
"""

import asyncio
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from desk.api.app import create_app
from desk.config import AppSettings
from desk.ledger.snapshot import SnapshotLedgerClient
from desk.logging import get_logger, setup_logging
from desk.markets import default_market_reference


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Connect the ledger client on startup and close it on shutdown."""
    logger = get_logger("desk.main")
    ledger = app.state.ledger

    await ledger.connect()
    logger.info("lifespan_started", markets=len(app.state.markets))

    try:
        yield
    finally:
        await ledger.close()
        logger.info("desk_stopped")


def build_app(settings: AppSettings) -> FastAPI:
    """Build the application from settings without starting a server."""
    markets = default_market_reference(settings.ledger.network)
    ledger = SnapshotLedgerClient(settings.ledger.snapshot_path)
    return create_app(
        ledger=ledger,
        markets=markets,
        order_settings=settings.orders,
        lifespan=lifespan,
        cors_origins=settings.server.cors_origins,
    )


async def run() -> None:
    """Load settings, configure logging and serve the API."""
    settings = AppSettings()
    setup_logging(settings.log_level, settings.log_format)
    logger = get_logger("desk.main")

    app = build_app(settings)

    logger.info(
        "starting_api",
        host=settings.server.host,
        port=settings.server.port,
        network=settings.ledger.network,
        snapshot=settings.ledger.snapshot_path,
    )

    config = uvicorn.Config(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level="warning",  # Suppress uvicorn access logs
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
