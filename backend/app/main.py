"""FastAPI application serving cached exchange tickers.

Endpoints:
- GET /currency/all      - Every configured ticker, in configuration order
- GET /currency/{symbol} - One ticker, 404 for unsupported symbols
- GET /stream/currency   - SSE stream of the full table
- GET /health            - Feed state; 503 once the feed is lost

Run with ``ticker-cache`` (or ``python -m app.main``); settings come from
TICKER_* environment variables, see app.config.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from .config import Settings
from .tickers import (
    FeedConnector,
    TickerContext,
    TickerFeed,
    create_currency_router,
    create_feed_connector,
    create_stream_router,
)

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    connector: FeedConnector | None = None,
) -> FastAPI:
    """Build the app. The context exists up front; the feed starts in lifespan.

    Startup fails (and the server never listens) if the feed cannot be
    connected or any symbol cannot be resolved.
    """
    settings = settings or Settings.from_env()
    context = TickerContext.from_symbols(settings.symbols)
    connector = connector or create_feed_connector(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        connection = await connector.connect()
        feed = TickerFeed(context, connection)
        try:
            await feed.initialize()
            await feed.subscribe()
        except Exception:
            await connection.close()
            raise
        feed.start()
        app.state.feed = feed
        try:
            yield
        finally:
            await feed.stop()

    app = FastAPI(
        title="Ticker Cache",
        description="Point-in-time snapshots of exchange tickers",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.context = context

    app.include_router(create_currency_router(context))
    app.include_router(create_stream_router(context))
    return app


def main() -> None:
    """Console entry point. uvicorn handles SIGINT/SIGTERM and graceful shutdown."""
    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logger.info(
        "Serving %d symbols on %s:%d (feed: %s)",
        len(settings.symbols),
        settings.hostname,
        settings.port,
        settings.feed,
    )
    uvicorn.run(
        create_app(settings),
        host=settings.hostname,
        port=settings.port,
        log_level=settings.log_level.lower(),
        timeout_graceful_shutdown=5,
    )


if __name__ == "__main__":
    main()
