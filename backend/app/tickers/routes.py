"""HTTP read handlers for cached tickers."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from .context import TickerContext

logger = logging.getLogger(__name__)


def _feed_headers(context: TickerContext) -> dict[str, str]:
    """Headers that let clients tell live quotes from a frozen cache."""
    headers = {"X-Feed-State": context.status.state}
    last_update = context.status.last_event_iso
    if last_update is not None:
        headers["X-Feed-Last-Update"] = last_update
    return headers


def create_currency_router(context: TickerContext) -> APIRouter:
    """Create the currency router bound to one TickerContext.

    Handlers are plain ``def`` so FastAPI runs them in its threadpool,
    concurrently with the ingestion loop on the event loop.
    """
    router = APIRouter(tags=["currency"])

    # Registered before /currency/{symbol} so "all" is never taken as a symbol.
    @router.get("/currency/all")
    def get_all_currencies() -> JSONResponse:
        records = context.read_all()
        return JSONResponse(
            {"currencies": [record.to_dict() for record in records]},
            headers=_feed_headers(context),
        )

    @router.get("/currency/{symbol}")
    def get_currency(symbol: str) -> JSONResponse:
        slot = context.lookup(symbol)
        if slot is None:
            return JSONResponse(
                {
                    "detail": f"Unsupported symbol {symbol}",
                    "supported": list(context.registry.symbols),
                },
                status_code=404,
                headers=_feed_headers(context),
            )
        return JSONResponse(context.read_one(slot).to_dict(), headers=_feed_headers(context))

    @router.get("/health")
    def health() -> JSONResponse:
        """Feed state and counters. 503 while the feed is not streaming."""
        body = context.status.snapshot()
        body["symbols"] = len(context.registry)
        return JSONResponse(body, status_code=200 if context.status.is_live else 503)

    return router
