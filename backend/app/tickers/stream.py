"""Server-sent events for the ticker table."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse

from .context import TickerContext

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def create_stream_router(context: TickerContext, interval: float = 0.5) -> APIRouter:
    router = APIRouter(prefix="/stream", tags=["streaming"])

    @router.get("/currency")
    async def stream_currencies(request: Request) -> StreamingResponse:
        """Push the full table, with the feed state, each time either changes.

            data: {"state": "streaming", "currencies": [{"id": "ETH", ...}]}
        """
        return StreamingResponse(
            _generate_events(context, request, interval),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    return router


def _table_event(context: TickerContext, state: str) -> str:
    payload = {
        "state": state,
        "currencies": [record.to_dict() for record in context.read_all()],
    }
    return f"data: {json.dumps(payload)}\n\n"


async def _generate_events(
    context: TickerContext,
    request: Request,
    interval: float = 0.5,
) -> AsyncGenerator[str, None]:
    yield "retry: 1000\n\n"

    peer = request.client.host if request.client else "unknown"
    logger.info("Ticker stream opened for %s", peer)
    sent: tuple[int, str] | None = None

    try:
        while not await request.is_disconnected():
            # Either a write or a state change triggers a send.
            current = (context.cache.version, context.status.state)
            if current != sent:
                sent = current
                yield _table_event(context, current[1])
            await asyncio.sleep(interval)
        logger.info("Ticker stream closed by %s", peer)
    except asyncio.CancelledError:
        logger.info("Ticker stream cancelled for %s", peer)
        raise
