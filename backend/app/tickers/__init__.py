"""Ticker snapshot cache.

Public API:
    TickerRecord          - Immutable cached ticker (wire form via to_dict())
    Quote                 - The six streaming price fields
    SymbolRegistry        - Fixed symbol <-> slot mapping
    TickerCache           - Per-slot locked snapshot store
    TickerContext         - Owner of registry, cache and feed status
    FeedStatus            - Feed state and counters for read handlers
    TickerFeed            - Startup resolution + streaming ingestion loop
    FeedConnector         - Abstract connector to an exchange feed
    create_feed_connector - Factory that selects HitBTC or the simulator
    create_currency_router - FastAPI router for /currency and /health
    create_stream_router  - FastAPI router factory for the SSE endpoint
"""

from .cache import TickerCache
from .context import TickerContext
from .factory import create_feed_connector
from .ingest import TickerFeed
from .interface import FeedConnection, FeedConnector
from .models import Quote, TickerRecord, TickerUpdate
from .registry import SymbolRegistry
from .routes import create_currency_router
from .status import FeedStatus
from .stream import create_stream_router

__all__ = [
    "TickerRecord",
    "Quote",
    "TickerUpdate",
    "SymbolRegistry",
    "TickerCache",
    "TickerContext",
    "FeedStatus",
    "TickerFeed",
    "FeedConnection",
    "FeedConnector",
    "create_feed_connector",
    "create_currency_router",
    "create_stream_router",
]
