"""Factory for creating feed connectors."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .interface import FeedConnector

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)


def create_feed_connector(settings: Settings) -> FeedConnector:
    """Create the connector selected by ``settings.feed``.

    - "simulator" → SimulatorConnector (GBM prices, no network)
    - otherwise   → HitBTCConnector for ``settings.feed_url``

    Returns an unconnected connector. Caller must await connector.connect().
    """
    if settings.feed == "simulator":
        from .simulator import SimulatorConnector

        logger.info("Ticker feed: simulator")
        return SimulatorConnector()
    else:
        from .hitbtc_client import HitBTCConnector

        logger.info("Ticker feed: HitBTC (%s)", settings.feed_url)
        return HitBTCConnector(url=settings.feed_url)
