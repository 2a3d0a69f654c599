"""WebSocket connection to the HitBTC v2 market data API."""

from __future__ import annotations

import logging

import websockets
from websockets.exceptions import WebSocketException

from .errors import FeedTransportError
from .interface import FeedConnection, FeedConnector

logger = logging.getLogger(__name__)

DEFAULT_URL = "wss://api.hitbtc.com/api/2/ws"


class HitBTCConnection:
    """FeedConnection over a ``websockets`` client connection.

    Translates library and socket errors into FeedTransportError so the
    ingestion loop deals with one exception type for a lost feed.
    """

    def __init__(self, ws) -> None:
        self._ws = ws

    async def send(self, message: str) -> None:
        try:
            await self._ws.send(message)
        except (WebSocketException, OSError) as e:
            raise FeedTransportError(f"send failed: {e}") from e

    async def recv(self) -> str:
        try:
            message = await self._ws.recv()
        except (WebSocketException, OSError) as e:
            raise FeedTransportError(f"receive failed: {e}") from e
        if isinstance(message, bytes):
            return message.decode("utf-8", errors="replace")
        return message

    async def close(self) -> None:
        try:
            await self._ws.close()
        except (WebSocketException, OSError) as e:
            logger.debug("Error while closing HitBTC connection: %s", e)


class HitBTCConnector(FeedConnector):
    """Connects to the exchange. One connection serves the whole process."""

    def __init__(self, url: str = DEFAULT_URL, ping_interval: float | None = 20.0) -> None:
        self._url = url
        self._ping_interval = ping_interval

    @property
    def name(self) -> str:
        return "hitbtc"

    @property
    def url(self) -> str:
        return self._url

    async def connect(self) -> FeedConnection:
        logger.info("Connecting to %s", self._url)
        try:
            ws = await websockets.connect(
                self._url,
                ping_interval=self._ping_interval,
                ping_timeout=self._ping_interval,
            )
        except (WebSocketException, OSError) as e:
            raise FeedTransportError(f"could not connect to {self._url}: {e}") from e
        logger.info("Connected to %s", self._url)
        return HitBTCConnection(ws)
