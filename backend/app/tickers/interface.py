"""Contracts for the upstream exchange connection."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol


class FeedConnection(Protocol):
    """One bidirectional message channel to the exchange.

    Commands and their responses share the channel with streaming
    notifications. Any read or write failure, including the peer closing the
    connection, is raised as FeedTransportError.
    """

    async def send(self, message: str) -> None: ...

    async def recv(self) -> str: ...

    async def close(self) -> None: ...


class FeedConnector(ABC):
    """Opens connections to a ticker feed.

    Lifecycle:
        connector = create_feed_connector(settings)
        connection = await connector.connect()
        feed = TickerFeed(context, connection)
        await feed.initialize()
        await feed.subscribe()
        feed.start()
        # ... app runs ...
        await feed.stop()
    """

    @abstractmethod
    async def connect(self) -> FeedConnection:
        """Open a new connection. Raises FeedTransportError on failure."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Short label for logs and /health."""
