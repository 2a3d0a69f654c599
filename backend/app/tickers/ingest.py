"""Feed ingestion: startup resolution of static fields, then streaming quotes."""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Callable
from typing import Any

from . import protocol
from . import status as feed_state
from .context import TickerContext
from .errors import FeedProtocolError, FeedTransportError, MalformedMessageError
from .interface import FeedConnection
from .models import TickerUpdate

logger = logging.getLogger(__name__)


class TickerFeed:
    """Bridges one exchange connection into the ticker cache.

    Startup is strictly sequential: initialize() resolves every symbol with
    blocking request/response pairs, then subscribe() sends the
    subscribeTicker commands. Commands are matched to replies by reading the
    very next message, which is only sound while no notifications are
    flowing, so subscribe() refuses to run before initialize() completed and
    initialize() refuses to run after subscribe().

    The streaming loop is the cache's only writer.
    """

    def __init__(self, context: TickerContext, connection: FeedConnection) -> None:
        self._context = context
        self._connection = connection
        self._request_ids = itertools.count(1)
        self._initialized = False
        self._subscribed = False
        self._task: asyncio.Task | None = None

    @property
    def context(self) -> TickerContext:
        return self._context

    # --- Startup ---

    async def initialize(self) -> None:
        """Resolve id, full name and fee currency for every registered symbol.

        Raises FeedProtocolError on the first failure; nothing is partially
        served.
        """
        if self._subscribed or self._task is not None:
            raise FeedProtocolError("initialize() must run before subscribe() and start()")

        registry = self._context.registry
        self._context.status.set_state(feed_state.INITIALIZING)
        for slot, symbol in enumerate(registry):
            symbol_info = protocol.parse_symbol_info(
                await self._request(protocol.get_symbol_command, symbol)
            )
            currency_info = protocol.parse_currency_info(
                await self._request(protocol.get_currency_command, symbol_info.base_currency)
            )
            self._context.cache.set_static(
                slot,
                id=symbol_info.base_currency,
                full_name=currency_info.full_name,
                fee_currency=symbol_info.fee_currency,
            )
            logger.info(
                "Resolved %s: id=%s fullName=%s feeCurrency=%s",
                symbol,
                symbol_info.base_currency,
                currency_info.full_name,
                symbol_info.fee_currency,
            )

        self._initialized = True
        logger.info("Initialized %d symbols", len(registry))

    async def subscribe(self) -> None:
        """Send one subscribeTicker per symbol. Acknowledgements are not awaited."""
        if not self._initialized:
            raise FeedProtocolError("subscribe() called before initialize() completed")

        for symbol in self._context.registry:
            command = protocol.subscribe_ticker_command(symbol, next(self._request_ids))
            try:
                await self._connection.send(command)
            except FeedTransportError as e:
                raise FeedProtocolError(f"subscribeTicker {symbol} failed: {e}") from e
        self._subscribed = True
        logger.info("Subscribed to %d tickers", len(self._context.registry))

    async def _request(self, build: Callable[[str, int], str], argument: str) -> dict[str, Any]:
        """Send one command and read its reply from the next inbound message."""
        request_id = next(self._request_ids)
        command = build(argument, request_id)
        try:
            await self._connection.send(command)
            raw = await self._connection.recv()
        except FeedTransportError as e:
            raise FeedProtocolError(f"request {request_id} for {argument} failed: {e}") from e
        return protocol.decode_response(raw, request_id)

    # --- Streaming ---

    def start(self) -> asyncio.Task:
        """Launch the streaming loop as a background task.

        Only valid after subscribe(): from then on the loop is the sole reader
        of the connection.
        """
        if not self._subscribed:
            raise FeedProtocolError("start() called before subscribe() completed")
        if self._task is not None and not self._task.done():
            return self._task
        # Readers see the feed as live as soon as the task exists.
        self._context.status.set_state(feed_state.STREAMING)
        self._task = asyncio.create_task(self.run(), name="ticker-feed")
        return self._task

    async def stop(self) -> None:
        """Cancel the streaming loop and close the connection. Safe to call twice."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        self._task = None
        await self._connection.close()
        if self._context.status.state != feed_state.DISCONNECTED:
            self._context.status.set_state(feed_state.STOPPED)
        logger.info("Ticker feed stopped")

    async def run(self) -> None:
        """Apply inbound ticker events until the connection goes away.

        A message that fails to apply is logged, counted and skipped. Any other
        failure ends the loop with the feed marked disconnected.
        """
        status = self._context.status
        status.set_state(feed_state.STREAMING)
        logger.info("Ticker feed streaming")
        try:
            while True:
                try:
                    raw = await self._connection.recv()
                except FeedTransportError as e:
                    logger.error("Ticker feed lost: %s", e)
                    status.set_state(feed_state.DISCONNECTED, reason=str(e))
                    return
                try:
                    self.handle_message(raw)
                except Exception:
                    status.record_malformed()
                    logger.exception("Error handling feed message: %.200s", raw)
        except Exception as e:
            logger.exception("Ticker feed loop failed")
            status.set_state(feed_state.DISCONNECTED, reason=f"feed loop failed: {e!r}")

    def handle_message(self, raw: str) -> bool:
        """Decode and apply one inbound message. Returns True if the cache changed.

        A bad message only costs that message: it is logged, counted and
        skipped.
        """
        status = self._context.status
        try:
            event = protocol.decode_event(raw)
        except MalformedMessageError as e:
            status.record_malformed()
            logger.warning("Skipping malformed feed message: %s", e)
            return False

        if event is None:
            logger.debug("Ignoring non-ticker message: %.200s", raw)
            return False
        if isinstance(event, protocol.RpcError):
            status.record_feed_error()
            logger.warning(
                "Exchange returned error %s for request %s: %s",
                event.code,
                event.request_id,
                event.message,
            )
            return False
        return self.apply(event)

    def apply(self, update: TickerUpdate) -> bool:
        """Write a decoded update into its slot. Unregistered symbols are ignored."""
        slot = self._context.registry.lookup(update.symbol)
        if slot is None:
            self._context.status.record_unknown_symbol()
            logger.debug("Ignoring ticker for unregistered symbol %s", update.symbol)
            return False
        self._context.cache.write_quote(slot, update.quote)
        self._context.status.record_applied()
        return True
