"""In-process simulated exchange with GBM-driven tickers."""

from __future__ import annotations

import asyncio
import json
import logging
import math
import random
from collections import deque
from datetime import datetime, timezone
from typing import Any

import numpy as np

from .errors import FeedTransportError
from .interface import FeedConnection, FeedConnector
from .protocol import GET_CURRENCY, GET_SYMBOL, SUBSCRIBE_TICKER, TICKER
from .seed_tickers import (
    CURRENCY_NAMES,
    DEFAULT_DECIMALS,
    DEFAULT_SIGMA,
    DEFAULT_SPREAD,
    PRICE_DECIMALS,
    QUOTE_CURRENCIES,
    SEED_PRICES,
    TICKER_SIGMA,
)

logger = logging.getLogger(__name__)

# JSON-RPC error codes the exchange uses for unknown instruments
SYMBOL_NOT_FOUND = 2001
CURRENCY_NOT_FOUND = 2002


def split_symbol(symbol: str) -> tuple[str, str] | None:
    """Split e.g. "ETHBTC" into ("ETH", "BTC"). None if no known quote currency."""
    for quote in QUOTE_CURRENCIES:
        if symbol.endswith(quote) and len(symbol) > len(quote):
            return symbol[: -len(quote)], quote
    return None


def format_price(price: float, quote_currency: str) -> str:
    """Decimal string with the quote currency's precision."""
    decimals = PRICE_DECIMALS.get(quote_currency, DEFAULT_DECIMALS)
    return f"{price:.{decimals}f}"


class GBMSimulator:
    """Geometric Brownian Motion simulator for 24/7 crypto tickers.

    Math:
        S(t+dt) = S(t) * exp(-sigma^2/2 * dt + sigma * sqrt(dt) * Z)

    Drift is zero: the simulator only needs plausible noise. Alongside the
    last price it tracks the session open, high and low so every tick can be
    rendered as a full exchange ticker.
    """

    # Crypto never closes: 365 days * 24 hours * 3600 seconds
    SECONDS_PER_YEAR = 365 * 24 * 3600
    DEFAULT_DT = 0.5 / SECONDS_PER_YEAR  # ~1.6e-8

    def __init__(
        self,
        symbols: list[str] | None = None,
        dt: float = DEFAULT_DT,
        event_probability: float = 0.001,
    ) -> None:
        self._dt = dt
        self._event_prob = event_probability

        self._symbols: list[str] = []
        self._prices: dict[str, float] = {}
        self._open: dict[str, float] = {}
        self._high: dict[str, float] = {}
        self._low: dict[str, float] = {}
        self._sigma: dict[str, float] = {}

        for symbol in symbols or []:
            self.add_symbol(symbol)

    @property
    def symbols(self) -> list[str]:
        return list(self._symbols)

    def add_symbol(self, symbol: str) -> None:
        """Start simulating a symbol. No-op if already present."""
        if symbol in self._prices:
            return
        seed = SEED_PRICES.get(symbol, random.uniform(0.01, 100.0))
        self._symbols.append(symbol)
        self._prices[symbol] = seed
        self._open[symbol] = seed
        self._high[symbol] = seed
        self._low[symbol] = seed
        self._sigma[symbol] = TICKER_SIGMA.get(symbol, DEFAULT_SIGMA)

    def get_price(self, symbol: str) -> float | None:
        return self._prices.get(symbol)

    def step(self) -> dict[str, float]:
        """Advance every symbol by one time step. Returns {symbol: new_price}."""
        n = len(self._symbols)
        if n == 0:
            return {}

        z = np.random.standard_normal(n)
        result: dict[str, float] = {}
        for i, symbol in enumerate(self._symbols):
            sigma = self._sigma[symbol]
            drift = -0.5 * sigma**2 * self._dt
            diffusion = sigma * math.sqrt(self._dt) * z[i]
            price = self._prices[symbol] * math.exp(drift + diffusion)

            # Occasional 2-5% jump
            if random.random() < self._event_prob:
                price *= 1 + random.uniform(0.02, 0.05) * random.choice([-1, 1])

            self._prices[symbol] = price
            self._high[symbol] = max(self._high[symbol], price)
            self._low[symbol] = min(self._low[symbol], price)
            result[symbol] = price

        return result

    def ticker(self, symbol: str, quote_currency: str) -> dict[str, str]:
        """Current state of a symbol as exchange ticker fields (decimal strings)."""
        last = self._prices[symbol]
        half_spread = last * DEFAULT_SPREAD / 2
        return {
            "ask": format_price(last + half_spread, quote_currency),
            "bid": format_price(last - half_spread, quote_currency),
            "last": format_price(last, quote_currency),
            "open": format_price(self._open[symbol], quote_currency),
            "low": format_price(self._low[symbol], quote_currency),
            "high": format_price(self._high[symbol], quote_currency),
        }


class SimulatorConnection:
    """FeedConnection that answers commands the way the exchange does.

    Replies to getSymbol/getCurrency immediately. After subscribeTicker it
    produces one ``ticker`` notification per subscribed symbol every
    ``update_interval`` seconds while the reader keeps calling recv().
    """

    def __init__(
        self,
        update_interval: float = 0.5,
        event_probability: float = 0.001,
    ) -> None:
        self._interval = update_interval
        self._sim = GBMSimulator(event_probability=event_probability)
        self._outbox: deque[str] = deque()
        self._closed = False

    async def send(self, message: str) -> None:
        if self._closed:
            raise FeedTransportError("simulator connection is closed")
        try:
            command = json.loads(message)
        except ValueError:
            logger.warning("Simulator: ignoring non-JSON command %r", message)
            return

        method = command.get("method")
        params = command.get("params") or {}
        request_id = command.get("id")

        if method == GET_SYMBOL:
            self._reply_symbol(params.get("symbol", ""), request_id)
        elif method == GET_CURRENCY:
            self._reply_currency(params.get("currency", ""), request_id)
        elif method == SUBSCRIBE_TICKER:
            self._subscribe(params.get("symbol", ""), request_id)
        else:
            self._error(request_id, 1001, f"Method not found: {method}")

    async def recv(self) -> str:
        while not self._outbox:
            if self._closed:
                raise FeedTransportError("simulator connection is closed")
            await asyncio.sleep(self._interval)
            if self._sim.symbols:
                self._emit_tick()
        if self._closed:
            raise FeedTransportError("simulator connection is closed")
        return self._outbox.popleft()

    async def close(self) -> None:
        self._closed = True

    # --- Internals ---

    def _push(self, payload: dict[str, Any]) -> None:
        self._outbox.append(json.dumps({"jsonrpc": "2.0", **payload}))

    def _error(self, request_id: Any, code: int, message: str) -> None:
        self._push({"error": {"code": code, "message": message}, "id": request_id})

    def _reply_symbol(self, symbol: str, request_id: Any) -> None:
        parts = split_symbol(symbol)
        if parts is None:
            self._error(request_id, SYMBOL_NOT_FOUND, f"Symbol not found: {symbol}")
            return
        base, quote = parts
        self._push(
            {
                "result": {
                    "id": symbol,
                    "baseCurrency": base,
                    "quoteCurrency": quote,
                    "quantityIncrement": "0.001",
                    "tickSize": "0.000001",
                    "takeLiquidityRate": "0.001",
                    "provideLiquidityRate": "-0.0001",
                    "feeCurrency": quote,
                },
                "id": request_id,
            }
        )

    def _reply_currency(self, currency: str, request_id: Any) -> None:
        full_name = CURRENCY_NAMES.get(currency)
        if full_name is None:
            self._error(request_id, CURRENCY_NOT_FOUND, f"Currency not found: {currency}")
            return
        self._push(
            {
                "result": {
                    "id": currency,
                    "fullName": full_name,
                    "crypto": currency not in ("USD", "EUR"),
                    "payinEnabled": True,
                    "payoutEnabled": True,
                    "transferEnabled": True,
                    "delisted": False,
                },
                "id": request_id,
            }
        )

    def _subscribe(self, symbol: str, request_id: Any) -> None:
        parts = split_symbol(symbol)
        if parts is None:
            self._error(request_id, SYMBOL_NOT_FOUND, f"Symbol not found: {symbol}")
            return
        self._sim.add_symbol(symbol)
        self._push({"result": True, "id": request_id})
        self._push_ticker(symbol, parts[1])
        logger.info("Simulator: subscribed %s", symbol)

    def _emit_tick(self) -> None:
        self._sim.step()
        for symbol in self._sim.symbols:
            parts = split_symbol(symbol)
            if parts is not None:
                self._push_ticker(symbol, parts[1])

    def _push_ticker(self, symbol: str, quote_currency: str) -> None:
        params = self._sim.ticker(symbol, quote_currency)
        params.update(
            {
                "volume": "0",
                "volumeQuote": "0",
                "timestamp": _utc_now_iso(),
                "symbol": symbol,
            }
        )
        self._push({"method": TICKER, "params": params})


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SimulatorConnector(FeedConnector):
    """Connector for local development and tests. No network access."""

    def __init__(self, update_interval: float = 0.5, event_probability: float = 0.001) -> None:
        self._interval = update_interval
        self._event_prob = event_probability

    @property
    def name(self) -> str:
        return "simulator"

    async def connect(self) -> FeedConnection:
        logger.info("Simulator connection opened (%.2fs interval)", self._interval)
        return SimulatorConnection(
            update_interval=self._interval,
            event_probability=self._event_prob,
        )
