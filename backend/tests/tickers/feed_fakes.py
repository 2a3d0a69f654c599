"""Scripted stand-ins for the exchange connection and its messages.

FakeConnection replays a list of inbound messages, records everything sent,
and reports a lost connection once the script runs out.
"""

import json

from app.tickers.errors import FeedTransportError


class FakeConnection:
    def __init__(self, messages=None):
        self._messages = list(messages or [])
        self.sent: list[str] = []
        self.closed = False

    async def send(self, message: str) -> None:
        if self.closed:
            raise FeedTransportError("closed")
        self.sent.append(message)

    async def recv(self) -> str:
        if self.closed or not self._messages:
            raise FeedTransportError("connection closed by peer")
        return self._messages.pop(0)

    async def close(self) -> None:
        self.closed = True

    def sent_commands(self) -> list[dict]:
        return [json.loads(message) for message in self.sent]


def symbol_reply(request_id: int, base: str, quote: str, fee: str | None = None) -> str:
    return json.dumps(
        {
            "jsonrpc": "2.0",
            "result": {
                "id": base + quote,
                "baseCurrency": base,
                "quoteCurrency": quote,
                "quantityIncrement": "0.001",
                "tickSize": "0.000001",
                "takeLiquidityRate": "0.001",
                "provideLiquidityRate": "-0.0001",
                "feeCurrency": fee or quote,
            },
            "id": request_id,
        }
    )


def currency_reply(request_id: int, currency: str, full_name: str) -> str:
    return json.dumps(
        {
            "jsonrpc": "2.0",
            "result": {"id": currency, "fullName": full_name, "crypto": True, "delisted": False},
            "id": request_id,
        }
    )


def ticker_event(symbol: str, **overrides) -> str:
    params = {
        "ask": "0.054464",
        "bid": "0.054463",
        "last": "0.054463",
        "open": "0.057133",
        "low": "0.053615",
        "high": "0.057559",
        "volume": "33068.346",
        "volumeQuote": "1832.687530809",
        "timestamp": "2017-10-19T15:45:44.941Z",
        "symbol": symbol,
    }
    params.update(overrides)
    return json.dumps({"jsonrpc": "2.0", "method": "ticker", "params": params})


def init_script() -> list[str]:
    """Replies for initializing ["ETHBTC", "BTCUSD"], in request order."""
    return [
        symbol_reply(1, "ETH", "BTC"),
        currency_reply(2, "ETH", "Ethereum"),
        symbol_reply(3, "BTC", "USD"),
        currency_reply(4, "BTC", "Bitcoin"),
    ]
