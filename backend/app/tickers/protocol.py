"""JSON-RPC codec for the exchange's WebSocket API (HitBTC v2 shape).

Outbound commands:

    {"method": "getSymbol", "params": {"symbol": "ETHBTC"}, "id": 1}
    {"method": "getCurrency", "params": {"currency": "ETH"}, "id": 2}
    {"method": "subscribeTicker", "params": {"symbol": "ETHBTC"}, "id": 3}

Inbound responses carry either ``result`` or ``error`` plus the request id.
Ticker notifications look like:

    {"jsonrpc": "2.0", "method": "ticker",
     "params": {"ask": "0.054464", "bid": "0.054463", "last": "0.054463",
                "open": "0.057133", "low": "0.053615", "high": "0.057559",
                "volume": "33068.346", "volumeQuote": "1832.687530809",
                "timestamp": "2017-10-19T15:45:44.941Z", "symbol": "ETHBTC"}}
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .errors import FeedProtocolError, MalformedMessageError
from .models import QUOTE_FIELDS, CurrencyInfo, SymbolInfo, TickerUpdate

GET_SYMBOL = "getSymbol"
GET_CURRENCY = "getCurrency"
SUBSCRIBE_TICKER = "subscribeTicker"
TICKER = "ticker"


@dataclass(frozen=True, slots=True)
class RpcError:
    """An ``error`` object sent by the exchange outside of initialization."""

    code: int | None
    message: str
    request_id: int | None = None


# --- Commands ---


def encode_command(method: str, params: dict[str, Any], request_id: int) -> str:
    return json.dumps({"method": method, "params": params, "id": request_id})


def get_symbol_command(symbol: str, request_id: int) -> str:
    return encode_command(GET_SYMBOL, {"symbol": symbol}, request_id)


def get_currency_command(currency: str, request_id: int) -> str:
    return encode_command(GET_CURRENCY, {"currency": currency}, request_id)


def subscribe_ticker_command(symbol: str, request_id: int) -> str:
    return encode_command(SUBSCRIBE_TICKER, {"symbol": symbol}, request_id)


# --- Responses (initialization) ---


def decode_response(raw: str | bytes, request_id: int) -> dict[str, Any]:
    """Return the ``result`` object of the response to ``request_id``.

    Raises FeedProtocolError for invalid JSON, an ``error`` reply, a reply to
    a different request, or a missing/non-object result.
    """
    try:
        message = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise FeedProtocolError(f"Response to request {request_id} is not valid JSON: {e}") from e

    if not isinstance(message, dict):
        raise FeedProtocolError(f"Response to request {request_id} is not a JSON object")

    if message.get("id") != request_id:
        raise FeedProtocolError(
            f"Expected response to request {request_id}, got {message.get('id')!r}"
        )

    error = message.get("error")
    if error is not None:
        detail = error.get("message") if isinstance(error, dict) else error
        raise FeedProtocolError(f"Request {request_id} failed: {detail}")

    result = message.get("result")
    if not isinstance(result, dict):
        raise FeedProtocolError(f"Response to request {request_id} has no result object")
    return result


def _required_str(result: dict[str, Any], key: str, what: str) -> str:
    value = result.get(key)
    if not isinstance(value, str) or not value:
        raise FeedProtocolError(f"{what} response is missing '{key}'")
    return value


def parse_symbol_info(result: dict[str, Any]) -> SymbolInfo:
    return SymbolInfo(
        id=str(result.get("id", "")),
        base_currency=_required_str(result, "baseCurrency", GET_SYMBOL),
        quote_currency=str(result.get("quoteCurrency", "")),
        fee_currency=_required_str(result, "feeCurrency", GET_SYMBOL),
        quantity_increment=str(result.get("quantityIncrement", "")),
        tick_size=str(result.get("tickSize", "")),
    )


def parse_currency_info(result: dict[str, Any]) -> CurrencyInfo:
    return CurrencyInfo(
        id=str(result.get("id", "")),
        full_name=_required_str(result, "fullName", GET_CURRENCY),
        crypto=bool(result.get("crypto", True)),
        delisted=bool(result.get("delisted", False)),
    )


# --- Streaming events ---


def _optional_str(params: dict[str, Any], key: str) -> str:
    # The exchange sends null for an empty side of the book.
    value = params.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise MalformedMessageError(f"ticker field '{key}' must be a string, got {type(value).__name__}")
    return value


def decode_event(raw: str | bytes) -> TickerUpdate | RpcError | None:
    """Decode one inbound streaming message.

    Returns a TickerUpdate for ticker notifications, an RpcError for error
    replies, and None for anything else (command acknowledgements, other
    notifications). Raises MalformedMessageError when the message is not
    valid JSON or a ticker notification is missing required fields.
    """
    try:
        message = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise MalformedMessageError(f"invalid JSON: {e}") from e

    if not isinstance(message, dict):
        raise MalformedMessageError("message is not a JSON object")

    if message.get("error") is not None:
        error = message["error"]
        if isinstance(error, dict):
            code = error.get("code")
            return RpcError(
                code=code if isinstance(code, int) else None,
                message=str(error.get("message", "")),
                request_id=message.get("id"),
            )
        return RpcError(code=None, message=str(error), request_id=message.get("id"))

    if message.get("method") != TICKER:
        return None

    params = message.get("params")
    if not isinstance(params, dict):
        raise MalformedMessageError("ticker notification has no params object")

    symbol = params.get("symbol")
    if not isinstance(symbol, str) or not symbol:
        raise MalformedMessageError("ticker notification has no symbol")

    quote = {name: _optional_str(params, name) for name in QUOTE_FIELDS}
    return TickerUpdate(
        symbol=symbol,
        volume=_optional_str(params, "volume"),
        volume_quote=_optional_str(params, "volumeQuote"),
        timestamp=_optional_str(params, "timestamp"),
        **quote,
    )
