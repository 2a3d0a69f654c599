"""Data models for ticker snapshots and decoded feed messages."""

from __future__ import annotations

from dataclasses import dataclass

# Quote fields in wire order. Values are decimal strings exactly as the
# exchange sent them; they are never parsed into floats.
QUOTE_FIELDS: tuple[str, ...] = ("ask", "bid", "last", "open", "low", "high")


@dataclass(frozen=True, slots=True)
class Quote:
    """The six continuously-updated price fields of a ticker."""

    ask: str = ""
    bid: str = ""
    last: str = ""
    open: str = ""
    low: str = ""
    high: str = ""


@dataclass(frozen=True, slots=True)
class TickerRecord:
    """Immutable snapshot of one symbol's cached ticker.

    ``id``, ``full_name`` and ``fee_currency`` are resolved once at startup.
    The quote fields are replaced as a group by the ingestion loop.
    """

    id: str = ""
    full_name: str = ""
    ask: str = ""
    bid: str = ""
    last: str = ""
    open: str = ""
    low: str = ""
    high: str = ""
    fee_currency: str = ""

    @property
    def quote(self) -> Quote:
        return Quote(
            ask=self.ask,
            bid=self.bid,
            last=self.last,
            open=self.open,
            low=self.low,
            high=self.high,
        )

    def to_dict(self) -> dict[str, str]:
        """Serialize for JSON responses. Key order is part of the contract."""
        return {
            "id": self.id,
            "fullName": self.full_name,
            "ask": self.ask,
            "bid": self.bid,
            "last": self.last,
            "open": self.open,
            "low": self.low,
            "high": self.high,
            "feeCurrency": self.fee_currency,
        }


@dataclass(frozen=True, slots=True)
class TickerUpdate:
    """A decoded ``ticker`` notification from the exchange."""

    symbol: str
    ask: str
    bid: str
    last: str
    open: str
    low: str
    high: str
    volume: str = ""
    volume_quote: str = ""
    timestamp: str = ""  # ISO-8601, as sent

    @property
    def quote(self) -> Quote:
        return Quote(
            ask=self.ask,
            bid=self.bid,
            last=self.last,
            open=self.open,
            low=self.low,
            high=self.high,
        )


@dataclass(frozen=True, slots=True)
class SymbolInfo:
    """Result of a ``getSymbol`` request."""

    id: str
    base_currency: str
    quote_currency: str
    fee_currency: str
    quantity_increment: str = ""
    tick_size: str = ""


@dataclass(frozen=True, slots=True)
class CurrencyInfo:
    """Result of a ``getCurrency`` request."""

    id: str
    full_name: str
    crypto: bool = True
    delisted: bool = False
