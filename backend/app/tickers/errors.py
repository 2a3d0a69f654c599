"""Exception types for the ticker cache."""

from __future__ import annotations


class TickerCacheError(Exception):
    """Base class for all ticker cache errors."""


class ConfigurationError(TickerCacheError):
    """Symbol list or settings are unusable. Fatal before any connection is made."""


class FeedProtocolError(TickerCacheError):
    """A getSymbol/getCurrency exchange failed during initialization.

    Fatal to startup: the service never serves partially-resolved records.
    """


class MalformedMessageError(TickerCacheError):
    """An inbound streaming message could not be decoded.

    Recoverable: the ingestion loop skips the message and keeps going.
    """


class FeedTransportError(TickerCacheError):
    """The upstream connection was closed or a read/write on it failed."""
