"""Service settings, read from the environment."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from .tickers.errors import ConfigurationError
from .tickers.hitbtc_client import DEFAULT_URL

ENV_PREFIX = "TICKER_"
DEFAULT_SYMBOLS: tuple[str, ...] = ("BTCUSD", "ETHBTC")
FEEDS = ("hitbtc", "simulator")


def parse_symbols(raw: str) -> tuple[str, ...]:
    """Split a comma-separated symbol list. Symbols are case-sensitive.

    An empty list, an empty item or a repeated symbol is a configuration
    error rather than something to silently tidy up.
    """
    symbols = tuple(part.strip() for part in raw.split(","))
    if not any(symbols):
        raise ConfigurationError(f"{ENV_PREFIX}SYMBOLS is set but empty")
    if not all(symbols):
        raise ConfigurationError(f"{ENV_PREFIX}SYMBOLS contains an empty entry: {raw!r}")
    seen: set[str] = set()
    for symbol in symbols:
        if symbol in seen:
            raise ConfigurationError(f"{ENV_PREFIX}SYMBOLS lists {symbol} more than once")
        seen.add(symbol)
    return symbols


@dataclass(frozen=True)
class Settings:
    hostname: str = "localhost"
    port: int = 8080
    symbols: tuple[str, ...] = DEFAULT_SYMBOLS
    feed: str = "hitbtc"
    feed_url: str = DEFAULT_URL
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """Build settings from TICKER_* variables. Unset variables use defaults.

        - TICKER_HOSTNAME   bind address (default localhost)
        - TICKER_PORT       bind port (default 8080)
        - TICKER_SYMBOLS    comma-separated symbols (default BTCUSD,ETHBTC)
        - TICKER_FEED       "hitbtc" or "simulator" (default hitbtc)
        - TICKER_FEED_URL   exchange WebSocket URL
        - TICKER_LOG_LEVEL  logging level name (default INFO)
        """
        env = os.environ if environ is None else environ

        def get(name: str, default: str) -> str:
            return env.get(ENV_PREFIX + name, "").strip() or default

        raw_port = get("PORT", str(cls.port))
        try:
            port = int(raw_port)
        except ValueError as e:
            raise ConfigurationError(f"{ENV_PREFIX}PORT must be an integer, got {raw_port!r}") from e
        if not 0 < port < 65536:
            raise ConfigurationError(f"{ENV_PREFIX}PORT out of range: {port}")

        raw_symbols = env.get(ENV_PREFIX + "SYMBOLS")
        symbols = DEFAULT_SYMBOLS if raw_symbols is None else parse_symbols(raw_symbols)

        feed = get("FEED", cls.feed).lower()
        if feed not in FEEDS:
            raise ConfigurationError(f"{ENV_PREFIX}FEED must be one of {', '.join(FEEDS)}, got {feed!r}")

        return cls(
            hostname=get("HOSTNAME", cls.hostname),
            port=port,
            symbols=symbols,
            feed=feed,
            feed_url=get("FEED_URL", cls.feed_url),
            log_level=get("LOG_LEVEL", cls.log_level).upper(),
        )
