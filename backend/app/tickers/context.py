"""Explicit owner of the registry, the cache and the feed status."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from .cache import TickerCache
from .models import TickerRecord
from .registry import SymbolRegistry
from .status import FeedStatus


@dataclass
class TickerContext:
    """Everything the ingestion loop and the HTTP handlers share.

    Built once at startup and passed to both sides; nothing lives in module
    globals.
    """

    registry: SymbolRegistry
    cache: TickerCache
    status: FeedStatus = field(default_factory=FeedStatus)

    @classmethod
    def from_symbols(cls, symbols: Iterable[str]) -> TickerContext:
        registry = SymbolRegistry(symbols)
        return cls(registry=registry, cache=TickerCache(len(registry)))

    def lookup(self, symbol: str) -> int | None:
        return self.registry.lookup(symbol)

    def read_one(self, slot: int) -> TickerRecord:
        return self.cache.read_one(slot)

    def read_all(self) -> list[TickerRecord]:
        return self.cache.read_all()

    def get(self, symbol: str) -> TickerRecord | None:
        """Lookup + read in one call, or None for an unregistered symbol."""
        slot = self.registry.lookup(symbol)
        if slot is None:
            return None
        return self.cache.read_one(slot)
