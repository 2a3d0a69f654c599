"""Fixed mapping between symbols and dense slot indexes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from types import MappingProxyType

from .errors import ConfigurationError


class SymbolRegistry:
    """Bidirectional symbol <-> slot mapping, built once and never changed.

    Slots are assigned in configuration order, starting at 0. Symbols are
    case-sensitive and used exactly as configured.
    """

    def __init__(self, symbols: Iterable[str]) -> None:
        ordered = tuple(symbols)
        if not ordered:
            raise ConfigurationError("At least one symbol must be configured")

        slots: dict[str, int] = {}
        for slot, symbol in enumerate(ordered):
            if not isinstance(symbol, str) or not symbol.strip():
                raise ConfigurationError(f"Invalid symbol at position {slot}: {symbol!r}")
            if symbol in slots:
                raise ConfigurationError(f"Duplicate symbol in configuration: {symbol}")
            slots[symbol] = slot

        self._symbols = ordered
        self._slots = MappingProxyType(slots)

    def lookup(self, symbol: str) -> int | None:
        """Slot for a symbol, or None if it was never registered.

        Slot 0 is a real slot, so callers must test ``is None``.
        """
        return self._slots.get(symbol)

    def symbol_at(self, slot: int) -> str:
        """Symbol registered at ``slot``. Raises IndexError when out of range."""
        if slot < 0:
            raise IndexError(f"slot {slot} out of range")
        return self._symbols[slot]

    @property
    def symbols(self) -> tuple[str, ...]:
        """All symbols in slot order."""
        return self._symbols

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._slots

    def __iter__(self) -> Iterator[str]:
        return iter(self._symbols)

    def __repr__(self) -> str:
        return f"SymbolRegistry({list(self._symbols)!r})"
