"""Thread-safe, fixed-size ticker snapshot store."""

from __future__ import annotations

from dataclasses import replace
from threading import Lock

from .models import Quote, TickerRecord


class TickerCache:
    """One ticker record per registered slot, each behind its own lock.

    Writer: the ingestion loop (one at a time).
    Readers: HTTP handlers, any number, from FastAPI's threadpool.

    Records are immutable values swapped in under the slot lock, so a reader
    always gets a record produced by a single write. There is no global lock:
    ``read_all`` copies slot by slot, so its elements are individually
    consistent but may come from slightly different instants.
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("TickerCache needs at least one slot")
        self._records: list[TickerRecord] = [TickerRecord() for _ in range(size)]
        self._locks: list[Lock] = [Lock() for _ in range(size)]  # index-aligned with _records
        self._version: int = 0  # Monotonically increasing; bumped on every quote write

    def set_static(self, slot: int, id: str, full_name: str, fee_currency: str) -> None:
        """Store the startup-resolved fields for a slot.

        Called during initialization, before any reader or the streaming
        writer exists. Quote fields already in the slot are kept.
        """
        lock = self._lock_for(slot)
        with lock:
            self._records[slot] = replace(
                self._records[slot],
                id=id,
                full_name=full_name,
                fee_currency=fee_currency,
            )

    def write_quote(self, slot: int, quote: Quote) -> TickerRecord:
        """Overwrite the six quote fields of a slot. Returns the new record."""
        lock = self._lock_for(slot)
        with lock:
            record = replace(
                self._records[slot],
                ask=quote.ask,
                bid=quote.bid,
                last=quote.last,
                open=quote.open,
                low=quote.low,
                high=quote.high,
            )
            self._records[slot] = record
            self._version += 1  # single writer, so no cross-slot race
        return record

    def read_one(self, slot: int) -> TickerRecord:
        """Point-in-time copy of one slot."""
        lock = self._lock_for(slot)
        with lock:
            return self._records[slot]

    def read_all(self) -> list[TickerRecord]:
        """Per-slot snapshots of every record, in slot order."""
        result: list[TickerRecord] = []
        for slot, lock in enumerate(self._locks):
            with lock:
                result.append(self._records[slot])
        return result

    @property
    def version(self) -> int:
        """Number of quote writes so far. Useful for SSE change detection."""
        return self._version

    def __len__(self) -> int:
        return len(self._records)

    def _lock_for(self, slot: int) -> Lock:
        # Negative indexes would silently wrap around.
        if slot < 0:
            raise IndexError(f"slot {slot} out of range")
        return self._locks[slot]
