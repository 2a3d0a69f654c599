"""Process-wide feed health, exposed to read handlers."""

from __future__ import annotations

import time
from datetime import datetime, timezone
from threading import Lock
from typing import Any

CONNECTING = "connecting"
INITIALIZING = "initializing"
STREAMING = "streaming"
DISCONNECTED = "disconnected"
STOPPED = "stopped"


def _iso(ts: float | None) -> str | None:
    if ts is None:
        return None
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


class FeedStatus:
    """Feed state plus per-event counters.

    Written by the ingestion loop, read by HTTP handlers. A disconnected feed
    leaves the cache frozen; handlers use this to say so instead of serving
    stale quotes as if they were live.
    """

    def __init__(self) -> None:
        self._lock = Lock()
        self._state = CONNECTING
        self._reason: str | None = None
        self._started_at = time.time()
        self._last_event_at: float | None = None
        self._events_applied = 0
        self._malformed_events = 0
        self._unknown_symbols = 0
        self._feed_errors = 0

    def set_state(self, state: str, reason: str | None = None) -> None:
        with self._lock:
            self._state = state
            self._reason = reason

    def record_applied(self, timestamp: float | None = None) -> None:
        with self._lock:
            self._events_applied += 1
            self._last_event_at = time.time() if timestamp is None else timestamp

    def record_malformed(self) -> None:
        with self._lock:
            self._malformed_events += 1

    def record_unknown_symbol(self) -> None:
        with self._lock:
            self._unknown_symbols += 1

    def record_feed_error(self) -> None:
        with self._lock:
            self._feed_errors += 1

    @property
    def state(self) -> str:
        with self._lock:
            return self._state

    @property
    def is_live(self) -> bool:
        return self.state == STREAMING

    @property
    def last_event_at(self) -> float | None:
        with self._lock:
            return self._last_event_at

    @property
    def last_event_iso(self) -> str | None:
        return _iso(self.last_event_at)

    @property
    def malformed_events(self) -> int:
        with self._lock:
            return self._malformed_events

    @property
    def unknown_symbols(self) -> int:
        with self._lock:
            return self._unknown_symbols

    @property
    def events_applied(self) -> int:
        with self._lock:
            return self._events_applied

    def snapshot(self) -> dict[str, Any]:
        """Serialize for the /health endpoint."""
        with self._lock:
            return {
                "state": self._state,
                "reason": self._reason,
                "started_at": _iso(self._started_at),
                "last_event_at": _iso(self._last_event_at),
                "events_applied": self._events_applied,
                "malformed_events": self._malformed_events,
                "unknown_symbols": self._unknown_symbols,
                "feed_errors": self._feed_errors,
            }
