"""Fixtures for ticker cache tests."""

import pytest

from app.tickers.context import TickerContext
from feed_fakes import FakeConnection


@pytest.fixture
def symbols() -> list[str]:
    return ["ETHBTC", "BTCUSD"]


@pytest.fixture
def context(symbols) -> TickerContext:
    return TickerContext.from_symbols(symbols)


@pytest.fixture
def make_connection():
    return FakeConnection
