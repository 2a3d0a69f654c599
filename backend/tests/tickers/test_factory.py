"""Tests for the feed connector factory."""

from app.config import Settings
from app.tickers.factory import create_feed_connector
from app.tickers.hitbtc_client import DEFAULT_URL, HitBTCConnector
from app.tickers.simulator import SimulatorConnector


class TestFactory:
    """Tests for create_feed_connector."""

    def test_creates_hitbtc_by_default(self):
        connector = create_feed_connector(Settings())
        assert isinstance(connector, HitBTCConnector)
        assert connector.url == DEFAULT_URL

    def test_creates_simulator(self):
        connector = create_feed_connector(Settings(feed="simulator"))
        assert isinstance(connector, SimulatorConnector)

    def test_hitbtc_receives_url(self):
        connector = create_feed_connector(Settings(feed_url="wss://example.test/ws"))
        assert isinstance(connector, HitBTCConnector)
        assert connector.url == "wss://example.test/ws"
        assert connector.name == "hitbtc"
