"""Tests for ticker data models."""

import json
from dataclasses import FrozenInstanceError

import pytest

from app.tickers.models import QUOTE_FIELDS, Quote, TickerRecord, TickerUpdate


class TestTickerRecord:
    """Unit tests for the TickerRecord model."""

    def test_to_dict_key_order(self):
        """Serialized keys follow the published response layout."""
        record = TickerRecord(id="ETH", full_name="Ethereum", fee_currency="BTC")
        assert list(record.to_dict()) == [
            "id",
            "fullName",
            "ask",
            "bid",
            "last",
            "open",
            "low",
            "high",
            "feeCurrency",
        ]

    def test_to_dict_serializes_exactly(self):
        record = TickerRecord(
            id="ETH",
            full_name="Ethereum",
            ask="0.054464",
            bid="0.054463",
            last="0.054463",
            open="0.057133",
            low="0.053615",
            high="0.057559",
            fee_currency="BTC",
        )
        assert json.dumps(record.to_dict(), separators=(",", ":")) == (
            '{"id":"ETH","fullName":"Ethereum","ask":"0.054464","bid":"0.054463",'
            '"last":"0.054463","open":"0.057133","low":"0.053615","high":"0.057559",'
            '"feeCurrency":"BTC"}'
        )

    def test_quote_values_stay_strings(self):
        record = TickerRecord(ask="0.000100")
        assert record.to_dict()["ask"] == "0.000100"

    def test_defaults_are_empty_strings(self):
        assert set(TickerRecord().to_dict().values()) == {""}

    def test_quote_property(self):
        record = TickerRecord(ask="1", bid="2", last="3", open="4", low="5", high="6")
        assert record.quote == Quote(ask="1", bid="2", last="3", open="4", low="5", high="6")

    def test_immutability(self):
        record = TickerRecord()
        with pytest.raises(FrozenInstanceError):
            record.ask = "1"  # type: ignore[misc]


class TestTickerUpdate:
    def test_quote_excludes_volume_and_symbol(self):
        update = TickerUpdate(
            symbol="ETHBTC",
            ask="1",
            bid="2",
            last="3",
            open="4",
            low="5",
            high="6",
            volume="100",
            volume_quote="5.5",
            timestamp="2017-10-19T15:45:44.941Z",
        )
        assert update.quote == Quote(ask="1", bid="2", last="3", open="4", low="5", high="6")

    def test_quote_fields_constant_matches_quote(self):
        assert QUOTE_FIELDS == tuple(Quote.__dataclass_fields__)
