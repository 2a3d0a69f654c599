"""Tests for TickerCache."""

import threading
import time
from dataclasses import asdict

import pytest

from app.tickers.cache import TickerCache
from app.tickers.models import Quote, TickerRecord

F1 = Quote(ask="1.1", bid="1.0", last="1.05", open="1.0", low="0.9", high="1.2")
F2 = Quote(ask="2.1", bid="2.0", last="2.05", open="2.0", low="1.9", high="2.2")


class TestTickerCache:
    """Unit tests for the per-slot snapshot store."""

    def test_initial_records_are_empty(self):
        cache = TickerCache(2)
        assert cache.read_all() == [TickerRecord(), TickerRecord()]

    def test_zero_size_rejected(self):
        with pytest.raises(ValueError):
            TickerCache(0)

    def test_set_static(self):
        cache = TickerCache(1)
        cache.set_static(0, id="ETH", full_name="Ethereum", fee_currency="BTC")
        record = cache.read_one(0)
        assert record.id == "ETH"
        assert record.full_name == "Ethereum"
        assert record.fee_currency == "BTC"
        assert record.quote == Quote()

    def test_write_quote_replaces_quote_fields(self):
        cache = TickerCache(1)
        cache.write_quote(0, F1)
        assert cache.read_one(0).quote == F1

    def test_write_quote_keeps_static_fields(self):
        """Quote writes never touch id, fullName or feeCurrency."""
        cache = TickerCache(1)
        cache.set_static(0, id="ETH", full_name="Ethereum", fee_currency="BTC")
        cache.write_quote(0, F1)
        cache.write_quote(0, F2)
        record = cache.read_one(0)
        assert record.quote == F2
        assert (record.id, record.full_name, record.fee_currency) == ("ETH", "Ethereum", "BTC")

    def test_write_quote_returns_new_record(self):
        cache = TickerCache(1)
        record = cache.write_quote(0, F1)
        assert record == cache.read_one(0)

    def test_writes_are_isolated_per_slot(self):
        cache = TickerCache(3)
        cache.write_quote(1, F1)
        assert cache.read_one(0) == TickerRecord()
        assert cache.read_one(1).quote == F1
        assert cache.read_one(2) == TickerRecord()

    def test_read_all_slot_order(self):
        cache = TickerCache(3)
        for slot in range(3):
            cache.set_static(slot, id=f"C{slot}", full_name=f"Coin {slot}", fee_currency="USD")
        assert [record.id for record in cache.read_all()] == ["C0", "C1", "C2"]

    def test_read_all_returns_a_copy(self):
        cache = TickerCache(1)
        snapshot = cache.read_all()
        cache.write_quote(0, F1)
        assert snapshot == [TickerRecord()]

    def test_read_one_is_a_point_in_time_value(self):
        cache = TickerCache(1)
        cache.write_quote(0, F1)
        before = cache.read_one(0)
        cache.write_quote(0, F2)
        assert before.quote == F1

    def test_version_increments_on_quote_writes(self):
        cache = TickerCache(2)
        v0 = cache.version
        cache.write_quote(0, F1)
        assert cache.version == v0 + 1
        cache.write_quote(1, F2)
        assert cache.version == v0 + 2

    def test_set_static_does_not_bump_version(self):
        cache = TickerCache(1)
        cache.set_static(0, id="ETH", full_name="Ethereum", fee_currency="BTC")
        assert cache.version == 0

    def test_out_of_range_slot(self):
        cache = TickerCache(2)
        with pytest.raises(IndexError):
            cache.read_one(2)
        with pytest.raises(IndexError):
            cache.write_quote(-1, F1)

    def test_len(self):
        assert len(TickerCache(5)) == 5


class TestTickerCacheConcurrency:
    """Locking behaviour under real threads."""

    def test_no_torn_reads(self):
        """A reader sees exactly F1's or F2's fields, never a mix."""
        cache = TickerCache(1)
        cache.write_quote(0, F1)
        stop = threading.Event()
        torn: list[Quote] = []

        def writer():
            while not stop.is_set():
                cache.write_quote(0, F2)
                cache.write_quote(0, F1)

        def reader():
            while not stop.is_set():
                quote = cache.read_one(0).quote
                if quote not in (F1, F2):
                    torn.append(quote)

        threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(4)]
        for t in threads:
            t.start()
        time.sleep(0.3)
        stop.set()
        for t in threads:
            t.join()

        assert torn == []

    def test_read_all_elements_never_torn(self):
        cache = TickerCache(3)
        stop = threading.Event()
        torn: list[dict] = []

        def writer():
            while not stop.is_set():
                for slot in range(3):
                    cache.write_quote(slot, F1)
                    cache.write_quote(slot, F2)

        def reader():
            while not stop.is_set():
                for record in cache.read_all():
                    if record.quote not in (Quote(), F1, F2):
                        torn.append(asdict(record))

        threads = [threading.Thread(target=writer), threading.Thread(target=reader)]
        for t in threads:
            t.start()
        time.sleep(0.2)
        stop.set()
        for t in threads:
            t.join()

        assert torn == []

    def test_distinct_slots_do_not_block_each_other(self):
        """Holding one slot's lock leaves every other slot readable and writable."""
        cache = TickerCache(2)
        held = threading.Event()
        release = threading.Event()

        def hold_slot_zero():
            with cache._locks[0]:
                held.set()
                release.wait(timeout=5)

        holder = threading.Thread(target=hold_slot_zero)
        holder.start()
        try:
            assert held.wait(timeout=5)
            result: list = []
            worker = threading.Thread(
                target=lambda: result.extend([cache.write_quote(1, F1), cache.read_one(1)])
            )
            worker.start()
            worker.join(timeout=1)
            assert not worker.is_alive()
            assert result[1].quote == F1
        finally:
            release.set()
            holder.join()

    def test_same_slot_waits_for_lock(self):
        cache = TickerCache(1)
        held = threading.Event()
        release = threading.Event()

        def hold_slot_zero():
            with cache._locks[0]:
                held.set()
                release.wait(timeout=5)

        holder = threading.Thread(target=hold_slot_zero)
        holder.start()
        try:
            assert held.wait(timeout=5)
            worker = threading.Thread(target=cache.write_quote, args=(0, F1))
            worker.start()
            worker.join(timeout=0.2)
            assert worker.is_alive()
        finally:
            release.set()
            holder.join()
        worker.join(timeout=5)
        assert cache.read_one(0).quote == F1
