"""Unit tests for FallbackCache — freshness window, overwrite and eviction."""
import pytest

from fakes import FakeClock, MINUTE
from quoteboard.core.cache import FallbackCache, build_key, is_fresh, symbol_key

TTL = 5 * MINUTE


@pytest.fixture
def cache(clock):
    return FallbackCache("quote", TTL, clock)


class TestFreshness:

    def test_fresh_just_before_ttl(self, cache, clock):
        entry = cache.set("AAPL", {"price": 100})
        assert is_fresh(entry, TTL, entry.stored_at + TTL - 0.001) is True

    def test_stale_just_after_ttl(self, cache, clock):
        entry = cache.set("AAPL", {"price": 100})
        assert is_fresh(entry, TTL, entry.stored_at + TTL + 0.001) is False

    def test_exactly_ttl_is_stale(self, cache):
        entry = cache.set("AAPL", {"price": 100}, now=0)
        assert is_fresh(entry, TTL, TTL) is False

    def test_get_fresh_follows_clock(self, cache, clock):
        cache.set("AAPL", {"price": 100})
        clock.advance(TTL - 1)
        assert cache.get_fresh("AAPL").value == {"price": 100}
        clock.advance(2)
        assert cache.get_fresh("AAPL") is None

    def test_expired_entry_still_present_for_fallback(self, cache, clock):
        cache.set("AAPL", {"price": 100})
        clock.advance(24 * 60 * MINUTE)
        assert "AAPL" in cache
        assert cache.get_stale("AAPL").value == {"price": 100}
        assert cache.get("AAPL") is not None

    def test_fresh_count(self, cache, clock):
        cache.set("AAPL", 1)
        clock.advance(TTL + 1)
        cache.set("MSFT", 2)
        assert len(cache) == 2
        assert cache.fresh_count() == 1


class TestOverwriteAndEviction:

    def test_second_set_wins_with_new_timestamp(self, cache, clock):
        first = cache.set("AAPL", {"price": 100})
        clock.advance(90)
        second = cache.set("AAPL", {"price": 105})

        entry = cache.get("AAPL")
        assert entry.value == {"price": 105}
        assert entry.stored_at == second.stored_at == first.stored_at + 90
        assert len(cache) == 1

    def test_delete_only_named_key(self, cache):
        cache.set("AAPL", 1)
        cache.set("MSFT", 2)
        assert cache.delete("AAPL") is True
        assert cache.delete("AAPL") is False
        assert cache.keys() == ["MSFT"]

    def test_clear_empties_store(self, cache):
        for symbol in ("AAPL", "MSFT", "NVDA"):
            cache.set(symbol, symbol)
        assert cache.clear() == 3
        assert all(cache.get(s) is None for s in ("AAPL", "MSFT", "NVDA"))

    def test_missing_key(self, cache):
        assert cache.get("NOPE") is None
        assert cache.get_fresh("NOPE") is None
        assert cache.get_stale("NOPE") is None

    def test_clock_injected(self):
        clock = FakeClock(500.0)
        entry = FallbackCache("x", 10, clock).set("k", "v")
        assert entry.stored_at == 500.0


class TestKeys:

    def test_symbol_key_normalises(self):
        assert symbol_key(" aapl ") == "AAPL"

    def test_compound_keys_differ_by_secondary_param(self):
        assert build_key("AAPL", "1d", "5m") == "AAPL_1d_5m"
        assert build_key("AAPL", "1d", "5m") != build_key("AAPL", "5d", "5m")

    def test_none_parts_keep_position(self):
        assert build_key("AAPL", None, "5m") == "AAPL__5m"
