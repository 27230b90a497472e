"""Tests for cache.py – TTL cache."""
import pytest

from timetable_clashes.cache import TTLCache


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


class TestTTLCache:
    def test_missing(self):
        assert TTLCache(60).get("grid") == (None, False)

    def test_valid_until_ttl(self):
        cache = TTLCache(60)
        cache.set("grid", "doc", now=100)
        assert cache.get("grid", now=100) == ("doc", True)
        assert cache.get("grid", now=159.9) == ("doc", True)

    def test_expired_returns_stale_value(self):
        cache = TTLCache(60)
        cache.set("grid", "doc", now=100)
        assert cache.get("grid", now=160) == ("doc", False)

    def test_injected_clock(self):
        clock = FakeClock(10)
        cache = TTLCache(30, clock=clock)
        cache.set("grid", "doc")
        clock.now = 39
        assert cache.get("grid") == ("doc", True)
        clock.now = 40
        assert cache.get("grid") == ("doc", False)

    def test_invalidate(self):
        cache = TTLCache(60)
        cache.set("a", 1, now=0)
        cache.set("b", 2, now=0)
        cache.invalidate("a")
        assert cache.get("a", now=1) == (None, False)
        assert cache.get("b", now=1) == (2, True)
        cache.invalidate()
        assert cache.get("b", now=1) == (None, False)

    def test_get_or_load(self):
        clock = FakeClock(0)
        cache = TTLCache(30, clock=clock)
        calls = []

        def loader():
            calls.append(clock.now)
            return f"doc@{clock.now}"

        assert cache.get_or_load("grid", loader) == "doc@0"
        clock.now = 10
        assert cache.get_or_load("grid", loader) == "doc@0"
        clock.now = 30
        assert cache.get_or_load("grid", loader) == "doc@30"
        assert calls == [0, 30]

    @pytest.mark.parametrize("ttl", [0, -5])
    def test_bad_ttl(self, ttl):
        with pytest.raises(ValueError, match="ttl must be positive"):
            TTLCache(ttl)
