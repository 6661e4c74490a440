"""Tests for the in-process TTL cache."""

from __future__ import annotations

from unittest.mock import patch

from bestof_api.utils.cache import TTLCache


def test_least_recently_used_entry_evicted():
    cache = TTLCache(ttl=60, max_entries=2)
    cache.set("universal:vagator", 1)
    cache.set("universal:baga", 2)
    cache.get("universal:vagator")
    cache.set("universal:anjuna", 3)

    assert cache.get("universal:baga") is None
    assert cache.get("universal:vagator") == 1
    assert len(cache) == 2


def test_entries_expire():
    cache = TTLCache(ttl=10)
    with patch("bestof_api.utils.cache.time.monotonic", return_value=100.0):
        cache.set("dashboard", {"totals": {}})
    with patch("bestof_api.utils.cache.time.monotonic", return_value=111.0):
        assert cache.get("dashboard") is None


def test_get_or_compute_only_computes_on_miss():
    cache = TTLCache()
    calls = []

    def compute():
        calls.append(1)
        return {"total": 3}

    assert cache.get_or_compute("dashboard", compute) == {"total": 3}
    assert cache.get_or_compute("dashboard", compute) == {"total": 3}
    assert len(calls) == 1
