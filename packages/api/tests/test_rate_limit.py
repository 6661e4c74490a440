"""Tests for the fixed-window rate limiter."""

from __future__ import annotations

from bestof_api.middleware.rate_limit import RateLimiter


def test_window_limit_and_reset():
    limiter = RateLimiter()
    assert limiter.hit("ip:1.2.3.4", "public", 2, now=0.0).remaining == 1
    assert limiter.hit("ip:1.2.3.4", "public", 2, now=1.0).allowed

    blocked = limiter.hit("ip:1.2.3.4", "public", 2, now=2.0)
    assert not blocked.allowed
    assert blocked.code == "RATE_LIMIT_EXCEEDED"
    assert blocked.retry_after == 58

    assert limiter.hit("ip:1.2.3.4", "public", 2, now=60.0).allowed


def test_burst_cap():
    limiter = RateLimiter()
    for _ in range(10):
        assert limiter.hit("key:abc", "public", 1000, now=5.0).allowed

    blocked = limiter.hit("key:abc", "public", 1000, now=5.5)
    assert blocked.code == "BURST_LIMIT_EXCEEDED"
    assert blocked.retry_after == 1
    assert limiter.hit("key:abc", "public", 1000, now=6.0).allowed


def test_admin_and_public_counted_separately():
    limiter = RateLimiter()
    assert limiter.hit("key:abc", "public", 1, now=0.0).allowed
    assert not limiter.hit("key:abc", "public", 1, now=0.1).allowed
    assert limiter.hit("key:abc", "admin", 1, now=0.2).allowed
