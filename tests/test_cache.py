"""Tests for the TTL result cache."""

import pytest

from cache import ResultCache, make_key


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ResultCache(ttl=60, clock=clock)


def test_missing_key_is_absent(cache):
    assert cache.get("nobody:user") is None


def test_put_then_get(cache):
    cache.put("octocat:user", {"login": "octocat"})

    assert cache.get("octocat:user") == {"login": "octocat"}


def test_entry_valid_until_ttl_elapses(cache, clock):
    cache.put("k", [1, 2, 3])

    clock.advance(60)
    assert cache.get("k") == [1, 2, 3]

    clock.advance(0.001)
    assert cache.get("k") is None
    assert len(cache) == 0


def test_expired_get_evicts_entry(cache, clock):
    cache.put("k", "v")
    clock.advance(120)

    assert cache.get("k") is None
    assert "k" not in cache.get_cache_info()["cache_keys"]


def test_payloads_are_copied(cache):
    payload = {"languages": [{"name": "Go"}]}
    cache.put("k", payload)

    payload["languages"].append({"name": "Rust"})
    first = cache.get("k")
    first["languages"].clear()

    assert cache.get("k") == {"languages": [{"name": "Go"}]}


def test_last_writer_wins(cache):
    cache.put("k", 1)
    cache.put("k", 2)

    assert cache.get("k") == 2


def test_rewrite_restarts_ttl(cache, clock):
    cache.put("k", 1)
    clock.advance(50)
    cache.put("k", 2)
    clock.advance(50)

    assert cache.get("k") == 2


def test_clear_expired(cache, clock):
    cache.put("old", 1)
    clock.advance(61)
    cache.put("fresh", 2)

    assert cache.clear_expired() == 1
    assert cache.get_cache_info()["cache_keys"] == ["fresh"]


def test_cache_info(cache, clock):
    cache.put("a", 1)
    clock.advance(10)

    info = cache.get_cache_info()

    assert info["cached_entries"] == 1
    assert info["cache_timeout"] == 60
    assert info["cache_details"]["a"] == {"age_seconds": 10.0, "is_valid": True}


def test_clear(cache):
    cache.put("a", 1)
    cache.clear()

    assert len(cache) == 0


@pytest.mark.parametrize(
    "args, expected",
    [
        (("octocat", "user"), "octocat:user"),
        (("OctoCat", "languages"), "octocat:languages"),
        (("octocat", "commits", 30), "octocat:commits:30"),
        (("octocat", "analytics", 90), "octocat:analytics:90"),
    ],
)
def test_make_key(args, expected):
    assert make_key(*args) == expected
