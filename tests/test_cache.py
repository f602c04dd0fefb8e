# tests/test_cache.py

import pytest

from kairos.core.cache import LRUCache, memoize


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_evicts_least_recently_used():
    c = LRUCache(2)
    c.set("a", 1)
    c.set("b", 2)
    assert c.get("a") == 1  # "b" is now the oldest
    c.set("c", 3)

    assert "b" not in c
    assert c.keys() == ["a", "c"]
    assert len(c) == 2


def test_overwrite_refreshes_without_growing():
    c = LRUCache(2)
    c.set("a", 1)
    c.set("b", 2)
    c.set("a", 10)
    c.set("c", 3)

    assert c.get("a") == 10
    assert not c.has("b")
    assert c.size() == 2


def test_stats_count_hits_and_misses():
    c = LRUCache(4)
    c.set("x", 1)
    c.get("x")
    c.get("x")
    c.get("y")
    c.has("x")  # membership checks leave the counters alone

    s = c.get_stats()
    assert (s.size, s.max_size, s.hits, s.misses) == (1, 4, 2, 1)
    assert s.hit_rate == pytest.approx(2 / 3)


def test_clear_resets_entries_and_stats():
    c = LRUCache(4)
    c.set("x", 1)
    c.get("x")
    c.clear()

    s = c.get_stats()
    assert (s.size, s.hits, s.misses) == (0, 0, 0)
    assert s.hit_rate == 0.0


def test_get_default_and_delete():
    c = LRUCache(4)
    assert c.get("nope", "dflt") == "dflt"
    c.set("k", None)
    assert c.get("k", "dflt") is None
    assert c.delete("k") is True
    assert c.delete("k") is False


def test_ttl_expires_entries():
    clock = FakeClock()
    c = LRUCache(4, ttl=10, clock=clock)
    c.set("k", "v")
    clock.now = 5
    assert c.get("k") == "v"
    clock.now = 16
    assert c.get("k") is None
    assert c.get_stats().misses == 1
    assert c.size() == 0


@pytest.mark.parametrize("kwargs", [{"max_size": 0}, {"max_size": 1, "ttl": 0}])
def test_rejects_bad_configuration(kwargs):
    with pytest.raises(ValueError):
        LRUCache(**kwargs)


def test_memoize_bare_and_configured():
    calls = []

    @memoize
    def square(x):
        calls.append(x)
        return x * x

    @memoize(max_size=1)
    def cube(x):
        calls.append(-x)
        return x ** 3

    assert square(3) == 9
    assert square(3) == 9
    assert calls == [3]
    assert square.cache.get_stats().hits == 1

    cube(2)
    cube(3)
    cube(2)  # evicted by cube(3)
    assert calls == [3, -2, -3, -2]

    square.cache_clear()
    square(3)
    assert calls[-1] == 3


def test_memoize_custom_key():
    @memoize(key=lambda s: s.lower())
    def shout(s):
        return s.upper()

    assert shout("abc") == "ABC"
    assert shout("ABC") == "ABC"
    assert shout.cache.size() == 1
