import pytest

from ideaboard.core.cache import TTLResponseCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.mark.unit
def test_entries_expire_after_ttl():
    clock = FakeClock()
    cache = TTLResponseCache(clock=clock)
    cache.set("k", ["v"], ttl=60)
    clock.now += 59
    assert cache.get("k") == ["v"]
    clock.now += 1
    assert cache.get("k") is None
    assert len(cache) == 0


@pytest.mark.unit
def test_oldest_entry_evicted_when_full():
    cache = TTLResponseCache(max_entries=2, clock=FakeClock())
    cache.set("a", 1, ttl=60)
    cache.set("b", 2, ttl=60)
    cache.set("c", 3, ttl=60)
    assert cache.get("a") is None
    assert cache.get("b") == 2 and cache.get("c") == 3


@pytest.mark.unit
def test_non_positive_ttl_is_not_stored():
    cache = TTLResponseCache(clock=FakeClock())
    cache.set("k", 1, ttl=0)
    assert cache.get("k") is None
    cache.set("k", 1, ttl=5)
    cache.clear()
    assert len(cache) == 0
