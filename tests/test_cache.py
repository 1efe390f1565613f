import pytest

from accountsapi.cache import ExpiringCache


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return ExpiringCache(timeout=1.0, clock=clock)


def test_get_missing_key_returns_none(cache: ExpiringCache) -> None:
    assert cache.get("nope") is None
    assert cache.has("nope") is False


def test_entry_lives_until_timeout_then_evicted(cache: ExpiringCache, clock: FakeClock) -> None:
    cache.set("u1", {"id": "u1"})

    clock.now = 0.5
    assert cache.get("u1") == {"id": "u1"}

    clock.now = 1.5
    assert cache.get("u1") is None
    assert len(cache) == 0

    clock.now = 1.6
    assert cache.has("u1") is False


def test_entry_expires_exactly_at_timeout(cache: ExpiringCache, clock: FakeClock) -> None:
    cache.set("k", "v")
    clock.now = 0.999
    assert cache.has("k")
    clock.now = 1.0
    assert not cache.has("k")


def test_has_evicts_expired_entry(cache: ExpiringCache, clock: FakeClock) -> None:
    cache.set("k", "v")
    clock.now = 2.0
    assert len(cache) == 1  # nothing is swept until observed
    assert cache.has("k") is False
    assert len(cache) == 0


def test_per_call_timeout_overrides_default(cache: ExpiringCache, clock: FakeClock) -> None:
    cache.set("short", 1, timeout=0.1)
    cache.set("long", 2, timeout=10)
    clock.now = 5
    assert cache.get("short") is None
    assert cache.get("long") == 2


def test_overwrite_replaces_value_and_expiry(cache: ExpiringCache, clock: FakeClock) -> None:
    cache.set("k", "v1", timeout=100)
    cache.set("k", "v2", timeout=0.2)
    assert cache.get("k") == "v2"
    clock.now = 0.3
    assert cache.get("k") is None


def test_overwrite_refreshes_expiry(cache: ExpiringCache, clock: FakeClock) -> None:
    cache.set("k", "v1")
    clock.now = 0.9
    cache.set("k", "v2")
    clock.now = 1.5
    assert cache.get("k") == "v2"


def test_falsy_values_are_cached(cache: ExpiringCache) -> None:
    cache.set("empty", {})
    assert cache.has("empty")
    assert cache.get("empty") == {}


def test_delete_and_clear(cache: ExpiringCache) -> None:
    cache.set("a", 1)
    cache.set("b", 2)
    cache.delete("a")
    cache.delete("missing")
    assert "a" not in cache
    assert "b" in cache

    cache.clear()
    assert len(cache) == 0
    assert cache.get("b") is None
