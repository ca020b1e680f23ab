import movie_discovery.cache as c
from movie_discovery.run_metrics import METRICS


def test_get_set_with_normalized_keys(clock):
    cache = c.TTLCache(ttl_seconds=60, clock=clock)
    cache.set("Shah Rukh Khan!", ["ddlj"], namespace="search")

    assert cache.get("shah rukh khan", namespace="search") == ["ddlj"]
    assert cache.get("shah rukh khan", namespace="enrich") is None
    assert METRICS.counter("cache.hits") == 1
    assert METRICS.counter("cache.misses") == 1


def test_entries_expire_after_ttl(clock):
    cache = c.TTLCache(ttl_seconds=60, clock=clock)
    cache.set("sholay", 1)

    clock.advance(60)
    assert cache.get("sholay") == 1

    clock.advance(0.5)
    assert cache.get("sholay") is None
    assert len(cache) == 0
    assert METRICS.counter("cache.expired") == 1


def test_lru_bound_evicts_least_recently_used(clock):
    cache = c.TTLCache(ttl_seconds=60, max_entries=2, clock=clock, metrics_prefix="lru")
    cache.set("a", 1)
    cache.set("b", 2)
    assert cache.get("a") == 1

    cache.set("c", 3)

    assert cache.get("b") is None
    assert cache.get("a") == 1
    assert cache.get("c") == 3
    assert METRICS.counter("lru.evicted") == 1


def test_last_write_wins_and_clear(clock):
    cache = c.TTLCache(ttl_seconds=60, clock=clock)
    cache.set("x", "old")
    cache.set("X!", "new")
    assert cache.get("x") == "new"
    assert len(cache) == 1

    cache.clear()
    assert len(cache) == 0


def test_make_key():
    assert c.TTLCache.make_key("Dil Chahta Hai", namespace="search") == "search:dilchahtahai"
    assert c.TTLCache.make_key("Dil Chahta Hai") == "dilchahtahai"
