import asyncio
from concurrent.futures import ThreadPoolExecutor

import pytest
from prometheus_client import REGISTRY

from babelroom.services.cache import CacheSweeper, TranslationCache


def evictions(reason):
    return REGISTRY.get_sample_value("translation_cache_evictions_total", {"reason": reason}) or 0.0


def test_lookup_miss_then_hit(clock):
    cache = TranslationCache(max_entries=10, clock=clock)

    assert cache.lookup("Hello", "en", "es") is None
    assert cache.store("Hello", "en", "es", "Hola")
    assert cache.lookup("Hello", "en", "es") == "Hola"

    stats = cache.get_stats()
    assert stats["hits"] == 1
    assert stats["misses"] == 1
    assert stats["hit_rate_percent"] == 50.0


def test_key_includes_language_pair(clock):
    cache = TranslationCache(max_entries=10, clock=clock)
    cache.store("Hello", "en", "es", "Hola")

    assert cache.lookup("Hello", "en", "fr") is None
    assert cache.lookup("Hello", "es", "en") is None
    assert cache.lookup("hello", "en", "es") is None


def test_surrounding_whitespace_is_ignored(clock):
    cache = TranslationCache(max_entries=10, clock=clock)
    cache.store("  Hello ", "en", "es", "Hola")

    assert cache.lookup("Hello", "en", "es") == "Hola"


def test_hit_updates_access_metadata(clock):
    cache = TranslationCache(max_entries=10, clock=clock)
    cache.store("Hello", "en", "es", "Hola")
    created = cache.get_entry("Hello", "en", "es").created_at

    clock.advance(30)
    cache.lookup("Hello", "en", "es")
    cache.lookup("Hello", "en", "es")

    entry = cache.get_entry("Hello", "en", "es")
    assert entry.hit_count == 2
    assert entry.last_accessed_at == created + 30
    assert entry.created_at == created


def test_consecutive_lookups_are_stable(clock):
    cache = TranslationCache(max_entries=10, clock=clock)
    cache.store("Thank you", "en", "es", "Gracias")

    assert cache.lookup("Thank you", "en", "es") == cache.lookup("Thank you", "en", "es")


def test_empty_text_is_never_cached(clock):
    cache = TranslationCache(max_entries=10, clock=clock)

    assert cache.store("", "en", "es", "") is False
    assert cache.store("   ", "en", "es", "x") is False
    assert len(cache) == 0


def test_size_never_exceeds_capacity(clock):
    cache = TranslationCache(max_entries=5, clock=clock)

    for i in range(5 + 12):
        cache.store(f"phrase {i}", "en", "es", f"frase {i}")
        assert len(cache) <= 5

    assert len(cache) == 5
    assert cache.get_stats()["evictions"] == 12


def test_eviction_follows_insertion_order_not_reads(clock):
    cache = TranslationCache(max_entries=3, clock=clock)
    cache.store("one", "en", "es", "uno")
    cache.store("two", "en", "es", "dos")
    cache.store("three", "en", "es", "tres")

    # Reading the oldest entry does not protect it
    for _ in range(5):
        cache.lookup("one", "en", "es")

    cache.store("four", "en", "es", "cuatro")

    assert cache.get_entry("one", "en", "es") is None
    assert cache.lookup("two", "en", "es") == "dos"
    assert cache.lookup("four", "en", "es") == "cuatro"


def test_overwrite_counts_as_fresh_insert(clock):
    cache = TranslationCache(max_entries=2, clock=clock)
    cache.store("one", "en", "es", "uno")
    cache.store("two", "en", "es", "dos")

    clock.advance(10)
    cache.store("one", "en", "es", "UNO")
    assert len(cache) == 2
    assert cache.get_entry("one", "en", "es").created_at == clock.now

    cache.store("three", "en", "es", "tres")

    assert cache.lookup("one", "en", "es") == "UNO"
    assert cache.get_entry("two", "en", "es") is None


def test_sweep_removes_only_expired_entries(clock):
    cache = TranslationCache(max_entries=10, ttl_seconds=30 * 60, clock=clock)
    cache.store("old", "en", "es", "viejo")
    clock.advance(20 * 60)
    cache.store("new", "en", "es", "nuevo")
    clock.advance(11 * 60)

    removed = cache.sweep()

    assert removed == 1
    assert cache.get_entry("old", "en", "es") is None
    assert cache.lookup("new", "en", "es") == "nuevo"


def test_evictions_are_labelled_capacity_or_expired(clock):
    cache = TranslationCache(max_entries=1, ttl_seconds=60, clock=clock)
    capacity_before, expired_before = evictions("capacity"), evictions("expired")

    cache.store("one", "en", "es", "uno")
    cache.store("two", "en", "es", "dos")
    clock.advance(61)
    cache.sweep()

    assert evictions("capacity") - capacity_before == 1
    assert evictions("expired") - expired_before == 1
    assert REGISTRY.get_sample_value("translation_cache_evictions_total", {"reason": "ttl"}) is None


def test_sweep_ignores_recent_reads(clock):
    cache = TranslationCache(max_entries=10, ttl_seconds=60, clock=clock)
    cache.store("Hello", "en", "es", "Hola")

    clock.advance(59)
    cache.lookup("Hello", "en", "es")
    clock.advance(2)

    assert cache.sweep() == 1
    assert cache.lookup("Hello", "en", "es") is None


def test_sweep_with_explicit_now(clock):
    cache = TranslationCache(max_entries=10, ttl_seconds=60, clock=clock)
    cache.store("Hello", "en", "es", "Hola")

    assert cache.sweep(now=clock.now + 60) == 0
    assert cache.sweep(now=clock.now + 61) == 1


def test_clear(clock):
    cache = TranslationCache(max_entries=10, clock=clock)
    cache.store("Hello", "en", "es", "Hola")
    cache.clear()

    assert len(cache) == 0
    assert cache.lookup("Hello", "en", "es") is None


def test_invalid_capacity():
    with pytest.raises(ValueError):
        TranslationCache(max_entries=0)


def test_concurrent_writers_respect_capacity():
    cache = TranslationCache(max_entries=20)

    def writer(worker: int):
        for i in range(200):
            cache.store(f"w{worker}-{i}", "en", "es", "x")
            cache.lookup(f"w{worker}-{i}", "en", "es")

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(writer, range(8)))

    assert len(cache) == 20
    assert cache.get_stats()["cache_size"] == 20


@pytest.mark.asyncio
async def test_sweeper_expires_entries_in_background(clock):
    cache = TranslationCache(max_entries=10, ttl_seconds=60, clock=clock)
    cache.store("Hello", "en", "es", "Hola")
    clock.advance(120)

    sweeper = CacheSweeper(cache, interval=0.01)
    sweeper.start()
    assert sweeper.is_running
    try:
        for _ in range(100):
            if len(cache) == 0:
                break
            await asyncio.sleep(0.01)
    finally:
        await sweeper.stop()

    assert len(cache) == 0
    assert not sweeper.is_running
