"""Tests for the projection cache."""

from castpro_console.services.cache import InMemoryCache


def test_write_after_a_mutation_is_refused() -> None:
    cache = InMemoryCache()
    version = cache.version("casting-calls")

    cache.delete("casting-calls")

    assert not cache.set_if_unchanged("casting-calls", [7, 8], 30, version)
    assert cache.get("casting-calls") is None
    assert cache.set_if_unchanged(
        "casting-calls", [8], 30, cache.version("casting-calls")
    )
    assert cache.get("casting-calls") == [8]


def test_prune_drops_expired_entries() -> None:
    cache = InMemoryCache()
    cache.set("stale", 1, 0)
    cache.set("fresh", 2, 30)

    cache.prune()

    assert cache.keys() == ["fresh"]
