"""Tests for the in-memory cache store."""

from bankim_portal.entities import CacheEntryEntity
from bankim_portal.protocols import CacheStore
from bankim_portal.repositories import InMemoryCacheStore


def make_entry(fingerprint: str, stored_at: float, validator: str | None = "v1") -> CacheEntryEntity:
    return CacheEntryEntity(
        fingerprint=fingerprint,
        payload={"stored_at": stored_at},
        validator=validator,
        stored_at=stored_at,
        freshness_window_ms=1000,
    )


def test_store_satisfies_protocol():
    assert isinstance(InMemoryCacheStore(), CacheStore)


def test_get_missing_returns_none():
    assert InMemoryCacheStore().get("missing") is None


def test_put_last_write_wins():
    store = InMemoryCacheStore()
    store.put("F", make_entry("F", 0))
    store.put("F", make_entry("F", 10, validator="v2"))

    entry = store.get("F")
    assert entry.validator == "v2"
    assert entry.payload == {"stored_at": 10}
    assert len(store) == 1


def test_stored_at_never_moves_backwards():
    store = InMemoryCacheStore()
    store.put("F", make_entry("F", 500))
    store.put("F", make_entry("F", 100, validator="v2"))

    entry = store.get("F")
    assert entry.stored_at == 500
    assert entry.validator == "v2"


def test_clear_returns_removed_count():
    store = InMemoryCacheStore()
    store.put("A", make_entry("A", 0))
    store.put("B", make_entry("B", 0))

    assert store.clear() == 2
    assert store.get("A") is None
    assert store.clear() == 0


def test_stats_reports_age_and_validator_without_mutation():
    store = InMemoryCacheStore()
    store.put("A", make_entry("A", 100))
    store.put("B", make_entry("B", 400, validator=None))

    stats = store.stats(now=1000)

    assert stats.size == 2
    by_key = {item.key: item for item in stats.entries}
    assert by_key["A"].age_ms == 900
    assert by_key["A"].has_validator is True
    assert by_key["B"].age_ms == 600
    assert by_key["B"].has_validator is False
    assert store.stats(now=1000) == stats
    assert len(store) == 2
