"""Disposable projection cache for backend records."""

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        """Store a cached value with a TTL in seconds."""

    def delete(self, key: str) -> None:
        """Discard a cached value."""


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


@dataclass
class InMemoryCache(Cache):
    """In-memory cache; every entry may be dropped and re-fetched at any time.

    A key read through `version` is tracked from then on, and every write or
    delete bumps it. A reader records the version before going to the
    backend and stores its result with `set_if_unchanged`, so a fetch that
    overlapped a mutation never overwrites the mutation's effect.
    """

    _entries: dict[str, _CacheEntry]
    _versions: dict[str, int]

    def __init__(self) -> None:
        self._entries = {}
        self._versions = {}

    def get(self, key: str) -> object | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if datetime.now(tz=UTC) >= entry.expires_at:
            self._entries.pop(key, None)
            return None
        return entry.value

    def set(self, key: str, value: object, ttl_seconds: int) -> None:
        expires_at = datetime.now(tz=UTC) + timedelta(seconds=ttl_seconds)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)
        self._bump(key)

    def set_if_unchanged(
        self, key: str, value: object, ttl_seconds: int, version: int
    ) -> bool:
        """Store the value only if nothing touched the key since `version`."""
        if self.version(key) != version:
            return False
        self.set(key, value, ttl_seconds)
        return True

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)
        self._bump(key)

    def version(self, key: str) -> int:
        return self._versions.setdefault(key, 0)

    def expires_at(self, key: str) -> datetime | None:
        entry = self._entries.get(key)
        return entry.expires_at if entry else None

    def prune(self) -> None:
        """Drop every expired entry."""
        now = datetime.now(tz=UTC)
        for key in [k for k, e in self._entries.items() if now >= e.expires_at]:
            del self._entries[key]

    def keys(self) -> list[str]:
        return list(self._entries)

    def _bump(self, key: str) -> None:
        if key in self._versions:
            self._versions[key] += 1
