"""In-memory cache store.

Holds one entry per request fingerprint for the lifetime of the owning
API service. Entries are never expired out of the store; staleness is
decided by the freshness policy, and stale entries remain available for
the network-failure fallback until clear() is called.
"""

import dataclasses

from bankim_portal.dto.responses import CacheEntryStats, CacheStats
from bankim_portal.entities import CacheEntryEntity


class InMemoryCacheStore:
    """Dict-backed implementation of the CacheStore protocol.

    Example:
        ```python
        store = InMemoryCacheStore()
        store.put(entry.fingerprint, entry)
        store.get(entry.fingerprint)
        ```
    """

    def __init__(self) -> None:
        self._entries: dict[str, CacheEntryEntity] = {}

    @classmethod
    def create(cls) -> "InMemoryCacheStore":
        """Factory method for symmetry with the other layers."""
        return cls()

    def get(self, fingerprint: str) -> CacheEntryEntity | None:
        return self._entries.get(fingerprint)

    def put(self, fingerprint: str, entry: CacheEntryEntity) -> None:
        """Store an entry (last write wins).

        stored_at never moves backwards for a fingerprint: a write stamped
        earlier than the current entry keeps the current timestamp.
        """
        previous = self._entries.get(fingerprint)
        if previous is not None and entry.stored_at < previous.stored_at:
            entry = dataclasses.replace(entry, stored_at=previous.stored_at)
        self._entries[fingerprint] = entry

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count

    def stats(self, now: float) -> CacheStats:
        return CacheStats(
            size=len(self._entries),
            entries=[
                CacheEntryStats(
                    key=key,
                    age_ms=entry.age_ms(now),
                    has_validator=entry.has_validator,
                )
                for key, entry in self._entries.items()
            ],
        )

    def __len__(self) -> int:
        return len(self._entries)
