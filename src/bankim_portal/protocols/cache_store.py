"""Cache storage protocol.

Defines the interface for the store that keeps conditional-request
responses keyed by request fingerprint.
"""

from typing import Protocol, runtime_checkable

from bankim_portal.dto.responses import CacheStats
from bankim_portal.entities import CacheEntryEntity


@runtime_checkable
class CacheStore(Protocol):
    """Protocol for response cache backends.

    Any type that implements these methods satisfies the protocol,
    no explicit inheritance needed.
    """

    def get(self, fingerprint: str) -> CacheEntryEntity | None:
        """Look up the entry stored for a fingerprint.

        Args:
            fingerprint: The request fingerprint

        Returns:
            The cached entry, or None when nothing is stored
        """
        ...

    def put(self, fingerprint: str, entry: CacheEntryEntity) -> None:
        """Store an entry, replacing any previous one for the fingerprint.

        Args:
            fingerprint: The request fingerprint
            entry: The entry to store
        """
        ...

    def clear(self) -> int:
        """Remove every entry.

        Returns:
            Number of entries removed
        """
        ...

    def stats(self, now: float) -> CacheStats:
        """Describe the store contents without modifying them.

        Args:
            now: Current time in epoch milliseconds, used for entry ages

        Returns:
            Entry count plus per-entry age and validator presence
        """
        ...
