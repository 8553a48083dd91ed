"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for one cached backend response.

    Attributes:
        fingerprint: Deterministic key of the request that produced the entry
        payload: Decoded response data handed back to callers on a hit
        validator: ETag (or content-version marker) used for If-None-Match
        stored_at: Epoch milliseconds when the entry was written
        freshness_window_ms: How long the entry is trusted for revalidation
    """

    fingerprint: str
    payload: Any
    validator: str | None
    stored_at: float
    freshness_window_ms: int

    @property
    def has_validator(self) -> bool:
        """Whether the entry can produce a conditional request header."""
        return bool(self.validator)

    def age_ms(self, now: float) -> float:
        """Milliseconds elapsed since the entry was stored."""
        return now - self.stored_at
