"""Freshness policy for cached content responses.

Two thresholds apply to an entry stored at ``t0`` with window ``w``:

- fresh (revalidate with If-None-Match) while ``now < t0 + w``
- usable as a stale fallback on transport failure while ``now < t0 + 2w``
"""

import re

from bankim_portal.entities import CacheEntryEntity

_MAX_AGE = re.compile(r"max-age=(\d+)", re.IGNORECASE)

STALE_FALLBACK_FACTOR = 2


def compute_window(default_ms: int, cache_control: str | None) -> int:
    """Freshness window for a new entry.

    Args:
        default_ms: Window to use when the server gives no max-age
        cache_control: Raw Cache-Control header value, if any

    Returns:
        max-age converted to milliseconds, or default_ms
    """
    if cache_control:
        match = _MAX_AGE.search(cache_control)
        if match:
            return int(match.group(1)) * 1000
    return default_ms


def is_fresh(entry: CacheEntryEntity, now: float) -> bool:
    return entry.age_ms(now) < entry.freshness_window_ms


def is_stale_usable(entry: CacheEntryEntity, now: float) -> bool:
    return entry.age_ms(now) < entry.freshness_window_ms * STALE_FALLBACK_FACTOR
