"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (in-memory store, placeholder detection)
- Unit testing with independent instances per test
- Clear separation of concerns

Usage:
    ```python
    from bankim_portal.protocols import CacheStore, FallbackGuard

    store: CacheStore = InMemoryCacheStore()
    guard: FallbackGuard = PlaceholderAwareGuard()
    ```
"""

from .cache_store import CacheStore
from .fallback_guard import FallbackGuard

__all__ = [
    "CacheStore",
    "FallbackGuard",
]
