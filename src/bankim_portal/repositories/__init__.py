"""Repository layer for data access.

The content cache lives behind the CacheStore protocol. The in-memory
implementation here is the default; anything implementing the protocol
methods can replace it.
"""

from bankim_portal.protocols import CacheStore

from .memory_cache_store import InMemoryCacheStore

__all__ = [
    "CacheStore",
    "InMemoryCacheStore",
]
