"""BankIM Portal - content client with a conditional response cache.

This package provides a layered architecture for talking to the BankIM
management portal backend:

Layers:
    - protocols: Interface contracts (CacheStore, FallbackGuard)
    - repositories: Cache store implementations
    - services: Cache policy, request executor, aggregation, API facade
    - handlers: HTTP endpoint handlers for the operator API
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from bankim_portal.services import ApiService

    async with ApiService.create() as api:
        pages = await api.get_all_main_page_languages()
    ```

For the operator HTTP API:
    ```python
    from bankim_portal.api.app import app
    ```
"""

from bankim_portal.config import get_settings, settings
from bankim_portal.dto import ApiResponse, CacheStats, CacheStatus, ContentApiResponse
from bankim_portal.entities import AggregatedContentEntry, CacheEntryEntity, ContentKind
from bankim_portal.handlers import ContentHandler
from bankim_portal.protocols import CacheStore, FallbackGuard
from bankim_portal.repositories import InMemoryCacheStore
from bankim_portal.services import (
    AlwaysRealGuard,
    ApiService,
    ConditionalRequestExecutor,
    PlaceholderAwareGuard,
    aggregate,
)

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    # Protocols (interfaces)
    "CacheStore",
    "FallbackGuard",
    # Services (business logic)
    "ApiService",
    "ConditionalRequestExecutor",
    "AlwaysRealGuard",
    "PlaceholderAwareGuard",
    "aggregate",
    # Handlers (HTTP)
    "ContentHandler",
    # Repositories (data access)
    "InMemoryCacheStore",
    # Entities (domain models)
    "AggregatedContentEntry",
    "CacheEntryEntity",
    "ContentKind",
    # DTOs (API contracts)
    "ApiResponse",
    "CacheStats",
    "CacheStatus",
    "ContentApiResponse",
]
