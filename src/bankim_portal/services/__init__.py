"""Service layer for business logic.

This layer contains the content cache policy, the request executor, the
multilingual aggregation and the API facade. Services depend on protocols
(interfaces), not concrete implementations, making them testable and
flexible.

Architecture:
    Handler -> ApiService -> ConditionalRequestExecutor -> CacheStore
    (HTTP)  -> (Facade)   -> (Network + cache policy)   -> (Data)

Usage:
    ```python
    from bankim_portal.services import ApiService

    # Using factory method (recommended)
    api = ApiService.create()

    # Or manual creation
    api = ApiService(settings=settings, client=client, store=store, guard=guard)
    ```
"""

from .api_service import ApiService
from .content_aggregator import aggregate
from .fallback_guard import AlwaysRealGuard, PlaceholderAwareGuard, build_fallback_guard
from .request_executor import ConditionalRequestExecutor, RequestOptions, compute_fingerprint

__all__ = [
    "AlwaysRealGuard",
    "ApiService",
    "ConditionalRequestExecutor",
    "PlaceholderAwareGuard",
    "RequestOptions",
    "aggregate",
    "build_fallback_guard",
    "compute_fingerprint",
]
