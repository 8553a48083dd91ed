"""Handler layer for HTTP endpoints.

This layer contains the HTTP request/response handlers of the operator API.
Handlers depend on the API service, not directly on the cache store.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .content_handler import ContentHandler

__all__ = [
    "ContentHandler",
]
