"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from bankim_portal.config import configure_logging
from bankim_portal.handlers import ContentHandler
from bankim_portal.services import ApiService

logger = logging.getLogger(__name__)


def get_api_service(request: Request) -> ApiService:
    """Dependency injection for ApiService from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The ApiService instance from app.state

    Raises:
        RuntimeError: If service is not initialized
    """
    service = getattr(request.app.state, "api_service", None)
    if service is None:
        raise RuntimeError("ApiService not initialized. Check lifespan setup.")
    return service


def get_handler(request: Request) -> ContentHandler:
    """Dependency injection for ContentHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "content_handler", None)
    if handler is None:
        raise RuntimeError("ContentHandler not initialized. Check lifespan setup.")
    return handler


def build_lifespan(service_factory: Callable[[], ApiService] = ApiService.create):
    """Create the lifespan context manager for the FastAPI app.

    Initializes the layers and stores them in app.state:
    1. Service (facade + content cache) - app.state.api_service
    2. Handler (HTTP endpoints) - app.state.content_handler

    Args:
        service_factory: Builds the ApiService; tests pass their own

    Returns:
        An asynccontextmanager suitable for FastAPI(lifespan=...)
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()

        api_service = service_factory()
        app.state.api_service = api_service
        app.state.content_handler = ContentHandler(api_service=api_service)

        logger.info("API service initialized")
        logger.info("Backend: %s (content: %s)", api_service.settings.base_url, api_service.settings.content_base_url)
        logger.info("Content cache TTL: %sms", api_service.settings.content_cache_ttl_ms)
        if api_service.uses_development_data:
            logger.warning("Backend address is a placeholder; content calls return development data")

        yield

        await api_service.close()
        del app.state.content_handler
        del app.state.api_service
        logger.info("API service shut down")

    return lifespan


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[ContentHandler, Depends(get_handler)]
ServiceDep = Annotated[ApiService, Depends(get_api_service)]
