"""Operator HTTP API over the portal API service.

Run with:
    uvicorn bankim_portal.api.app:app
"""

from collections.abc import Callable
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bankim_portal.api.dependencies import HandlerDep, build_lifespan
from bankim_portal.config import settings
from bankim_portal.dto import (
    ApiResponse,
    CacheStats,
    ContentApiResponse,
    ContentListItem,
    TranslationUpdateRequest,
)
from bankim_portal.entities import AggregatedContentEntry
from bankim_portal.services import ApiService


def create_app(service_factory: Callable[[], ApiService] = ApiService.create) -> FastAPI:
    """Build the operator API.

    Args:
        service_factory: Builds the ApiService placed in app.state

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="BankIM Content API",
        description="Operator API for the BankIM portal content cache",
        version="0.1.0",
        lifespan=build_lifespan(service_factory),
    )

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "BankIM Content API",
            "version": "0.1.0",
            "endpoints": {
                "content": "/content",
                "cache": "/cache",
                "health": "/health",
                "docs": "/docs",
            },
        }

    @app.get("/health")
    async def health(handler: HandlerDep) -> dict:
        return await handler.health_check()

    # /content/type/... must be registered before the generic screen route
    @app.get("/content/main-page", response_model=ApiResponse[list[AggregatedContentEntry]])
    async def main_page(handler: HandlerDep):
        return await handler.get_main_page()

    @app.get("/content/type/{content_type}", response_model=ApiResponse[list[ContentListItem]])
    async def content_listing(content_type: str, handler: HandlerDep):
        return await handler.get_content_listing(content_type)

    @app.get("/content/{screen_location}/{language_code}", response_model=ApiResponse[ContentApiResponse])
    async def screen_content(screen_location: str, language_code: str, handler: HandlerDep):
        return await handler.get_screen_content(screen_location, language_code)

    @app.put("/content/items/{item_id}/translations/{language_code}", response_model=ApiResponse[dict[str, Any]])
    async def update_translation(
        item_id: str,
        language_code: str,
        request: TranslationUpdateRequest,
        handler: HandlerDep,
    ):
        return await handler.update_translation(item_id, language_code, request)

    @app.get("/cache/stats", response_model=CacheStats)
    async def cache_stats(handler: HandlerDep):
        return await handler.get_cache_stats()

    @app.delete("/cache")
    async def clear_cache(handler: HandlerDep) -> dict:
        """Clear all cached content responses."""
        return await handler.clear_cache()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("bankim_portal.api.app:app", host=settings.api_host, port=settings.api_port)
