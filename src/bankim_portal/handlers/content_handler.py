"""HTTP handlers for content and cache operations.

Handlers convert ApiService results into HTTP responses. A failed result
from the backend becomes a 502; invalid input becomes a 400.
"""

from typing import Any

from fastapi import HTTPException, status

from bankim_portal.dto import (
    ApiResponse,
    CacheStats,
    ContentApiResponse,
    ContentListItem,
    TranslationUpdateRequest,
)
from bankim_portal.entities import AggregatedContentEntry
from bankim_portal.services import ApiService
from bankim_portal.services.content_classifier import screen_location_for


def _ensure_success(response: ApiResponse[Any], action: str) -> None:
    if not response.success:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Failed to {action}: {response.error}",
        )


class ContentHandler:
    """HTTP handlers for the operator API.

    Example:
        ```python
        handler = ContentHandler(api_service=ApiService.create())

        @app.get("/cache/stats", response_model=CacheStats)
        async def cache_stats():
            return await handler.get_cache_stats()
        ```
    """

    def __init__(self, api_service: ApiService) -> None:
        """Initialize the content handler.

        Args:
            api_service: The API facade (required).
        """
        self._api = api_service

    async def get_screen_content(self, screen_location: str, language_code: str) -> ApiResponse[ContentApiResponse]:
        """Handle GET /content/{screen_location}/{language_code} requests."""
        response = await self._api.get_content_by_screen(screen_location, language_code)
        _ensure_success(response, "fetch content")
        return response

    async def get_main_page(self) -> ApiResponse[list[AggregatedContentEntry]]:
        """Handle GET /content/main-page requests."""
        response = await self._api.get_all_main_page_languages()
        _ensure_success(response, "fetch main page content")
        return response

    async def get_content_listing(self, content_type: str) -> ApiResponse[list[ContentListItem]]:
        """Handle GET /content/type/{content_type} requests.

        Raises:
            HTTPException: 400 for an unknown content type, 502 when the
                backend call fails
        """
        if screen_location_for(content_type) is None:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown content type: {content_type}",
            )
        response = await self._api.get_content_by_content_type(content_type)
        _ensure_success(response, "fetch content listing")
        return response

    async def update_translation(
        self,
        item_id: str,
        language_code: str,
        request: TranslationUpdateRequest,
    ) -> ApiResponse[dict[str, Any]]:
        """Handle PUT /content/items/{item_id}/translations/{language_code} requests."""
        response = await self._api.update_content_translation(item_id, language_code, request.content_value)
        _ensure_success(response, "update translation")
        return response

    async def get_cache_stats(self) -> CacheStats:
        """Handle GET /cache/stats requests."""
        response = self._api.get_cache_stats()
        _ensure_success(response, "get cache stats")
        return response.data

    async def clear_cache(self) -> dict:
        """Handle DELETE /cache requests.

        Returns:
            Dict with clear operation result
        """
        response = self._api.clear_cache()
        return {
            "success": response.success,
            "deleted_count": response.data or 0,
            "message": response.message or "Content cache cleared",
        }

    async def health_check(self) -> dict:
        """Handle GET /health requests.

        Returns:
            Dict with health status
        """
        if self._api.uses_development_data:
            return {"status": "healthy", "backend_healthy": None, "development_data": True}

        response = await self._api.health_check()
        return {
            "status": "healthy" if response.success else "unhealthy",
            "backend_healthy": response.success,
            "development_data": False,
        }
