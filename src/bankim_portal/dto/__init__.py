"""Data Transfer Objects for API contracts.

These Pydantic models define the shapes exchanged with the backend and
with callers of the API service. They are used for validation and
serialization.

Internal domain logic should use entities from the entities package.
"""

from .requests import (
    FormulaData,
    MainPageActionCreate,
    MainPageActionUpdate,
    TranslationUpdateRequest,
)
from .responses import (
    ApiResponse,
    CacheEntryStats,
    CacheStats,
    CacheStatus,
    ContentApiResponse,
    ContentListItem,
    ContentValue,
    MainPageAction,
    MainPageContent,
)

__all__ = [
    "ApiResponse",
    "CacheEntryStats",
    "CacheStats",
    "CacheStatus",
    "ContentApiResponse",
    "ContentListItem",
    "ContentValue",
    "FormulaData",
    "MainPageAction",
    "MainPageActionCreate",
    "MainPageActionUpdate",
    "MainPageContent",
    "TranslationUpdateRequest",
]
