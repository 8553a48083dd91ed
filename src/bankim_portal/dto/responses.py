"""Response DTOs returned by the API service and the operator API."""

from datetime import datetime
from enum import Enum
from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from bankim_portal.entities import ContentKind

T = TypeVar("T")


class CacheStatus(str, Enum):
    """How a cached operation obtained its data."""

    HIT = "hit"
    MISS = "miss"
    STALE = "stale"
    MOCK = "mock"


class ApiResponse(BaseModel, Generic[T]):
    """Uniform result of every API service operation.

    Callers must check ``success`` before reading ``data``.
    """

    success: bool = Field(..., description="Whether the operation succeeded")
    data: T | None = Field(None, description="Operation payload")
    error: str | None = Field(None, description="Failure reason when success is false")
    message: str | None = Field(None, description="Optional message from the backend")
    cache_status: CacheStatus | None = Field(
        None,
        description="Cache path taken for content operations (absent for uncached calls)",
    )

    @classmethod
    def ok(
        cls,
        data: Any = None,
        message: str | None = None,
        cache_status: CacheStatus | None = None,
    ) -> "ApiResponse[T]":
        return cls(success=True, data=data, message=message, cache_status=cache_status)

    @classmethod
    def fail(cls, error: str, data: Any = None) -> "ApiResponse[T]":
        return cls(success=False, error=error, data=data)


class CacheEntryStats(BaseModel):
    """Diagnostic view of a single cache entry."""

    key: str = Field(..., description="Request fingerprint")
    age_ms: float = Field(..., description="Milliseconds since the entry was stored")
    has_validator: bool = Field(..., description="Whether the entry carries an ETag/version")


class CacheStats(BaseModel):
    """Diagnostic view of the whole content cache."""

    size: int = Field(..., ge=0, description="Number of cached entries")
    entries: list[CacheEntryStats] = Field(default_factory=list)


class ContentValue(BaseModel):
    """One content key as returned by the content service."""

    model_config = ConfigDict(extra="allow")

    value: Any = None
    component_type: str = ""
    category: str = ""
    language: str = ""
    status: str = ""


class ContentApiResponse(BaseModel):
    """Content of one screen in one language."""

    status: str = "success"
    screen_location: str
    language_code: str
    content_count: int = 0
    content: dict[str, ContentValue] = Field(default_factory=dict)


class ContentListItem(BaseModel):
    """Row of a content listing (mortgage, credit, menu...)."""

    id: str
    title: str
    action_count: int = 1
    last_modified: str
    content_type: ContentKind = ContentKind.TEXT
    page_number: float


class MainPageAction(BaseModel):
    """Action shown on the main page editor."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    action_number: int
    title: str
    title_ru: str = ""
    title_he: str = ""
    title_en: str = ""
    action_type: str = "Дропдаун"
    status: Literal["published", "draft", "archived"] = "draft"
    created_by: str = "content-manager"
    last_modified: datetime
    created_at: datetime


class MainPageContent(BaseModel):
    """Single-language view of the main page and its actions."""

    page_title: str
    action_count: int
    last_modified: str
    actions: list[MainPageAction] = Field(default_factory=list)
