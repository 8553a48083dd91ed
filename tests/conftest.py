"""Shared fixtures for the portal client tests."""

from collections.abc import Callable

import httpx
import pytest

from bankim_portal.config import Settings
from bankim_portal.repositories import InMemoryCacheStore
from bankim_portal.services import AlwaysRealGuard, ApiService

BACKEND_URL = "http://backend.test"
CONTENT_URL = "http://content.test"


class FakeClock:
    """Epoch-milliseconds clock that only moves when told to."""

    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def envelope(data, **extra) -> dict:
    """Backend success envelope."""
    return {"success": True, "data": data, **extra}


def screen_payload(language: str, content: dict, screen: str = "main_page") -> dict:
    return {
        "status": "success",
        "screen_location": screen,
        "language_code": language,
        "content_count": len(content),
        "content": content,
    }


def content_value(value, component_type: str = "dropdown", status: str = "approved") -> dict:
    return {
        "value": value,
        "component_type": component_type,
        "category": "dropdowns",
        "language": "",
        "status": status,
    }


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryCacheStore:
    return InMemoryCacheStore()


@pytest.fixture
def real_settings() -> Settings:
    """Settings pointing at a non-placeholder backend."""
    return Settings(
        api_url=BACKEND_URL,
        content_api_url=CONTENT_URL,
        use_real_content_data=False,
        content_cache_ttl_ms=1000,
        primary_language="ru",
        content_languages=("ru", "he", "en"),
    )


@pytest.fixture
def placeholder_settings() -> Settings:
    """Settings with the local default backend address, which is a placeholder."""
    return Settings(
        api_url="http://localhost:3001",
        content_api_url=None,
        use_real_content_data=False,
        primary_language="ru",
        content_languages=("ru", "he", "en"),
    )


@pytest.fixture
def make_service(real_settings, store, clock) -> Callable[..., ApiService]:
    """Build an ApiService whose HTTP calls are answered by ``handler``."""

    def factory(handler, settings: Settings | None = None, guard=None) -> ApiService:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return ApiService.create(
            settings=settings or real_settings,
            client=client,
            store=store,
            guard=guard or AlwaysRealGuard(),
            clock=clock,
        )

    return factory
