"""
Tests for the operator API.
"""

import httpx
import pytest
from fastapi.testclient import TestClient

from bankim_portal.api.app import create_app
from bankim_portal.services import AlwaysRealGuard, ApiService, PlaceholderAwareGuard

from conftest import content_value, envelope, screen_payload


def backend(request: httpx.Request) -> httpx.Response:
    """Fake portal backend behind the operator API."""
    path = request.url.path
    if path == "/health":
        return httpx.Response(200, json=envelope({"status": "ok"}))
    if path == "/api/content/mortgage":
        rows = [{"id": 3, "title_ru": "4.Выбор банка", "action_count": 2}]
        return httpx.Response(200, json=envelope({"mortgage_content": rows}), headers={"ETag": "m1"})
    if path.startswith("/api/content/main_page/"):
        language = path.rsplit("/", 1)[-1]
        payload = screen_payload(language, {"app.main.action.1.dropdown.income": content_value(f"income-{language}")})
        return httpx.Response(200, json=envelope(payload), headers={"ETag": f"{language}-1"})
    if path.startswith("/api/content-items/") and request.method == "PUT":
        return httpx.Response(200, json=envelope({"updated": True}))
    if path == "/api/content/credit":
        return httpx.Response(500, json={"success": False, "error": "database unavailable"})
    return httpx.Response(404, json={"success": False, "error": "Not found"})


@pytest.fixture
def client(real_settings, store, clock):
    """Test client whose service talks to the fake backend."""

    def factory() -> ApiService:
        return ApiService.create(
            settings=real_settings,
            client=httpx.AsyncClient(transport=httpx.MockTransport(backend)),
            store=store,
            guard=AlwaysRealGuard(),
            clock=clock,
        )

    with TestClient(create_app(service_factory=factory)) as test_client:
        yield test_client


@pytest.fixture
def dev_client(placeholder_settings):
    """Test client whose service answers from development data."""

    def factory() -> ApiService:
        return ApiService.create(settings=placeholder_settings, guard=PlaceholderAwareGuard())

    with TestClient(create_app(service_factory=factory)) as test_client:
        yield test_client


def test_root(dev_client):
    """Test root endpoint."""
    response = dev_client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "BankIM Content API"
    assert "cache" in data["endpoints"]


def test_health_with_development_data(dev_client):
    response = dev_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "backend_healthy": None, "development_data": True}


def test_health_with_backend(client):
    response = client.get("/health")
    assert response.json()["backend_healthy"] is True


def test_main_page_with_development_data(dev_client):
    response = dev_client.get("/content/main-page")
    assert response.status_code == 200
    entries = response.json()["data"]
    assert [entry["sequence"] for entry in entries] == [1, 2, 3, 4, 5, 6, 7]
    assert entries[0]["kind"] == "dropdown"
    assert set(entries[0]["titles"]) == {"ru", "he", "en"}


def test_screen_content_with_development_data(dev_client):
    response = dev_client.get("/content/main_page/he")
    assert response.status_code == 200
    data = response.json()
    assert data["cache_status"] == "mock"
    assert data["data"]["language_code"] == "he"
    assert data["data"]["content_count"] == 7


def test_screen_content_is_cached(client):
    first = client.get("/content/main_page/ru")
    assert first.json()["cache_status"] == "miss"

    stats = client.get("/cache/stats").json()
    assert stats["size"] == 1
    assert stats["entries"][0]["has_validator"] is True


def test_main_page_from_backend(client):
    response = client.get("/content/main-page")
    assert response.status_code == 200
    entries = response.json()["data"]
    assert len(entries) == 1
    assert entries[0]["title"] == "income-ru"
    assert entries[0]["titles"] == {"ru": "income-ru", "he": "income-he", "en": "income-en"}


def test_content_listing(client):
    response = client.get("/content/type/mortgage")
    assert response.status_code == 200
    items = response.json()["data"]
    assert items[0]["id"] == "3"
    assert items[0]["content_type"] == "dropdown"
    assert items[0]["page_number"] == 4


def test_content_listing_unknown_type(dev_client):
    response = dev_client.get("/content/type/insurance")
    assert response.status_code == 400
    assert "insurance" in response.json()["detail"]


def test_content_listing_backend_failure(client):
    response = client.get("/content/type/credit")
    assert response.status_code == 502
    assert "database unavailable" in response.json()["detail"]


def test_update_translation(client):
    response = client.put("/content/items/12/translations/en", json={"content_value": "Hello"})
    assert response.status_code == 200
    assert response.json()["data"] == {"updated": True}


def test_update_translation_rejects_empty_value(client):
    response = client.put("/content/items/12/translations/en", json={"content_value": ""})
    assert response.status_code == 422


def test_clear_cache(client):
    client.get("/content/main_page/ru")
    client.get("/content/main_page/he")

    response = client.delete("/cache")
    assert response.status_code == 200
    assert response.json()["deleted_count"] == 2
    assert client.get("/cache/stats").json()["size"] == 0
