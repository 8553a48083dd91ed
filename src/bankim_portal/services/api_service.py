"""API service for the BankIM management portal backend.

One coroutine per backend operation. Content operations go through the
conditional request executor and its cache; everything else is a plain
request. Every operation returns an ApiResponse and never raises, so
callers check ``success`` before reading ``data``.
"""

import asyncio
import logging
import re
from collections.abc import Callable
from datetime import datetime
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from bankim_portal.config import Settings, settings as default_settings
from bankim_portal.dto import (
    ApiResponse,
    CacheStats,
    CacheStatus,
    ContentApiResponse,
    ContentListItem,
    FormulaData,
    MainPageAction,
    MainPageActionCreate,
    MainPageActionUpdate,
    MainPageContent,
)
from bankim_portal.entities import (
    AggregatedContentEntry,
    AggregationDefaults,
    ContentStatus,
    ExecutionOutcome,
    ExecutionResult,
)
from bankim_portal.protocols import CacheStore, FallbackGuard
from bankim_portal.repositories import InMemoryCacheStore

from . import content_classifier, mock_payloads
from .content_aggregator import aggregate, display_value
from .fallback_guard import build_fallback_guard
from .request_executor import ConditionalRequestExecutor, RequestOptions, now_ms

logger = logging.getLogger(__name__)

CONTENT_PREFIX = "/api/content"
MAIN_PAGE_SCREEN = "main_page"
MAIN_PAGE_TITLE_KEY = "app.main.page.title"
DEFAULT_MAIN_PAGE_TITLE = "Калькулятор ипотеки Страница №2"

_MAIN_PAGE_ACTION = re.compile(r"app\.main\.action\.(\d+)\.dropdown\.")

_CACHE_STATUS = {
    ExecutionOutcome.REVALIDATED: CacheStatus.HIT,
    ExecutionOutcome.FETCHED: CacheStatus.MISS,
    ExecutionOutcome.STALE_FALLBACK: CacheStatus.STALE,
}


class ApiService:
    """Facade over the portal backend.

    Depends on PROTOCOLS for the cache store and the fallback guard, so
    tests can build independent instances with their own store, guard,
    transport and clock.

    Example:
        ```python
        async with ApiService.create() as api:
            response = await api.get_content_by_screen("main_page", "ru")
            if response.success:
                print(response.data.content_count)
        ```
    """

    def __init__(
        self,
        settings: Settings,
        client: httpx.AsyncClient,
        store: CacheStore,
        guard: FallbackGuard,
        clock: Callable[[], float] = now_ms,
        owns_client: bool = False,
    ) -> None:
        """Initialize the API service.

        Args:
            settings: Backend addresses, cache TTL and languages.
            client: HTTP client used for every backend call.
            store: Content cache store owned by this service.
            guard: Placeholder detection strategy.
            clock: Returns the current time in epoch milliseconds.
            owns_client: Close the client in close().
        """
        self._settings = settings
        self._client = client
        self._store = store
        self._guard = guard
        self._clock = clock
        self._owns_client = owns_client
        self._executor = ConditionalRequestExecutor(client, store, clock)

    @classmethod
    def create(
        cls,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        store: CacheStore | None = None,
        guard: FallbackGuard | None = None,
        clock: Callable[[], float] = now_ms,
    ) -> "ApiService":
        """Factory method to create ApiService with sensible defaults.

        Args:
            settings: If None, uses the environment settings.
            client: If None, creates an AsyncClient owned by the service.
            store: If None, creates an empty in-memory store.
            guard: If None, selected from settings.use_real_content_data.
            clock: Epoch-milliseconds clock.

        Returns:
            Configured ApiService instance
        """
        settings = settings or default_settings
        owns_client = client is None
        if client is None:
            client = httpx.AsyncClient(timeout=settings.request_timeout)
        return cls(
            settings=settings,
            client=client,
            store=store or InMemoryCacheStore.create(),
            guard=guard or build_fallback_guard(settings),
            clock=clock,
            owns_client=owns_client,
        )

    async def close(self) -> None:
        """Close the HTTP client if this service created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "ApiService":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def uses_development_data(self) -> bool:
        """Whether guarded operations are answered with development payloads."""
        return self._guard.is_placeholder_target(self._settings.base_url)

    @property
    def store(self) -> CacheStore:
        """Get the underlying cache store (for testing)."""
        return self._store

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    def _url(self, endpoint: str, content: bool = False) -> str:
        if content and endpoint.startswith(CONTENT_PREFIX):
            return f"{self._settings.content_base_url}{endpoint}"
        return f"{self._settings.base_url}{endpoint}"

    def _uses_mock_data(self, operation: str) -> bool:
        if self._guard.is_placeholder_target(self._settings.base_url):
            logger.warning(
                "API URL %s is a placeholder, returning development data for %s",
                self._settings.base_url,
                operation,
            )
            return True
        return False

    def _respond(
        self,
        response_type: Any,
        result: ExecutionResult,
        cached: bool = False,
    ) -> Any:
        if not result.success:
            return response_type.fail(result.error or "Unknown error occurred")
        try:
            return response_type.ok(
                data=result.data,
                message=result.message,
                cache_status=_CACHE_STATUS.get(result.outcome) if cached else None,
            )
        except ValidationError as e:
            logger.error("Unexpected response payload: %s", e)
            return response_type.fail("Invalid response payload from server")

    def _mock(self, response_type: Any, data: Any) -> Any:
        return response_type.ok(data=data, cache_status=CacheStatus.MOCK)

    async def _request(
        self,
        endpoint: str,
        response_type: Any = ApiResponse[Any],
        method: str = "GET",
        body: Any = None,
    ) -> Any:
        result = await self._executor.send(self._url(endpoint), RequestOptions(method=method, body=body))
        return self._respond(response_type, result)

    async def _cached_request(self, endpoint: str, response_type: Any = ApiResponse[Any]) -> Any:
        result = await self._executor.execute(
            self._url(endpoint, content=True),
            RequestOptions(),
            default_freshness_ms=self._settings.content_cache_ttl_ms,
        )
        return self._respond(response_type, result, cached=True)

    # ------------------------------------------------------------------
    # Cache administration
    # ------------------------------------------------------------------

    def clear_cache(self) -> ApiResponse[int]:
        """Drop every cached content response.

        Returns:
            ApiResponse with the number of entries removed
        """
        count = self._store.clear()
        logger.info("Content cache cleared (%d entries)", count)
        return ApiResponse[int].ok(data=count, message="Content cache cleared")

    def get_cache_stats(self) -> ApiResponse[CacheStats]:
        return ApiResponse[CacheStats].ok(data=self._store.stats(self._clock()))

    # ------------------------------------------------------------------
    # Service / diagnostics
    # ------------------------------------------------------------------

    async def health_check(self) -> ApiResponse[dict[str, Any]]:
        return await self._request("/health", ApiResponse[dict[str, Any]])

    async def get_db_info(self) -> ApiResponse[Any]:
        return await self._request("/api/db-info")

    # ------------------------------------------------------------------
    # Calculator formula
    # ------------------------------------------------------------------

    async def get_calculator_formula(self) -> ApiResponse[FormulaData]:
        return await self._request("/api/calculator-formula", ApiResponse[FormulaData])

    async def update_calculator_formula(self, formula: FormulaData) -> ApiResponse[FormulaData]:
        return await self._request(
            "/api/calculator-formula",
            ApiResponse[FormulaData],
            method="PUT",
            body=formula.model_dump(by_alias=True, exclude_none=True),
        )

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def get_all_users(self) -> ApiResponse[list[Any]]:
        return await self._request("/api/users", ApiResponse[list[Any]])

    async def get_user_by_id(self, user_id: int) -> ApiResponse[Any]:
        return await self._request(f"/api/users/{user_id}")

    async def create_user(self, user_data: dict[str, Any]) -> ApiResponse[Any]:
        return await self._request("/api/users", method="POST", body=user_data)

    async def update_user(self, user_id: int, user_data: dict[str, Any]) -> ApiResponse[Any]:
        return await self._request(f"/api/users/{user_id}", method="PUT", body=user_data)

    async def delete_user(self, user_id: int) -> ApiResponse[Any]:
        return await self._request(f"/api/users/{user_id}", method="DELETE")

    # ------------------------------------------------------------------
    # UI settings
    # ------------------------------------------------------------------

    async def get_ui_settings(self) -> ApiResponse[list[dict[str, Any]]]:
        return await self._request("/api/ui-settings", ApiResponse[list[dict[str, Any]]])

    async def get_ui_setting_by_key(self, key: str) -> ApiResponse[dict[str, Any]]:
        return await self._request(f"/api/ui-settings/{quote(key, safe='')}", ApiResponse[dict[str, Any]])

    async def update_ui_setting(self, key: str, value: str) -> ApiResponse[dict[str, Any]]:
        return await self._request(
            f"/api/ui-settings/{quote(key, safe='')}",
            ApiResponse[dict[str, Any]],
            method="PUT",
            body={"settingValue": value},
        )

    # ------------------------------------------------------------------
    # Content items, translations, categories, languages
    # ------------------------------------------------------------------

    async def get_content_items(self) -> ApiResponse[list[dict[str, Any]]]:
        return await self._request("/api/content-items", ApiResponse[list[dict[str, Any]]])

    async def get_content_item_by_id(self, item_id: str) -> ApiResponse[dict[str, Any]]:
        return await self._request(f"/api/content-items/{item_id}", ApiResponse[dict[str, Any]])

    async def create_content_item(self, content_data: dict[str, Any]) -> ApiResponse[dict[str, Any]]:
        return await self._request(
            "/api/content-items", ApiResponse[dict[str, Any]], method="POST", body=content_data
        )

    async def update_content_translation(
        self,
        item_id: str,
        language_code: str,
        content_value: str,
    ) -> ApiResponse[dict[str, Any]]:
        return await self._request(
            f"/api/content-items/{item_id}/translations/{language_code}",
            ApiResponse[dict[str, Any]],
            method="PUT",
            body={"content_value": content_value},
        )

    async def update_menu_translation(
        self,
        item_id: str,
        language_code: str,
        content_value: str,
    ) -> ApiResponse[Any]:
        return await self._request(
            f"/api/content-items/{item_id}/translations/{language_code}",
            method="PUT",
            body={"content_value": content_value},
        )

    async def get_content_categories(self) -> ApiResponse[list[dict[str, Any]]]:
        return await self._request("/api/content-categories", ApiResponse[list[dict[str, Any]]])

    async def get_languages(self) -> ApiResponse[list[dict[str, Any]]]:
        return await self._request("/api/languages", ApiResponse[list[dict[str, Any]]])

    # ------------------------------------------------------------------
    # Screen content (cached)
    # ------------------------------------------------------------------

    async def get_content_by_screen(
        self,
        screen_location: str,
        language_code: str,
    ) -> ApiResponse[ContentApiResponse]:
        """Content of one screen in one language.

        Args:
            screen_location: Screen identifier, e.g. "main_page"
            language_code: Language code, e.g. "ru"

        Returns:
            ApiResponse with the screen content; cache_status tells whether
            it came from the network, a 304 revalidation, the stale cache
            or the development payloads
        """
        response_type = ApiResponse[ContentApiResponse]
        if self._uses_mock_data("content by screen"):
            return self._mock(response_type, mock_payloads.content_by_screen(screen_location, language_code))
        return await self._cached_request(f"{CONTENT_PREFIX}/{screen_location}/{language_code}", response_type)

    async def get_content_by_key(self, content_key: str, language_code: str) -> ApiResponse[Any]:
        if self._uses_mock_data("content by key"):
            return self._mock(ApiResponse[Any], mock_payloads.content_by_key(content_key, language_code))
        return await self._cached_request(f"{CONTENT_PREFIX}/{content_key}/{language_code}")

    async def get_mortgage_content(self) -> ApiResponse[Any]:
        response = await self._cached_request(f"{CONTENT_PREFIX}/mortgage")
        if not response.success:
            logger.error("Failed to fetch mortgage content: %s", response.error)
        return response

    async def get_menu_translations(self) -> ApiResponse[Any]:
        response = await self._cached_request(f"{CONTENT_PREFIX}/menu/translations")
        if not response.success:
            logger.error("Failed to fetch menu translations: %s", response.error)
            return ApiResponse[Any].fail(response.error or "Failed to fetch menu translations from database")
        return response

    async def get_dropdown_options(self, action_number: int) -> ApiResponse[list[Any]]:
        return await self._request(
            f"{CONTENT_PREFIX}/{MAIN_PAGE_SCREEN}/action/{action_number}/options", ApiResponse[list[Any]]
        )

    async def get_mortgage_dropdown_options(self, content_key: str) -> ApiResponse[list[Any]]:
        return await self._request(
            f"{CONTENT_PREFIX}/mortgage/{quote(content_key, safe='')}/options", ApiResponse[list[Any]]
        )

    async def get_text_content(self, action_id: str) -> ApiResponse[dict[str, Any]]:
        return await self._request(f"{CONTENT_PREFIX}/text/{action_id}", ApiResponse[dict[str, Any]])

    async def get_content_by_content_type(self, content_type: str) -> ApiResponse[list[ContentListItem]]:
        """Listing of the pages of one content type.

        Args:
            content_type: One of mortgage, mortgage-refi, credit,
                credit-refi, general, menu

        Returns:
            ApiResponse with rows ordered by page number; an empty list when
            the backend has nothing for the type
        """
        response_type = ApiResponse[list[ContentListItem]]
        if content_classifier.screen_location_for(content_type) is None:
            logger.error("Unknown content type: %s", content_type)
            return response_type.fail(f"Unknown content type: {content_type}", data=[])

        response = await self._cached_request(f"{CONTENT_PREFIX}/{content_type}")
        if not response.success:
            return response_type.fail(response.error or "Failed to fetch content", data=[])

        items = content_classifier.extract_items(content_type, response.data)
        if not items:
            logger.warning("Content listing for %s is empty", content_type)
            return response_type.ok(data=[], cache_status=response.cache_status)

        classified = content_classifier.classify_items(content_type, items)
        logger.info("Fetched %d %s items", len(classified), content_type)
        return response_type.ok(data=classified, cache_status=response.cache_status)

    # ------------------------------------------------------------------
    # Main page
    # ------------------------------------------------------------------

    async def get_all_main_page_languages(
        self,
        languages: list[str] | None = None,
        defaults: AggregationDefaults | None = None,
    ) -> ApiResponse[list[AggregatedContentEntry]]:
        """Main page actions merged across languages.

        Languages are fetched concurrently; a language that fails is
        skipped. The call fails only when no language could be fetched.

        Args:
            languages: Language codes to merge, defaults to the configured ones
            defaults: Bookkeeping values for the aggregated entries

        Returns:
            ApiResponse with entries sorted by action number
        """
        response_type = ApiResponse[list[AggregatedContentEntry]]
        languages = languages or list(self._settings.content_languages)
        responses = await asyncio.gather(
            *(self.get_content_by_screen(MAIN_PAGE_SCREEN, language) for language in languages),
            return_exceptions=True,
        )

        valid: list[ContentApiResponse] = []
        for language, response in zip(languages, responses):
            if isinstance(response, BaseException):
                logger.error("Error fetching content for language %s: %s", language, response)
            elif response.success and response.data is not None:
                valid.append(response.data)
            else:
                logger.warning("Failed to fetch content for language %s: %s", language, response.error)

        if not valid:
            return response_type.fail("No content data available for any language")

        entries = aggregate(valid, primary_language=self._settings.primary_language, defaults=defaults)
        return response_type.ok(data=entries)

    async def get_main_page_content(self) -> ApiResponse[MainPageContent]:
        """Main page actions in the primary language."""
        response_type = ApiResponse[MainPageContent]
        content_response = await self.get_content_by_screen(MAIN_PAGE_SCREEN, self._settings.primary_language)
        if not content_response.success or content_response.data is None:
            logger.error("Error fetching main page content: %s", content_response.error)
            return response_type.fail(content_response.error or "Failed to fetch content")

        content = content_response.data.content
        now = datetime.fromtimestamp(self._clock() / 1000)
        actions: list[MainPageAction] = []
        for key, value in content.items():
            match = _MAIN_PAGE_ACTION.search(key)
            if not match:
                continue
            action_number = int(match.group(1))
            text = display_value(value.value)
            actions.append(
                MainPageAction(
                    id=f"action-{action_number}",
                    action_number=action_number,
                    title=f"{action_number}.{text}",
                    title_ru=text,
                    status=ContentStatus.from_backend(value.status).value,
                    last_modified=now,
                    created_at=now,
                )
            )
        actions.sort(key=lambda action: action.action_number)

        page_title = content.get(MAIN_PAGE_TITLE_KEY)
        title_text = display_value(page_title.value) if page_title else ""
        return response_type.ok(
            data=MainPageContent(
                page_title=title_text or DEFAULT_MAIN_PAGE_TITLE,
                action_count=len(actions),
                last_modified=now.strftime("%d.%m.%Y | %H:%M"),
                actions=actions,
            ),
            cache_status=content_response.cache_status,
        )

    async def get_main_page_action(self, action_id: str) -> ApiResponse[MainPageAction | None]:
        response_type = ApiResponse[MainPageAction | None]
        page = await self.get_main_page_content()
        if not page.success or page.data is None:
            return response_type.fail(page.error or "Failed to load main page content")
        found = next((action for action in page.data.actions if action.id == action_id), None)
        return response_type.ok(data=found)

    async def update_main_page_action(
        self,
        action_id: str,
        update: MainPageActionUpdate,
    ) -> ApiResponse[MainPageAction]:
        response_type = ApiResponse[MainPageAction]
        body = update.model_dump(by_alias=True, exclude_none=True)
        if self._uses_mock_data("update main page action"):
            return self._mock(response_type, mock_payloads.main_page_action(action_id, body))
        return await self._request(
            f"{CONTENT_PREFIX}/main/actions/{action_id}", response_type, method="PUT", body=body
        )

    async def create_main_page_action(self, action: MainPageActionCreate) -> ApiResponse[MainPageAction]:
        response_type = ApiResponse[MainPageAction]
        body = action.model_dump(by_alias=True, exclude_none=True, mode="json")
        if self._uses_mock_data("create main page action"):
            return self._mock(response_type, mock_payloads.created_main_page_action(body))
        return await self._request(f"{CONTENT_PREFIX}/main/actions", response_type, method="POST", body=body)

    async def delete_main_page_action(self, action_id: str) -> ApiResponse[Any]:
        response_type = ApiResponse[Any]
        if self._uses_mock_data("delete main page action"):
            return self._mock(response_type, None)
        return await self._request(f"{CONTENT_PREFIX}/main/actions/{action_id}", response_type, method="DELETE")
