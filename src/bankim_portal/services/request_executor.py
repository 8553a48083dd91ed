"""Conditional request executor.

Issues JSON requests against the backend and, for cached calls, keeps the
content cache consistent with the server:

1. A fresh entry with a validator adds ``If-None-Match`` to the request.
2. ``304 Not Modified`` reuses the cached payload without writing the store.
3. Any other success stores the payload when the server sent an ``ETag``
   or ``Bankim-Content-Version`` header.
4. A transport failure (no response at all) falls back to a cached payload
   younger than twice its freshness window.

Server error responses never fall back to the cache; the server's message
is reported to the caller instead.
"""

import hashlib
import json
import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

from bankim_portal.entities import CacheEntryEntity, ExecutionOutcome, ExecutionResult
from bankim_portal.protocols import CacheStore

from .freshness import compute_window, is_fresh, is_stale_usable

logger = logging.getLogger(__name__)

VALIDATOR_HEADER = "ETag"
CONTENT_VERSION_HEADER = "Bankim-Content-Version"
CONDITIONAL_HEADER = "If-None-Match"

# Headers that must not influence the fingerprint
_IGNORED_FINGERPRINT_HEADERS = frozenset({"if-none-match", "if-modified-since"})


def now_ms() -> float:
    """Current wall clock time in epoch milliseconds."""
    return time.time() * 1000


@dataclass(frozen=True)
class RequestOptions:
    """Method, JSON body and extra headers of a backend request."""

    method: str = "GET"
    body: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)

    def encoded_body(self) -> bytes | None:
        if self.body is None:
            return None
        return json.dumps(self.body, ensure_ascii=False).encode("utf-8")


def compute_fingerprint(target: str, options: RequestOptions) -> str:
    """Deterministic cache key for a request.

    Method and URL stay readable in the key (it is shown in cache stats);
    body and headers are folded into a digest over their normalized form.
    """
    method = options.method.upper()
    headers = {
        name.lower(): value
        for name, value in options.headers.items()
        if name.lower() not in _IGNORED_FINGERPRINT_HEADERS
    }
    normalized = json.dumps(
        {"method": method, "body": options.body, "headers": headers},
        sort_keys=True,
        ensure_ascii=False,
        default=str,
    )
    digest = hashlib.sha256(normalized.encode("utf-8")).hexdigest()[:16]
    return f"{method} {target}#{digest}"


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        message = body.get("error") or body.get("message")
        if message:
            return str(message)
    return f"HTTP {response.status_code}: {response.reason_phrase}"


def _result_from_body(body: Any, status_code: int) -> ExecutionResult:
    """Unwrap the backend's {success, data, error} envelope.

    Bodies that are not envelopes are passed through as the payload.
    """
    if isinstance(body, dict) and "success" in body:
        if body.get("success"):
            return ExecutionResult(
                outcome=ExecutionOutcome.FETCHED,
                data=body.get("data"),
                message=body.get("message"),
                status_code=status_code,
            )
        return ExecutionResult(
            outcome=ExecutionOutcome.FAILED,
            error=str(body.get("error") or body.get("message") or "Request failed"),
            status_code=status_code,
        )
    return ExecutionResult(outcome=ExecutionOutcome.FETCHED, data=body, status_code=status_code)


class ConditionalRequestExecutor:
    """Sends backend requests, optionally through the content cache.

    Example:
        ```python
        async with httpx.AsyncClient(timeout=10) as client:
            executor = ConditionalRequestExecutor(client, InMemoryCacheStore())
            result = await executor.execute(
                "http://backend/api/content/main_page/ru",
                default_freshness_ms=300_000,
            )
        ```
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        store: CacheStore,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        """Initialize the executor.

        Args:
            client: HTTP client; timeouts are configured on it.
            store: Cache store shared by all cached calls of this executor.
            clock: Returns the current time in epoch milliseconds.
        """
        self._client = client
        self._store = store
        self._clock = clock

    @property
    def store(self) -> CacheStore:
        return self._store

    async def _issue(
        self,
        target: str,
        options: RequestOptions,
        extra_headers: Mapping[str, str] | None = None,
    ) -> httpx.Response:
        headers = {"Content-Type": "application/json", **(extra_headers or {}), **options.headers}
        return await self._client.request(
            options.method.upper(),
            target,
            headers=headers,
            content=options.encoded_body(),
        )

    def _decode(self, response: httpx.Response) -> ExecutionResult:
        if not response.is_success:
            return ExecutionResult(
                outcome=ExecutionOutcome.FAILED,
                error=_error_message(response),
                status_code=response.status_code,
            )
        if not response.content:
            return ExecutionResult(outcome=ExecutionOutcome.FETCHED, status_code=response.status_code)
        try:
            body = response.json()
        except ValueError:
            return ExecutionResult(
                outcome=ExecutionOutcome.FAILED,
                error="Invalid JSON response from server",
                status_code=response.status_code,
            )
        return _result_from_body(body, response.status_code)

    async def send(self, target: str, options: RequestOptions | None = None) -> ExecutionResult:
        """Issue an uncached request.

        Args:
            target: Absolute URL
            options: Method, body and headers

        Returns:
            FETCHED with the payload, or FAILED with the reason
        """
        options = options or RequestOptions()
        try:
            response = await self._issue(target, options)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("API request failed: %s %s: %s", options.method, target, e)
            return ExecutionResult(outcome=ExecutionOutcome.FAILED, error=str(e) or e.__class__.__name__)
        return self._decode(response)

    async def execute(
        self,
        target: str,
        options: RequestOptions | None = None,
        default_freshness_ms: int = 300_000,
    ) -> ExecutionResult:
        """Issue a request through the content cache.

        Args:
            target: Absolute URL
            options: Method, body and headers
            default_freshness_ms: Window used when the server sends no max-age

        Returns:
            ExecutionResult classified as REVALIDATED, FETCHED,
            STALE_FALLBACK or FAILED
        """
        options = options or RequestOptions()
        fingerprint = compute_fingerprint(target, options)
        entry = self._store.get(fingerprint)

        conditional: dict[str, str] = {}
        if entry is not None and entry.validator and is_fresh(entry, self._clock()):
            conditional[CONDITIONAL_HEADER] = entry.validator

        try:
            response = await self._issue(target, options, conditional)
        except httpx.TransportError as e:
            if entry is not None and is_stale_usable(entry, self._clock()):
                logger.warning("Network error, using stale cache: %s (%s)", fingerprint, e)
                return ExecutionResult(outcome=ExecutionOutcome.STALE_FALLBACK, data=entry.payload)
            logger.error("Cached request failed: %s: %s", fingerprint, e)
            return ExecutionResult(outcome=ExecutionOutcome.FAILED, error=str(e) or e.__class__.__name__)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Cached request failed: %s: %s", fingerprint, e)
            return ExecutionResult(outcome=ExecutionOutcome.FAILED, error=str(e) or e.__class__.__name__)

        if response.status_code == httpx.codes.NOT_MODIFIED:
            if entry is None:
                logger.error("304 Not Modified without a cached response: %s", fingerprint)
                return ExecutionResult(
                    outcome=ExecutionOutcome.FAILED,
                    error="Received 304 Not Modified without a cached response",
                    status_code=response.status_code,
                )
            logger.debug("Cache hit (304 Not Modified): %s", fingerprint)
            return ExecutionResult(
                outcome=ExecutionOutcome.REVALIDATED,
                data=entry.payload,
                status_code=response.status_code,
            )

        result = self._decode(response)
        validator = response.headers.get(VALIDATOR_HEADER) or response.headers.get(CONTENT_VERSION_HEADER)
        if result.success and validator:
            window = compute_window(default_freshness_ms, response.headers.get("Cache-Control"))
            self._store.put(
                fingerprint,
                CacheEntryEntity(
                    fingerprint=fingerprint,
                    payload=result.data,
                    validator=validator,
                    stored_at=self._clock(),
                    freshness_window_ms=window,
                ),
            )
            logger.debug("Cached response: %s TTL: %sms", fingerprint, window)
        return result
