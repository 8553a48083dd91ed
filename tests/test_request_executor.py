"""Tests for the conditional request executor."""

import asyncio

import httpx
import pytest

from bankim_portal.entities import CacheEntryEntity, ExecutionOutcome
from bankim_portal.services.request_executor import (
    ConditionalRequestExecutor,
    RequestOptions,
    compute_fingerprint,
)

from conftest import envelope

TARGET = "http://content.test/api/content/main_page/ru"


class ScriptedBackend:
    """MockTransport handler answering from a queue of responses or exceptions."""

    def __init__(self, *steps) -> None:
        self.steps = list(steps)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.steps.pop(0)
        if isinstance(step, Exception):
            raise step
        return step


def make_executor(backend, store, clock) -> ConditionalRequestExecutor:
    client = httpx.AsyncClient(transport=httpx.MockTransport(backend))
    return ConditionalRequestExecutor(client, store, clock)


def ok(data, etag: str | None = None, **headers) -> httpx.Response:
    if etag:
        headers["ETag"] = etag
    return httpx.Response(200, json=envelope(data), headers=headers)


# ---------------------------------------------------------------------------
# Fingerprints
# ---------------------------------------------------------------------------


def test_fingerprint_is_deterministic():
    options = RequestOptions(method="post", body={"b": 2, "a": 1}, headers={"X-Trace": "1"})
    same = RequestOptions(method="POST", body={"a": 1, "b": 2}, headers={"x-trace": "1"})
    assert compute_fingerprint(TARGET, options) == compute_fingerprint(TARGET, same)


def test_fingerprint_differs_by_method_and_body():
    base = compute_fingerprint(TARGET, RequestOptions())
    assert base != compute_fingerprint(TARGET, RequestOptions(method="POST"))
    assert compute_fingerprint(TARGET, RequestOptions(method="POST", body={"a": 1})) != compute_fingerprint(
        TARGET, RequestOptions(method="POST", body={"a": 2})
    )
    assert base != compute_fingerprint(TARGET + "?x=1", RequestOptions())


def test_fingerprint_ignores_conditional_headers():
    plain = compute_fingerprint(TARGET, RequestOptions())
    conditional = compute_fingerprint(TARGET, RequestOptions(headers={"If-None-Match": "v1"}))
    assert plain == conditional


def test_fingerprint_keeps_method_and_target_readable():
    assert compute_fingerprint(TARGET, RequestOptions()).startswith(f"GET {TARGET}#")


# ---------------------------------------------------------------------------
# Revalidation
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_revalidation_then_refetch_after_window(store, clock):
    """Store v1 at t=0, 304 at t=500, new v2 body at t=1500."""
    backend = ScriptedBackend(
        ok({"title": "first"}, etag="v1"),
        httpx.Response(304),
        ok({"title": "second"}, etag="v2"),
    )
    executor = make_executor(backend, store, clock)
    fingerprint = compute_fingerprint(TARGET, RequestOptions())

    clock.now = 0
    first = await executor.execute(TARGET, default_freshness_ms=1000)
    assert first.outcome is ExecutionOutcome.FETCHED
    assert first.data == {"title": "first"}
    assert "if-none-match" not in backend.requests[0].headers
    original_entry = store.get(fingerprint)
    assert original_entry.validator == "v1"
    assert original_entry.stored_at == 0

    clock.now = 500
    second = await executor.execute(TARGET, default_freshness_ms=1000)
    assert second.outcome is ExecutionOutcome.REVALIDATED
    assert second.data == {"title": "first"}
    assert backend.requests[1].headers["if-none-match"] == "v1"
    assert store.get(fingerprint) is original_entry

    clock.now = 1500
    third = await executor.execute(TARGET, default_freshness_ms=1000)
    assert third.outcome is ExecutionOutcome.FETCHED
    assert third.data == {"title": "second"}
    assert "if-none-match" not in backend.requests[2].headers
    entry = store.get(fingerprint)
    assert entry.validator == "v2"
    assert entry.stored_at == 1500
    assert entry.payload == {"title": "second"}


@pytest.mark.asyncio
async def test_not_modified_without_entry_is_a_failure(store, clock):
    executor = make_executor(ScriptedBackend(httpx.Response(304)), store, clock)

    result = await executor.execute(TARGET)

    assert result.outcome is ExecutionOutcome.FAILED
    assert "304" in result.error
    assert result.data is None


@pytest.mark.asyncio
async def test_entry_without_validator_never_sends_conditional_header(store, clock):
    fingerprint = compute_fingerprint(TARGET, RequestOptions())
    store.put(
        fingerprint,
        CacheEntryEntity(fingerprint, {"title": "cached"}, None, stored_at=0, freshness_window_ms=1000),
    )
    backend = ScriptedBackend(ok({"title": "fresh"}))
    executor = make_executor(backend, store, clock)

    result = await executor.execute(TARGET, default_freshness_ms=1000)

    assert "if-none-match" not in backend.requests[0].headers
    assert result.data == {"title": "fresh"}


# ---------------------------------------------------------------------------
# Storing
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_response_without_validator_is_not_cached(store, clock):
    executor = make_executor(ScriptedBackend(ok({"title": "x"})), store, clock)

    result = await executor.execute(TARGET)

    assert result.success
    assert len(store) == 0


@pytest.mark.asyncio
async def test_content_version_header_is_a_validator(store, clock):
    backend = ScriptedBackend(ok({"title": "x"}, **{"Bankim-Content-Version": "42"}))
    executor = make_executor(backend, store, clock)

    await executor.execute(TARGET)

    assert store.get(compute_fingerprint(TARGET, RequestOptions())).validator == "42"


@pytest.mark.asyncio
async def test_etag_preferred_over_content_version(store, clock):
    backend = ScriptedBackend(ok({"title": "x"}, etag='"abc"', **{"Bankim-Content-Version": "42"}))
    executor = make_executor(backend, store, clock)

    await executor.execute(TARGET)

    assert store.get(compute_fingerprint(TARGET, RequestOptions())).validator == '"abc"'


@pytest.mark.asyncio
async def test_max_age_sets_freshness_window(store, clock):
    backend = ScriptedBackend(ok({"title": "x"}, etag="v1", **{"Cache-Control": "max-age=60"}))
    executor = make_executor(backend, store, clock)

    await executor.execute(TARGET, default_freshness_ms=1000)

    assert store.get(compute_fingerprint(TARGET, RequestOptions())).freshness_window_ms == 60000


@pytest.mark.asyncio
async def test_failed_envelope_is_not_cached(store, clock):
    response = httpx.Response(200, json={"success": False, "error": "not found"}, headers={"ETag": "v1"})
    executor = make_executor(ScriptedBackend(response), store, clock)

    result = await executor.execute(TARGET)

    assert result.outcome is ExecutionOutcome.FAILED
    assert result.error == "not found"
    assert len(store) == 0


@pytest.mark.asyncio
async def test_decode_failure_is_generic_and_not_cached(store, clock):
    response = httpx.Response(200, content=b"<html>oops</html>", headers={"ETag": "v1"})
    executor = make_executor(ScriptedBackend(response), store, clock)

    result = await executor.execute(TARGET)

    assert result.outcome is ExecutionOutcome.FAILED
    assert result.error == "Invalid JSON response from server"
    assert len(store) == 0


@pytest.mark.asyncio
async def test_non_envelope_body_is_the_payload(store, clock):
    response = httpx.Response(200, json=[1, 2, 3], headers={"ETag": "v1"})
    executor = make_executor(ScriptedBackend(response), store, clock)

    result = await executor.execute(TARGET)

    assert result.data == [1, 2, 3]
    assert store.get(compute_fingerprint(TARGET, RequestOptions())).payload == [1, 2, 3]


@pytest.mark.asyncio
async def test_concurrent_identical_requests_are_not_coalesced(store, clock):
    """Both requests reach the backend and the call that completes last owns the entry."""
    requests: list[httpx.Request] = []
    second_done = asyncio.Event()

    async def backend(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if len(requests) == 1:
            await second_done.wait()
            return ok({"title": "first"}, etag="v1")
        return ok({"title": "second"}, etag="v2")

    executor = make_executor(backend, store, clock)

    async def second_call():
        while not requests:
            await asyncio.sleep(0)
        result = await executor.execute(TARGET)
        second_done.set()
        return result

    first, second = await asyncio.gather(executor.execute(TARGET), second_call())

    assert len(requests) == 2
    assert all("if-none-match" not in request.headers for request in requests)
    assert first.data == {"title": "first"}
    assert second.data == {"title": "second"}
    entry = store.get(compute_fingerprint(TARGET, RequestOptions()))
    assert entry.validator == "v1"
    assert entry.payload == {"title": "first"}


# ---------------------------------------------------------------------------
# Failures and stale fallback
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_transport_failure_serves_stale_within_twice_the_window(store, clock):
    backend = ScriptedBackend(
        ok({"title": "cached"}, etag="v1"),
        httpx.ConnectError("connection refused"),
        httpx.ReadTimeout("timed out"),
    )
    executor = make_executor(backend, store, clock)

    clock.now = 0
    await executor.execute(TARGET, default_freshness_ms=1000)

    clock.now = 1999
    stale = await executor.execute(TARGET, default_freshness_ms=1000)
    assert stale.outcome is ExecutionOutcome.STALE_FALLBACK
    assert stale.success
    assert stale.data == {"title": "cached"}

    clock.now = 2000
    failed = await executor.execute(TARGET, default_freshness_ms=1000)
    assert failed.outcome is ExecutionOutcome.FAILED
    assert failed.error == "timed out"


@pytest.mark.asyncio
async def test_transport_failure_without_entry_fails(store, clock):
    executor = make_executor(ScriptedBackend(httpx.ConnectError("connection refused")), store, clock)

    result = await executor.execute(TARGET)

    assert result.outcome is ExecutionOutcome.FAILED
    assert result.error == "connection refused"


@pytest.mark.asyncio
async def test_stale_fallback_works_for_entries_without_validator(store, clock):
    fingerprint = compute_fingerprint(TARGET, RequestOptions())
    store.put(fingerprint, CacheEntryEntity(fingerprint, {"title": "old"}, None, 0, 1000))
    executor = make_executor(ScriptedBackend(httpx.ConnectError("down")), store, clock)

    clock.now = 1500
    result = await executor.execute(TARGET, default_freshness_ms=1000)

    assert result.outcome is ExecutionOutcome.STALE_FALLBACK
    assert result.data == {"title": "old"}


@pytest.mark.asyncio
async def test_server_error_reports_message_and_skips_cache(store, clock):
    backend = ScriptedBackend(
        ok({"title": "cached"}, etag="v1"),
        httpx.Response(500, json={"success": False, "error": "database unavailable"}),
    )
    executor = make_executor(backend, store, clock)

    await executor.execute(TARGET, default_freshness_ms=1000)
    clock.now = 1500
    result = await executor.execute(TARGET, default_freshness_ms=1000)

    assert result.outcome is ExecutionOutcome.FAILED
    assert result.error == "database unavailable"
    assert result.status_code == 500


@pytest.mark.asyncio
async def test_server_error_without_json_body(store, clock):
    executor = make_executor(ScriptedBackend(httpx.Response(503, content=b"")), store, clock)

    result = await executor.execute(TARGET)

    assert result.outcome is ExecutionOutcome.FAILED
    assert result.error == "HTTP 503: Service Unavailable"


# ---------------------------------------------------------------------------
# Plain requests
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_send_posts_json_and_never_caches(store, clock):
    backend = ScriptedBackend(httpx.Response(201, json=envelope({"id": 7}), headers={"ETag": "v1"}))
    executor = make_executor(backend, store, clock)

    result = await executor.send(
        "http://backend.test/api/users",
        RequestOptions(method="POST", body={"name": "Dana"}),
    )

    request = backend.requests[0]
    assert request.method == "POST"
    assert request.headers["content-type"] == "application/json"
    assert request.content == b'{"name": "Dana"}'
    assert result.data == {"id": 7}
    assert len(store) == 0


@pytest.mark.asyncio
async def test_send_transport_failure(store, clock):
    executor = make_executor(ScriptedBackend(httpx.ConnectError("no route to host")), store, clock)

    result = await executor.send("http://backend.test/api/users")

    assert result.outcome is ExecutionOutcome.FAILED
    assert result.error == "no route to host"


@pytest.mark.asyncio
async def test_send_empty_body_is_success(store, clock):
    executor = make_executor(ScriptedBackend(httpx.Response(204)), store, clock)

    result = await executor.send("http://backend.test/api/users/1", RequestOptions(method="DELETE"))

    assert result.success
    assert result.data is None
