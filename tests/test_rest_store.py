"""Tests for the PostgREST row store."""

import json
from unittest.mock import AsyncMock

import httpx
import pytest

from memgrid.auth.base import Session
from memgrid.core.errors import StoreError
from memgrid.memory.rest import RestRowStore

BASE = "https://grid.example.co"


def _store(handler, session: Session | None = None) -> RestRowStore:
    auth = AsyncMock()
    auth.get_session = AsyncMock(return_value=session)
    return RestRowStore(BASE, "anon-key", auth=auth, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_select_builds_filters_and_order():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[{"id": "1"}])

    store = _store(handler)
    rows = await store.select(
        "memories", {"visibility": "private", "user_id": "u1"}, order_by="timestamp"
    )

    assert rows == [{"id": "1"}]
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/memories"
    assert request.url.params["visibility"] == "eq.private"
    assert request.url.params["user_id"] == "eq.u1"
    assert request.url.params["order"] == "timestamp.desc"
    assert request.url.params["select"] == "*"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer anon-key"


@pytest.mark.asyncio
async def test_session_token_used_when_signed_in():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[])

    store = _store(handler, Session(user_id="u1", email="a@x.com", access_token="jwt"))
    await store.select("memories", {"visibility": "public"})
    assert seen[0].headers["Authorization"] == "Bearer jwt"


@pytest.mark.asyncio
async def test_insert_returns_representation():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        body = json.loads(request.content)
        return httpx.Response(201, json=[dict(body, id="new-id")])

    store = _store(handler)
    stored = await store.insert("memories", {"title": "Fire"})

    assert stored == {"title": "Fire", "id": "new-id"}
    assert seen[0].method == "POST"
    assert seen[0].headers["Prefer"] == "return=representation"


@pytest.mark.asyncio
async def test_http_error_becomes_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(401, json={"message": "JWT expired"})

    store = _store(handler)
    with pytest.raises(StoreError) as exc:
        await store.select("memories", {"visibility": "public"})
    assert exc.value.operation == "select memories"
    assert "401" in str(exc.value)


@pytest.mark.asyncio
async def test_transport_error_becomes_store_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    store = _store(handler)
    with pytest.raises(StoreError):
        await store.insert("memories", {"title": "Fire"})


@pytest.mark.asyncio
async def test_empty_insert_response_is_error():
    store = _store(lambda request: httpx.Response(201, json=[]))
    with pytest.raises(StoreError):
        await store.insert("memories", {"title": "Fire"})
