"""Tests for the property service client."""
from __future__ import annotations

import json

import httpx
import pytest

from app.core.errors import NetworkFailure, NotFound
from app.services.property_api import PropertyServiceClient

BASE_URL = "http://upstream.test/api"


def client_for(handler) -> PropertyServiceClient:
    return PropertyServiceClient(BASE_URL, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_list_properties_drops_empty_filters():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"success": True, "data": [{"id": 1, "title": "Loft", "type": "apartment", "city": "Austin"}]},
        )

    records = await client_for(handler).list_properties({"city": "Austin", "type": None, "bedrooms": 2})

    assert [record.id for record in records] == ["1"]
    assert records[0].property_type == "apartment"
    assert seen[0].url.path == "/api/properties"
    assert dict(seen[0].url.params) == {"city": "Austin", "bedrooms": "2"}


@pytest.mark.asyncio
async def test_list_properties_raises_on_server_error():
    client = client_for(lambda request: httpx.Response(500, json={"success": False}))

    with pytest.raises(NetworkFailure) as excinfo:
        await client.list_properties()

    assert excinfo.value.status_code == 500
    assert excinfo.value.retryable


@pytest.mark.asyncio
async def test_transport_error_becomes_network_failure():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NetworkFailure):
        await client_for(handler).search("loft")


@pytest.mark.asyncio
async def test_unsuccessful_envelope_is_a_failure():
    client = client_for(lambda request: httpx.Response(200, json={"success": False, "data": []}))

    with pytest.raises(NetworkFailure):
        await client.get_favorites("user-1")


@pytest.mark.asyncio
async def test_get_property_maps_missing_to_not_found():
    client = client_for(lambda request: httpx.Response(404, json={"success": False}))

    with pytest.raises(NotFound):
        await client.get_property("missing")

    client = client_for(lambda request: httpx.Response(200, json={"success": False, "data": None}))

    with pytest.raises(NotFound):
        await client.get_property("missing")


@pytest.mark.asyncio
async def test_search_sends_query():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/search"
        assert request.url.params["q"] == "garden"
        return httpx.Response(200, json={"success": True, "data": [{"id": "p-3", "title": "Garden Condo"}]})

    results = await client_for(handler).search("garden")

    assert [record.title for record in results] == ["Garden Condo"]


@pytest.mark.asyncio
async def test_toggle_favorite_returns_confirmed_membership():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        assert request.url.path == "/api/favorites"
        assert json.loads(request.content) == {"userId": "user-1", "propertyId": "p-1"}
        return httpx.Response(200, json={"success": True, "isFavorite": True})

    assert await client_for(handler).toggle_favorite("user-1", "p-1") is True


@pytest.mark.asyncio
async def test_toggle_favorite_without_success_raises():
    client = client_for(lambda request: httpx.Response(200, json={"success": False}))

    with pytest.raises(NetworkFailure):
        await client.toggle_favorite("user-1", "p-1")


@pytest.mark.asyncio
async def test_malformed_payload_is_a_network_failure():
    client = client_for(lambda request: httpx.Response(200, json={"data": "nope"}))

    with pytest.raises(NetworkFailure):
        await client.list_properties()
