"""Tests for the httpx-based nutrition API client."""

import asyncio
import json

import httpx
import pytest

from nutrition_admin.adapters.nutrition_api_client import (
    HttpxNutritionApiClient,
    NutritionApiError,
)
from nutrition_admin.domain.models import SessionUser


def _client(handler) -> HttpxNutritionApiClient:  # type: ignore[no-untyped-def]
    return HttpxNutritionApiClient.create(
        "https://api.test",
        "admin-token",
        user=SessionUser(id=5, role="user"),
        transport=httpx.MockTransport(handler),
    )


def test_client_sends_auth_headers_and_unwraps_lists() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"categories": [{"id": 1, "name": "Fruit"}]})

    async def scenario() -> list[dict[str, object]]:
        client = _client(handler)
        try:
            return await client.list_categories()
        finally:
            await client.close()

    categories = asyncio.run(scenario())

    assert categories == [{"id": 1, "name": "Fruit"}]
    assert seen[0].headers["X-Admin-Token"] == "admin-token"
    assert seen[0].headers["X-User-Id"] == "5"
    assert seen[0].headers["X-User-Role"] == "user"


def test_client_routes_updates_by_payload_id() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=json.loads(request.content))

    async def scenario() -> dict[str, object]:
        client = _client(handler)
        try:
            return await client.update_food({"action": "update", "id": 4, "name": "Kale"})
        finally:
            await client.close()

    result = asyncio.run(scenario())

    assert seen[0].method == "PUT"
    assert seen[0].url.path == "/admin/foods/4"
    assert result["name"] == "Kale"


def test_client_passes_list_params() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"meals": []})

    async def scenario() -> list[dict[str, object]]:
        client = _client(handler)
        try:
            return await client.list_meals({"dateTime": "2024-05-01T00:00:00"})
        finally:
            await client.close()

    assert asyncio.run(scenario()) == []
    assert seen[0].url.params["dateTime"] == "2024-05-01T00:00:00"


def test_client_returns_none_for_no_content_and_null() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.method == "DELETE":
            return httpx.Response(204)
        return httpx.Response(200, json=None)

    async def scenario() -> tuple[object, object]:
        client = _client(handler)
        try:
            return await client.delete_category(1), await client.get_category(1)
        finally:
            await client.close()

    assert asyncio.run(scenario()) == (None, None)


def test_client_raises_field_errors_on_422() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            422, json={"errors": {"name": "Minimum 3 characters required"}}
        )

    async def scenario() -> None:
        client = _client(handler)
        try:
            await client.create_category({"action": "create", "name": "ab"})
        finally:
            await client.close()

    with pytest.raises(NutritionApiError) as exc_info:
        asyncio.run(scenario())

    assert exc_info.value.status_code == 422
    assert exc_info.value.errors == {"name": "Minimum 3 characters required"}
    assert str(exc_info.value) == "name: Minimum 3 characters required"


def test_client_uses_detail_for_other_errors() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"detail": "Failed to delete food"})

    async def scenario() -> None:
        client = _client(handler)
        try:
            await client.delete_food(3)
        finally:
            await client.close()

    with pytest.raises(NutritionApiError, match="Failed to delete food"):
        asyncio.run(scenario())
