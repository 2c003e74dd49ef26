"""HTTP client for the nutrition admin API, used by the client core."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from nutrition_admin.domain.models import SessionUser


class NutritionApiError(Exception):
    """Raised when the API rejects or fails a request."""

    def __init__(
        self,
        message: str,
        status_code: int,
        errors: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or {}


class NutritionApi(Protocol):
    """Asynchronous data source consumed by queries and mutations."""

    async def list_categories(self) -> list[dict[str, object]]:
        """Return all categories."""

    async def get_category(self, category_id: int) -> dict[str, object] | None:
        """Return a category edit form, or None when it is gone."""

    async def create_category(self, payload: dict[str, object]) -> dict[str, object]:
        """Create a category."""

    async def update_category(self, payload: dict[str, object]) -> dict[str, object]:
        """Update a category."""

    async def delete_category(self, category_id: int) -> None:
        """Delete a category."""

    async def list_serving_units(self) -> list[dict[str, object]]:
        """Return all serving units."""

    async def get_serving_unit(self, serving_unit_id: int) -> dict[str, object] | None:
        """Return a serving unit edit form, or None when it is gone."""

    async def create_serving_unit(
        self, payload: dict[str, object]
    ) -> dict[str, object]:
        """Create a serving unit."""

    async def update_serving_unit(
        self, payload: dict[str, object]
    ) -> dict[str, object]:
        """Update a serving unit."""

    async def delete_serving_unit(self, serving_unit_id: int) -> None:
        """Delete a serving unit."""

    async def list_foods(self, params: dict[str, object]) -> dict[str, object]:
        """Return one page of foods."""

    async def get_food(self, food_id: int) -> dict[str, object] | None:
        """Return a food edit form, or None when it is gone."""

    async def create_food(self, payload: dict[str, object]) -> dict[str, object]:
        """Create a food with its serving units."""

    async def update_food(self, payload: dict[str, object]) -> dict[str, object]:
        """Update a food and replace its serving units."""

    async def delete_food(self, food_id: int) -> None:
        """Delete a food."""

    async def list_meals(self, params: dict[str, object]) -> list[dict[str, object]]:
        """Return the session user's meals for a day."""

    async def get_meal(self, meal_id: int) -> dict[str, object] | None:
        """Return a meal edit form, or None when it is gone."""

    async def get_meal_totals(self, params: dict[str, object]) -> dict[str, object]:
        """Return nutrition totals for a day."""

    async def create_meal(self, payload: dict[str, object]) -> dict[str, object]:
        """Log a meal."""

    async def update_meal(self, payload: dict[str, object]) -> dict[str, object]:
        """Update a meal and replace its foods."""

    async def delete_meal(self, meal_id: int) -> None:
        """Delete a meal."""


@dataclass
class HttpxNutritionApiClient:
    """Nutrition API client implemented with httpx."""

    http_client: httpx.AsyncClient

    @classmethod
    def create(
        cls,
        base_url: str,
        admin_token: str,
        user: SessionUser | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "HttpxNutritionApiClient":
        """Create an API client with a managed httpx session."""
        headers = {"X-Admin-Token": admin_token}
        if user is not None:
            headers["X-User-Id"] = str(user.id)
            headers["X-User-Role"] = user.role
        return cls(
            http_client=httpx.AsyncClient(
                base_url=base_url, headers=headers, transport=transport, timeout=10
            )
        )

    async def list_categories(self) -> list[dict[str, object]]:
        """Return all categories."""
        data = await self._request("GET", "/admin/categories")
        return data["categories"]

    async def get_category(self, category_id: int) -> dict[str, object] | None:
        """Return a category edit form, or None when it is gone."""
        return await self._request("GET", f"/admin/categories/{category_id}")

    async def create_category(self, payload: dict[str, object]) -> dict[str, object]:
        """Create a category."""
        return await self._request("POST", "/admin/categories", json=payload)

    async def update_category(self, payload: dict[str, object]) -> dict[str, object]:
        """Update a category."""
        return await self._request(
            "PUT", f"/admin/categories/{payload['id']}", json=payload
        )

    async def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        await self._request("DELETE", f"/admin/categories/{category_id}")

    async def list_serving_units(self) -> list[dict[str, object]]:
        """Return all serving units."""
        data = await self._request("GET", "/admin/serving-units")
        return data["servingUnits"]

    async def get_serving_unit(self, serving_unit_id: int) -> dict[str, object] | None:
        """Return a serving unit edit form, or None when it is gone."""
        return await self._request("GET", f"/admin/serving-units/{serving_unit_id}")

    async def create_serving_unit(
        self, payload: dict[str, object]
    ) -> dict[str, object]:
        """Create a serving unit."""
        return await self._request("POST", "/admin/serving-units", json=payload)

    async def update_serving_unit(
        self, payload: dict[str, object]
    ) -> dict[str, object]:
        """Update a serving unit."""
        return await self._request(
            "PUT", f"/admin/serving-units/{payload['id']}", json=payload
        )

    async def delete_serving_unit(self, serving_unit_id: int) -> None:
        """Delete a serving unit."""
        await self._request("DELETE", f"/admin/serving-units/{serving_unit_id}")

    async def list_foods(self, params: dict[str, object]) -> dict[str, object]:
        """Return one page of foods."""
        return await self._request("GET", "/admin/foods", params=params)

    async def get_food(self, food_id: int) -> dict[str, object] | None:
        """Return a food edit form, or None when it is gone."""
        return await self._request("GET", f"/admin/foods/{food_id}")

    async def create_food(self, payload: dict[str, object]) -> dict[str, object]:
        """Create a food with its serving units."""
        return await self._request("POST", "/admin/foods", json=payload)

    async def update_food(self, payload: dict[str, object]) -> dict[str, object]:
        """Update a food and replace its serving units."""
        return await self._request("PUT", f"/admin/foods/{payload['id']}", json=payload)

    async def delete_food(self, food_id: int) -> None:
        """Delete a food."""
        await self._request("DELETE", f"/admin/foods/{food_id}")

    async def list_meals(self, params: dict[str, object]) -> list[dict[str, object]]:
        """Return the session user's meals for a day."""
        data = await self._request("GET", "/meals", params=params)
        return data["meals"]

    async def get_meal(self, meal_id: int) -> dict[str, object] | None:
        """Return a meal edit form, or None when it is gone."""
        return await self._request("GET", f"/meals/{meal_id}")

    async def get_meal_totals(self, params: dict[str, object]) -> dict[str, object]:
        """Return nutrition totals for a day."""
        return await self._request("GET", "/meals/totals", params=params)

    async def create_meal(self, payload: dict[str, object]) -> dict[str, object]:
        """Log a meal."""
        return await self._request("POST", "/meals", json=payload)

    async def update_meal(self, payload: dict[str, object]) -> dict[str, object]:
        """Update a meal and replace its foods."""
        return await self._request("PUT", f"/meals/{payload['id']}", json=payload)

    async def delete_meal(self, meal_id: int) -> None:
        """Delete a meal."""
        await self._request("DELETE", f"/meals/{meal_id}")

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()

    async def _request(self, method: str, path: str, **kwargs: object) -> object:
        response = await self.http_client.request(method, path, **kwargs)
        if response.is_error:
            raise _api_error(response)
        if response.status_code == httpx.codes.NO_CONTENT or not response.content:
            return None
        return response.json()


def _api_error(response: httpx.Response) -> NutritionApiError:
    try:
        body = response.json()
    except ValueError:
        body = None
    errors: dict[str, str] = {}
    message = response.reason_phrase or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        if isinstance(body.get("errors"), dict):
            errors = {str(key): str(value) for key, value in body["errors"].items()}
            message = "; ".join(f"{key}: {value}" for key, value in errors.items())
        elif body.get("detail"):
            message = str(body["detail"])
    return NutritionApiError(message, response.status_code, errors)
