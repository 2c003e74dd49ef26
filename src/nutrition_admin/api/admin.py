"""Admin API endpoints for the food catalog with simple token auth."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter, Body, Depends, Header, HTTPException, Request, status

from nutrition_admin.api.serializers import (
    serialize_category,
    serialize_food,
    serialize_food_page,
    serialize_serving_unit,
)

if TYPE_CHECKING:
    from nutrition_admin.containers import AppContainer

router = APIRouter(prefix="/admin", tags=["admin"])

_FOOD_FILTER_PARAMS = {
    "searchTerm",
    "categoryId",
    "sortBy",
    "sortOrder",
    "page",
    "pageSize",
}


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/categories", dependencies=[Depends(require_admin)])
async def list_categories(request: Request) -> dict[str, object]:
    """Return all categories."""
    categories = _container(request).category_service.list_categories()
    return {"categories": [serialize_category(item) for item in categories]}


@router.get("/categories/{category_id}", dependencies=[Depends(require_admin)])
async def get_category(category_id: int, request: Request) -> dict[str, object] | None:
    """Return the edit form for a category, or null when it is gone."""
    form = _container(request).category_service.get_category(category_id)
    return form.to_form() if form else None


@router.post(
    "/categories",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    request: Request, payload: dict[str, Any] = Body(...)
) -> dict[str, object]:
    """Create a category."""
    category = _container(request).category_service.create_category(payload)
    return serialize_category(category)


@router.put("/categories/{category_id}", dependencies=[Depends(require_admin)])
async def update_category(
    category_id: int, request: Request, payload: dict[str, Any] = Body(...)
) -> dict[str, object]:
    """Update a category."""
    category = _container(request).category_service.update_category(
        {**payload, "id": category_id}
    )
    return serialize_category(category)


@router.delete(
    "/categories/{category_id}",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_category(category_id: int, request: Request) -> None:
    """Delete a category."""
    _container(request).category_service.delete_category(category_id)


@router.get("/serving-units", dependencies=[Depends(require_admin)])
async def list_serving_units(request: Request) -> dict[str, object]:
    """Return all serving units."""
    units = _container(request).serving_unit_service.list_serving_units()
    return {"servingUnits": [serialize_serving_unit(item) for item in units]}


@router.get("/serving-units/{serving_unit_id}", dependencies=[Depends(require_admin)])
async def get_serving_unit(
    serving_unit_id: int, request: Request
) -> dict[str, object] | None:
    """Return the edit form for a serving unit, or null when it is gone."""
    form = _container(request).serving_unit_service.get_serving_unit(serving_unit_id)
    return form.to_form() if form else None


@router.post(
    "/serving-units",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_201_CREATED,
)
async def create_serving_unit(
    request: Request, payload: dict[str, Any] = Body(...)
) -> dict[str, object]:
    """Create a serving unit."""
    unit = _container(request).serving_unit_service.create_serving_unit(payload)
    return serialize_serving_unit(unit)


@router.put("/serving-units/{serving_unit_id}", dependencies=[Depends(require_admin)])
async def update_serving_unit(
    serving_unit_id: int, request: Request, payload: dict[str, Any] = Body(...)
) -> dict[str, object]:
    """Update a serving unit."""
    unit = _container(request).serving_unit_service.update_serving_unit(
        {**payload, "id": serving_unit_id}
    )
    return serialize_serving_unit(unit)


@router.delete(
    "/serving-units/{serving_unit_id}",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_serving_unit(serving_unit_id: int, request: Request) -> None:
    """Delete a serving unit."""
    _container(request).serving_unit_service.delete_serving_unit(serving_unit_id)


@router.get("/foods", dependencies=[Depends(require_admin)])
async def list_foods(request: Request) -> dict[str, object]:
    """Return one page of foods matching the query-string filters."""
    result = _container(request).food_service.list_foods(
        _food_filters_from_query(request)
    )
    return serialize_food_page(result)


@router.get("/foods/{food_id}", dependencies=[Depends(require_admin)])
async def get_food(food_id: int, request: Request) -> dict[str, object] | None:
    """Return the edit form for a food, or null when it is gone."""
    form = _container(request).food_service.get_food(food_id)
    return form.to_form() if form else None


@router.post(
    "/foods",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_201_CREATED,
)
async def create_food(
    request: Request, payload: dict[str, Any] = Body(...)
) -> dict[str, object]:
    """Create a food with its serving units."""
    food = _container(request).food_service.create_food(payload)
    return serialize_food(food)


@router.put("/foods/{food_id}", dependencies=[Depends(require_admin)])
async def update_food(
    food_id: int, request: Request, payload: dict[str, Any] = Body(...)
) -> dict[str, object]:
    """Update a food and replace its serving units."""
    food = _container(request).food_service.update_food({**payload, "id": food_id})
    return serialize_food(food)


@router.delete(
    "/foods/{food_id}",
    dependencies=[Depends(require_admin)],
    status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_food(food_id: int, request: Request) -> None:
    """Delete a food and its serving units."""
    _container(request).food_service.delete_food(food_id)


def _food_filters_from_query(request: Request) -> dict[str, object]:
    params = request.query_params
    container = _container(request)
    filters: dict[str, object] = {
        "searchTerm": "",
        "categoryId": "",
        "page": 1,
        "pageSize": container.settings.default_page_size,
    }
    for key in _FOOD_FILTER_PARAMS:
        if key in params:
            filters[key] = params[key]
    filters["caloriesRange"] = [
        params.get("caloriesMin", ""),
        params.get("caloriesMax", ""),
    ]
    filters["proteinRange"] = [
        params.get("proteinMin", ""),
        params.get("proteinMax", ""),
    ]
    return filters
