"""Meal log endpoints scoped to the signed-in user."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from fastapi import (
    APIRouter,
    Body,
    Depends,
    Header,
    HTTPException,
    Query,
    Request,
    status,
)

from nutrition_admin.api.serializers import serialize_meal, serialize_totals
from nutrition_admin.config import ADMIN_ROLE, parse_user_role
from nutrition_admin.domain.models import SessionUser

if TYPE_CHECKING:
    from nutrition_admin.containers import AppContainer
    from nutrition_admin.domain.schemas import MealUpdate

router = APIRouter(prefix="/meals", tags=["meals"])


async def require_user(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> SessionUser:
    """Resolve the session user forwarded by the auth provider."""
    if not x_user_id or not x_user_id.strip().isdigit():
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return SessionUser(id=int(x_user_id.strip()), role=parse_user_role(x_user_role))


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _filters(date_time: str | None) -> dict[str, object]:
    return {"dateTime": date_time or datetime.now()}


def _owned_form(request: Request, meal_id: int, user: SessionUser) -> MealUpdate | None:
    form = _container(request).meal_service.get_meal(meal_id)
    if form is None:
        return None
    if user.role != ADMIN_ROLE and form.user_id != str(user.id):
        return None
    return form


@router.get("")
async def list_meals(
    request: Request,
    date_time: str | None = Query(default=None, alias="dateTime"),
    user: SessionUser = Depends(require_user),
) -> dict[str, object]:
    """Return the user's meals for one day, newest first."""
    meals = _container(request).meal_service.list_meals(_filters(date_time), user)
    return {"meals": [serialize_meal(meal) for meal in meals]}


@router.get("/totals")
async def meal_totals(
    request: Request,
    date_time: str | None = Query(default=None, alias="dateTime"),
    user: SessionUser = Depends(require_user),
) -> dict[str, object]:
    """Return the nutrition totals for the user's day."""
    totals = _container(request).meal_service.get_totals(_filters(date_time), user)
    return serialize_totals(totals)


@router.get("/{meal_id}")
async def get_meal(
    meal_id: int, request: Request, user: SessionUser = Depends(require_user)
) -> dict[str, object] | None:
    """Return the edit form for a meal, or null when it is gone."""
    form = _owned_form(request, meal_id, user)
    return form.to_form() if form else None


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_meal(
    request: Request,
    payload: dict[str, Any] = Body(...),
    user: SessionUser = Depends(require_user),
) -> dict[str, object]:
    """Log a meal for the session user."""
    if user.role != ADMIN_ROLE or not payload.get("userId"):
        payload = {**payload, "userId": str(user.id)}
    meal = _container(request).meal_service.create_meal(payload)
    return serialize_meal(meal)


@router.put("/{meal_id}")
async def update_meal(
    meal_id: int,
    request: Request,
    payload: dict[str, Any] = Body(...),
    user: SessionUser = Depends(require_user),
) -> dict[str, object]:
    """Update a meal and replace its foods."""
    form = _owned_form(request, meal_id, user)
    if form is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    meal = _container(request).meal_service.update_meal(
        {**payload, "id": meal_id, "userId": form.user_id}
    )
    return serialize_meal(meal)


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    meal_id: int, request: Request, user: SessionUser = Depends(require_user)
) -> None:
    """Delete a meal and its foods."""
    if _owned_form(request, meal_id, user) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    _container(request).meal_service.delete_meal(meal_id)
