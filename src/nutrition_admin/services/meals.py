"""Meal logging service."""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Protocol

from nutrition_admin.domain.coercion import to_number_safe, to_string_safe
from nutrition_admin.domain.errors import EntityNotFoundError
from nutrition_admin.domain.filters import MealFilters
from nutrition_admin.domain.models import Meal, MealFood, NutritionTotals, SessionUser
from nutrition_admin.domain.nutrition import daily_totals
from nutrition_admin.domain.schemas import (
    MealCreate,
    MealFoodInput,
    MealUpdate,
)


class MealRepository(Protocol):
    """Persistence interface for meals and their foods."""

    def list_meals(
        self, user_id: int | None, start: datetime, end: datetime
    ) -> list[Meal]:
        """Return meals logged in [start, end), newest first, with foods."""

    def get_meal(self, meal_id: int) -> Meal | None:
        """Return a meal with its foods, if present."""

    def create_meal(
        self, user_id: int, date_time: datetime, meal_foods: list[MealFood]
    ) -> Meal:
        """Create a meal together with its foods."""

    def replace_meal(
        self, meal_id: int, date_time: datetime, meal_foods: list[MealFood]
    ) -> Meal:
        """Update a meal and replace its foods in one atomic unit."""

    def delete_meal(self, meal_id: int) -> None:
        """Delete a meal and its foods in one atomic unit."""


@dataclass
class MealService:
    """Application service for meal logging."""

    repository: MealRepository

    def list_meals(
        self, filters: MealFilters | dict[str, object], user: SessionUser | None
    ) -> list[Meal]:
        """Return the user's meals for the filtered day."""
        validated = (
            filters
            if isinstance(filters, MealFilters)
            else MealFilters.model_validate(filters)
        )
        start, end = day_bounds(validated.date_time)
        return self.repository.list_meals(user.id if user else None, start, end)

    def get_totals(
        self, filters: MealFilters | dict[str, object], user: SessionUser | None
    ) -> NutritionTotals:
        """Return nutrition totals for the filtered day."""
        return daily_totals(self.list_meals(filters, user))

    def get_meal(self, meal_id: int) -> MealUpdate | None:
        """Return the edit form for a meal, or None when it is gone."""
        meal = self.repository.get_meal(meal_id)
        if meal is None:
            return None
        return MealUpdate(
            id=meal.id,
            user_id=to_string_safe(meal.user_id),
            date_time=meal.date_time,
            meal_foods=[
                MealFoodInput(
                    food_id=to_string_safe(item.food_id),
                    serving_unit_id=to_string_safe(item.serving_unit_id),
                    amount=to_string_safe(item.amount),
                )
                for item in meal.meal_foods
            ],
        )

    def create_meal(self, payload: dict[str, object]) -> Meal:
        """Validate and create a meal with its foods."""
        data = MealCreate.model_validate(payload)
        return self.repository.create_meal(
            int(to_number_safe(data.user_id)),
            data.date_time,
            _meal_foods(data.meal_foods),
        )

    def update_meal(self, payload: dict[str, object]) -> Meal:
        """Validate and update a meal, replacing its foods."""
        data = MealUpdate.model_validate(payload)
        if self.repository.get_meal(data.id) is None:
            raise EntityNotFoundError("Meal", data.id)
        return self.repository.replace_meal(
            data.id, data.date_time, _meal_foods(data.meal_foods)
        )

    def delete_meal(self, meal_id: int) -> None:
        """Delete a meal together with its foods."""
        self.repository.delete_meal(meal_id)


def day_bounds(moment: datetime) -> tuple[datetime, datetime]:
    """Return the start of the moment's day and the start of the next day."""
    start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    return start, start + timedelta(days=1)


def _meal_foods(rows: list[MealFoodInput]) -> list[MealFood]:
    return [
        MealFood(
            food_id=int(to_number_safe(row.food_id)),
            serving_unit_id=int(to_number_safe(row.serving_unit_id)),
            amount=float(to_number_safe(row.amount)),
        )
        for row in rows
    ]
