"""Services for the food catalog."""

from dataclasses import dataclass
from typing import Protocol

from nutrition_admin.domain.coercion import (
    to_number_safe,
    to_optional_id,
    to_string_safe,
)
from nutrition_admin.domain.errors import EntityNotFoundError
from nutrition_admin.domain.filters import FoodFilters
from nutrition_admin.domain.models import Food, FoodServingUnit, PaginatedResult
from nutrition_admin.domain.schemas import (
    FoodCreate,
    FoodServingUnitInput,
    FoodUpdate,
)


@dataclass(frozen=True)
class FoodQuery:
    """Resolved list query for the food repository."""

    search_term: str | None = None
    calories_min: float | None = None
    calories_max: float | None = None
    protein_min: float | None = None
    protein_max: float | None = None
    category_id: int | None = None
    sort_by: str = "name"
    sort_order: str = "asc"
    skip: int = 0
    take: int = 10


class FoodRepository(Protocol):
    """Persistence interface for foods and their serving units."""

    def list_foods(self, query: FoodQuery) -> tuple[list[Food], int]:
        """Return one page of foods and the total match count."""

    def get_food(self, food_id: int) -> Food | None:
        """Return a food with its serving units, if present."""

    def create_food(
        self, fields: dict[str, object], serving_units: list[FoodServingUnit]
    ) -> Food:
        """Create a food together with its serving units."""

    def replace_food(
        self,
        food_id: int,
        fields: dict[str, object],
        serving_units: list[FoodServingUnit],
    ) -> Food:
        """Update a food and replace its serving units in one atomic unit."""

    def delete_food(self, food_id: int) -> None:
        """Delete a food and its serving units in one atomic unit."""


@dataclass
class FoodService:
    """Application service for food catalog operations."""

    repository: FoodRepository

    def list_foods(
        self, filters: FoodFilters | dict[str, object]
    ) -> PaginatedResult[Food]:
        """Return one page of foods matching the filters."""
        validated = (
            filters
            if isinstance(filters, FoodFilters)
            else FoodFilters.model_validate(filters)
        )
        query = build_food_query(validated)
        foods, total = self.repository.list_foods(query)
        return PaginatedResult(
            data=foods,
            total=total,
            page=validated.page,
            page_size=validated.page_size,
        )

    def get_food(self, food_id: int) -> FoodUpdate | None:
        """Return the edit form for a food, or None when it is gone."""
        food = self.repository.get_food(food_id)
        if food is None:
            return None
        return FoodUpdate(
            id=food.id,
            name=food.name,
            calories=to_string_safe(food.calories),
            protein=to_string_safe(food.protein),
            fat=to_string_safe(food.fat),
            carbohydrates=to_string_safe(food.carbohydrates),
            fiber=to_string_safe(food.fiber),
            sugar=to_string_safe(food.sugar),
            category_id=to_string_safe(food.category_id),
            food_serving_units=[
                FoodServingUnitInput(
                    food_serving_unit_id=to_string_safe(unit.serving_unit_id),
                    grams=to_string_safe(unit.grams),
                )
                for unit in food.serving_units
            ],
        )

    def create_food(self, payload: dict[str, object]) -> Food:
        """Validate and create a food with its serving units."""
        data = FoodCreate.model_validate(payload)
        return self.repository.create_food(
            _food_fields(data), _serving_units(data.food_serving_units)
        )

    def update_food(self, payload: dict[str, object]) -> Food:
        """Validate and update a food, replacing its serving units."""
        data = FoodUpdate.model_validate(payload)
        if self.repository.get_food(data.id) is None:
            raise EntityNotFoundError("Food", data.id)
        return self.repository.replace_food(
            data.id, _food_fields(data), _serving_units(data.food_serving_units)
        )

    def delete_food(self, food_id: int) -> None:
        """Delete a food together with its serving units."""
        self.repository.delete_food(food_id)


def build_food_query(filters: FoodFilters) -> FoodQuery:
    """Translate validated filters into a repository query."""
    calories_min, calories_max = _parse_range(filters.calories_range)
    protein_min, protein_max = _parse_range(filters.protein_range)
    return FoodQuery(
        search_term=filters.search_term or None,
        calories_min=calories_min,
        calories_max=calories_max,
        protein_min=protein_min,
        protein_max=protein_max,
        category_id=to_optional_id(filters.category_id),
        sort_by=filters.sort_by or "name",
        sort_order=filters.sort_order or "asc",
        skip=(filters.page - 1) * filters.page_size,
        take=filters.page_size,
    )


def _parse_range(bounds: tuple[str, str]) -> tuple[float | None, float | None]:
    low, high = bounds
    return (
        float(low) if low != "" else None,
        float(high) if high != "" else None,
    )


def _food_fields(data: FoodCreate | FoodUpdate) -> dict[str, object]:
    return {
        "name": data.name,
        "calories": to_number_safe(data.calories),
        "protein": to_number_safe(data.protein),
        "fat": to_number_safe(data.fat),
        "carbohydrates": to_number_safe(data.carbohydrates),
        "fiber": to_number_safe(data.fiber),
        "sugar": to_number_safe(data.sugar),
        "category_id": to_optional_id(data.category_id),
    }


def _serving_units(rows: list[FoodServingUnitInput]) -> list[FoodServingUnit]:
    return [
        FoodServingUnit(
            serving_unit_id=int(to_number_safe(row.food_serving_unit_id)),
            grams=float(to_number_safe(row.grams)),
        )
        for row in rows
    ]
