"""Domain records for the food catalog and meal log."""

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Category:
    """A food category."""

    id: int
    name: str


@dataclass(frozen=True)
class ServingUnit:
    """A named unit a food can be measured in (cup, slice, ...)."""

    id: int
    name: str


@dataclass(frozen=True)
class FoodServingUnit:
    """Weight in grams of one serving unit of a food."""

    serving_unit_id: int
    grams: float


@dataclass(frozen=True)
class Food:
    """A catalog food with macros per 100g."""

    id: int
    name: str
    calories: float
    protein: float
    fat: float
    carbohydrates: float
    fiber: float
    sugar: float
    category_id: int | None
    serving_units: list[FoodServingUnit] = field(default_factory=list)


@dataclass(frozen=True)
class MealFood:
    """A food entry inside a meal."""

    food_id: int
    serving_unit_id: int
    amount: float
    food: Food | None = None
    serving_unit: ServingUnit | None = None


@dataclass(frozen=True)
class Meal:
    """A logged meal owned by a user."""

    id: int
    user_id: int
    date_time: datetime
    meal_foods: list[MealFood] = field(default_factory=list)


@dataclass(frozen=True)
class SessionUser:
    """Identity of the signed-in user."""

    id: int
    role: str


@dataclass(frozen=True)
class NutritionTotals:
    """Aggregated macros."""

    calories: float = 0.0
    protein: float = 0.0
    carbohydrates: float = 0.0
    fat: float = 0.0


@dataclass(frozen=True)
class PaginatedResult(Generic[T]):
    """One page of results with paging metadata."""

    data: list[T]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        """Return the number of pages for the total count."""
        if self.page_size <= 0:
            return 0
        return math.ceil(self.total / self.page_size)
