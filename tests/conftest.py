"""Shared test fixtures."""

import copy
import itertools
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from datetime import datetime

import pytest

from nutrition_admin.config import Settings
from nutrition_admin.containers import AppContainer
from nutrition_admin.domain.errors import RepositoryError
from nutrition_admin.domain.models import (
    Category,
    Food,
    FoodServingUnit,
    Meal,
    MealFood,
    ServingUnit,
)
from nutrition_admin.services.categories import CategoryRepository, CategoryService
from nutrition_admin.services.foods import FoodQuery, FoodRepository, FoodService
from nutrition_admin.services.meals import MealRepository, MealService
from nutrition_admin.services.serving_units import (
    ServingUnitRepository,
    ServingUnitService,
)


@dataclass
class InMemoryCategoryRepository(CategoryRepository):
    """In-memory category repository for tests."""

    categories: dict[int, Category] = field(default_factory=dict)
    ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def list_categories(self) -> list[Category]:
        return sorted(self.categories.values(), key=lambda item: item.name)

    def get_category(self, category_id: int) -> Category | None:
        return self.categories.get(category_id)

    def create_category(self, name: str) -> Category:
        category = Category(id=next(self.ids), name=name)
        self.categories[category.id] = category
        return category

    def update_category(self, category_id: int, name: str) -> Category:
        category = Category(id=category_id, name=name)
        self.categories[category_id] = category
        return category

    def delete_category(self, category_id: int) -> None:
        self.categories.pop(category_id, None)


@dataclass
class InMemoryServingUnitRepository(ServingUnitRepository):
    """In-memory serving unit repository for tests."""

    units: dict[int, ServingUnit] = field(default_factory=dict)
    ids: itertools.count = field(default_factory=lambda: itertools.count(1))

    def list_serving_units(self) -> list[ServingUnit]:
        return sorted(self.units.values(), key=lambda item: item.name)

    def get_serving_unit(self, serving_unit_id: int) -> ServingUnit | None:
        return self.units.get(serving_unit_id)

    def create_serving_unit(self, name: str) -> ServingUnit:
        unit = ServingUnit(id=next(self.ids), name=name)
        self.units[unit.id] = unit
        return unit

    def update_serving_unit(self, serving_unit_id: int, name: str) -> ServingUnit:
        unit = ServingUnit(id=serving_unit_id, name=name)
        self.units[serving_unit_id] = unit
        return unit

    def delete_serving_unit(self, serving_unit_id: int) -> None:
        self.units.pop(serving_unit_id, None)


@dataclass
class InMemoryFoodRepository(FoodRepository):
    """In-memory food repository with transactional writes.

    Setting ``fail_writes`` makes the next multi-step write fail after its
    first step; the repository then restores the state it started from.
    """

    foods: dict[int, Food] = field(default_factory=dict)
    ids: itertools.count = field(default_factory=lambda: itertools.count(1))
    fail_writes: bool = False
    queries: list[FoodQuery] = field(default_factory=list)

    def list_foods(self, query: FoodQuery) -> tuple[list[Food], int]:
        self.queries.append(query)
        matches = [food for food in self.foods.values() if _food_matches(food, query)]
        matches.sort(
            key=lambda food: getattr(food, query.sort_by),
            reverse=query.sort_order == "desc",
        )
        return matches[query.skip : query.skip + query.take], len(matches)

    def get_food(self, food_id: int) -> Food | None:
        return self.foods.get(food_id)

    def create_food(
        self, fields: dict[str, object], serving_units: list[FoodServingUnit]
    ) -> Food:
        with _Snapshot(self, "foods"):
            food = Food(id=next(self.ids), serving_units=[], **fields)
            self.foods[food.id] = food
            self._maybe_fail("create food")
            food = replace(food, serving_units=list(serving_units))
            self.foods[food.id] = food
        return food

    def replace_food(
        self,
        food_id: int,
        fields: dict[str, object],
        serving_units: list[FoodServingUnit],
    ) -> Food:
        with _Snapshot(self, "foods"):
            self.foods[food_id] = replace(self.foods[food_id], serving_units=[])
            self._maybe_fail("update food")
            food = Food(id=food_id, serving_units=list(serving_units), **fields)
            self.foods[food_id] = food
        return food

    def delete_food(self, food_id: int) -> None:
        with _Snapshot(self, "foods"):
            if food_id in self.foods:
                self.foods[food_id] = replace(self.foods[food_id], serving_units=[])
            self._maybe_fail("delete food")
            self.foods.pop(food_id, None)

    def _maybe_fail(self, action: str) -> None:
        if self.fail_writes:
            raise RepositoryError(f"Failed to {action}")


@dataclass
class InMemoryMealRepository(MealRepository):
    """In-memory meal repository that embeds foods like the real join."""

    food_repository: InMemoryFoodRepository
    serving_unit_repository: InMemoryServingUnitRepository
    meals: dict[int, Meal] = field(default_factory=dict)
    ids: itertools.count = field(default_factory=lambda: itertools.count(1))
    fail_writes: bool = False

    def list_meals(
        self, user_id: int | None, start: datetime, end: datetime
    ) -> list[Meal]:
        meals = [
            self._embed(meal)
            for meal in self.meals.values()
            if start <= meal.date_time < end
            and (user_id is None or meal.user_id == user_id)
        ]
        return sorted(meals, key=lambda meal: meal.date_time, reverse=True)

    def get_meal(self, meal_id: int) -> Meal | None:
        meal = self.meals.get(meal_id)
        return self._embed(meal) if meal else None

    def create_meal(
        self, user_id: int, date_time: datetime, meal_foods: list[MealFood]
    ) -> Meal:
        with _Snapshot(self, "meals"):
            meal = Meal(id=next(self.ids), user_id=user_id, date_time=date_time)
            self.meals[meal.id] = meal
            self._maybe_fail("create meal")
            meal = replace(meal, meal_foods=list(meal_foods))
            self.meals[meal.id] = meal
        return self._embed(meal)

    def replace_meal(
        self, meal_id: int, date_time: datetime, meal_foods: list[MealFood]
    ) -> Meal:
        with _Snapshot(self, "meals"):
            self.meals[meal_id] = replace(self.meals[meal_id], meal_foods=[])
            self._maybe_fail("update meal")
            meal = replace(
                self.meals[meal_id], date_time=date_time, meal_foods=list(meal_foods)
            )
            self.meals[meal_id] = meal
        return self._embed(meal)

    def delete_meal(self, meal_id: int) -> None:
        with _Snapshot(self, "meals"):
            if meal_id in self.meals:
                self.meals[meal_id] = replace(self.meals[meal_id], meal_foods=[])
            self._maybe_fail("delete meal")
            self.meals.pop(meal_id, None)

    def _maybe_fail(self, action: str) -> None:
        if self.fail_writes:
            raise RepositoryError(f"Failed to {action}")

    def _embed(self, meal: Meal) -> Meal:
        return replace(
            meal,
            meal_foods=[
                replace(
                    item,
                    food=self.food_repository.get_food(item.food_id),
                    serving_unit=self.serving_unit_repository.get_serving_unit(
                        item.serving_unit_id
                    ),
                )
                for item in meal.meal_foods
            ],
        )


class _Snapshot:
    """Restore a repository attribute when the wrapped block raises."""

    def __init__(self, repository: object, attribute: str) -> None:
        self.repository = repository
        self.attribute = attribute

    def __enter__(self) -> None:
        self.saved = copy.copy(getattr(self.repository, self.attribute))

    def __exit__(self, exc_type, exc, tb) -> bool:  # type: ignore[no-untyped-def]
        if exc_type is not None:
            setattr(self.repository, self.attribute, self.saved)
        return False


def _food_matches(food: Food, query: FoodQuery) -> bool:
    checks = [
        query.search_term is None or query.search_term.lower() in food.name.lower(),
        query.calories_min is None or food.calories >= query.calories_min,
        query.calories_max is None or food.calories <= query.calories_max,
        query.protein_min is None or food.protein >= query.protein_min,
        query.protein_max is None or food.protein <= query.protein_max,
        query.category_id is None or food.category_id == query.category_id,
    ]
    return all(checks)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service.key.test",
        admin_token="admin-token",
        api_base_url="http://testserver",
        state_dir=".nutrition_admin_test",
    )


@pytest.fixture
def category_repository() -> InMemoryCategoryRepository:
    return InMemoryCategoryRepository()


@pytest.fixture
def serving_unit_repository() -> InMemoryServingUnitRepository:
    return InMemoryServingUnitRepository()


@pytest.fixture
def food_repository() -> InMemoryFoodRepository:
    return InMemoryFoodRepository()


@pytest.fixture
def meal_repository(
    food_repository: InMemoryFoodRepository,
    serving_unit_repository: InMemoryServingUnitRepository,
) -> InMemoryMealRepository:
    return InMemoryMealRepository(
        food_repository=food_repository,
        serving_unit_repository=serving_unit_repository,
    )


@pytest.fixture
def container(
    settings: Settings,
    category_repository: InMemoryCategoryRepository,
    serving_unit_repository: InMemoryServingUnitRepository,
    food_repository: InMemoryFoodRepository,
    meal_repository: InMemoryMealRepository,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        category_service=CategoryService(category_repository),
        serving_unit_service=ServingUnitService(serving_unit_repository),
        food_service=FoodService(food_repository),
        meal_service=MealService(meal_repository),
        close_resources=close_resources,
    )


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def app_logs() -> Iterator[list[logging.LogRecord]]:
    """Collect records sent to the application logger."""
    logger = logging.getLogger("nutrition_admin")
    handler = _ListHandler()
    logger.addHandler(handler)
    try:
        yield handler.records
    finally:
        logger.removeHandler(handler)
