"""Tests for schemas, coercion helpers and nutrition totals."""

from datetime import datetime

import pytest
from pydantic import ValidationError

from nutrition_admin.domain.coercion import (
    to_number_safe,
    to_optional_id,
    to_string_safe,
)
from nutrition_admin.domain.errors import format_validation_errors
from nutrition_admin.domain.filters import (
    FOOD_FILTERS_DEFAULT_VALUES,
    FoodFilters,
    MealFilters,
    default_food_filters,
)
from nutrition_admin.domain.models import Food, Meal, MealFood, PaginatedResult
from nutrition_admin.domain.nutrition import daily_totals, meal_totals
from nutrition_admin.domain.schemas import (
    CategoryUpdate,
    category_schema,
    food_schema,
    matches_zero_to_9999,
)


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("", True),
        ("0", True),
        ("0.25", True),
        ("9999", True),
        ("12.5", True),
        ("10000", False),
        ("01", False),
        ("1.234", False),
        ("-1", False),
        ("abc", False),
    ],
)
def test_zero_to_9999_pattern(value: str, expected: bool) -> None:
    assert matches_zero_to_9999(value) is expected


@pytest.mark.parametrize(
    ("value", "expected"),
    [("12", 12), (" 3.5 ", 3.5), ("", 0), ("abc", 0), (None, 0), (7, 7), (True, 1)],
)
def test_to_number_safe(value: object, expected: float) -> None:
    assert to_number_safe(value) == expected


def test_to_string_safe() -> None:
    assert to_string_safe(None) == ""
    assert to_string_safe(120.0) == "120"
    assert to_string_safe(3.6) == "3.6"
    assert to_string_safe(4) == "4"


def test_to_optional_id() -> None:
    assert to_optional_id("") is None
    assert to_optional_id("0") is None
    assert to_optional_id("12") == 12


def test_action_discriminator_selects_schema() -> None:
    created = category_schema.validate_python({"action": "create", "name": "Fruit"})
    updated = category_schema.validate_python(
        {"action": "update", "id": 2, "name": "Fruit"}
    )

    assert created.action == "create"
    assert isinstance(updated, CategoryUpdate)
    with pytest.raises(ValidationError):
        category_schema.validate_python({"action": "update", "name": "Fruit"})
    with pytest.raises(ValidationError):
        category_schema.validate_python({"action": "create", "id": 2, "name": "Fruit"})


def test_numbers_are_accepted_as_form_strings() -> None:
    food = food_schema.validate_python(
        {"action": "create", "name": "Pear", "calories": 57, "categoryId": 3}
    )

    assert food.calories == "57"
    assert food.category_id == "3"


def test_validation_messages_use_form_paths() -> None:
    with pytest.raises(ValidationError) as exc_info:
        food_schema.validate_python(
            {
                "action": "create",
                "name": " ",
                "calories": "12.345",
                "categoryId": "",
                "foodServingUnits": [{"foodServingUnitId": "1", "grams": "abc"}],
            }
        )

    errors = format_validation_errors(exc_info.value)

    assert errors["name"] == "This field is required"
    assert errors["categoryId"] == "This field is required"
    assert errors["calories"].startswith("Enter a number between 0 and 9999")
    assert "foodServingUnits.0.grams" in errors


def test_food_filters_defaults_and_query_params() -> None:
    filters = default_food_filters()

    assert filters.to_form() == FOOD_FILTERS_DEFAULT_VALUES
    assert filters.to_query_params() == {
        "searchTerm": "",
        "caloriesMin": "0",
        "caloriesMax": "9999",
        "proteinMin": "0",
        "proteinMax": "9999",
        "categoryId": "",
        "page": 1,
        "pageSize": 12,
        "sortBy": "name",
        "sortOrder": "desc",
    }


@pytest.mark.parametrize("page_size", [0, 101])
def test_food_filters_page_size_bounds(page_size: int) -> None:
    with pytest.raises(ValidationError):
        FoodFilters.model_validate({**FOOD_FILTERS_DEFAULT_VALUES, "pageSize": page_size})


def test_meal_filters_query_params() -> None:
    filters = MealFilters.model_validate({"dateTime": "2024-05-01T08:15:00"})

    assert filters.to_query_params() == {"dateTime": "2024-05-01T08:15:00"}


def _food(**macros: float) -> Food:
    values = {"calories": 0.0, "protein": 0.0, "fat": 0.0, "carbohydrates": 0.0}
    values.update(macros)
    return Food(id=1, name="x", fiber=0.0, sugar=0.0, category_id=None, **values)


def test_meal_and_daily_totals() -> None:
    moment = datetime(2024, 5, 1, 8)
    breakfast = Meal(
        id=1,
        user_id=1,
        date_time=moment,
        meal_foods=[
            MealFood(
                food_id=1,
                serving_unit_id=1,
                amount=2,
                food=_food(calories=100, protein=5),
            ),
            MealFood(food_id=2, serving_unit_id=1, amount=1, food=None),
        ],
    )
    lunch = Meal(
        id=2,
        user_id=1,
        date_time=moment,
        meal_foods=[
            MealFood(
                food_id=3,
                serving_unit_id=1,
                amount=0.5,
                food=_food(fat=10, carbohydrates=40),
            ),
        ],
    )

    assert meal_totals(breakfast).calories == 200
    totals = daily_totals([breakfast, lunch])
    assert (totals.calories, totals.protein, totals.fat, totals.carbohydrates) == (
        200,
        10,
        5,
        20,
    )


def test_paginated_result_total_pages() -> None:
    assert PaginatedResult(data=[], total=25, page=1, page_size=12).total_pages == 3
    assert PaginatedResult(data=[], total=0, page=1, page_size=12).total_pages == 0
