"""Row parsers shared by the Supabase repositories."""

from datetime import datetime

from nutrition_admin.domain.errors import RepositoryError
from nutrition_admin.domain.models import (
    Category,
    Food,
    FoodServingUnit,
    Meal,
    MealFood,
    ServingUnit,
)


def single_row(data: object, action: str) -> dict[str, object]:
    """Return the single row of an insert/update/rpc response."""
    if isinstance(data, list):
        data = data[0] if data else None
    if not isinstance(data, dict):
        raise RepositoryError(f"Failed to {action}")
    return data


def parse_category(row: dict[str, object]) -> Category:
    """Parse a category row."""
    return Category(id=int(row["id"]), name=str(row.get("name", "")))


def parse_serving_unit(row: dict[str, object]) -> ServingUnit:
    """Parse a serving unit row."""
    return ServingUnit(id=int(row["id"]), name=str(row.get("name", "")))


def parse_food(row: dict[str, object]) -> Food:
    """Parse a food row with its embedded serving units."""
    category_id = row.get("category_id")
    return Food(
        id=int(row["id"]),
        name=str(row.get("name", "")),
        calories=float(row.get("calories") or 0.0),
        protein=float(row.get("protein") or 0.0),
        fat=float(row.get("fat") or 0.0),
        carbohydrates=float(row.get("carbohydrates") or 0.0),
        fiber=float(row.get("fiber") or 0.0),
        sugar=float(row.get("sugar") or 0.0),
        category_id=int(category_id) if category_id is not None else None,
        serving_units=[
            FoodServingUnit(
                serving_unit_id=int(unit["serving_unit_id"]),
                grams=float(unit.get("grams") or 0.0),
            )
            for unit in row.get("food_serving_units") or []
        ],
    )


def parse_meal(row: dict[str, object]) -> Meal:
    """Parse a meal row with embedded meal foods."""
    meal_foods = []
    for item in row.get("meal_foods") or []:
        food_row = item.get("foods")
        unit_row = item.get("serving_units")
        meal_foods.append(
            MealFood(
                food_id=int(item["food_id"]),
                serving_unit_id=int(item["serving_unit_id"]),
                amount=float(item.get("amount") or 0.0),
                food=parse_food(food_row) if isinstance(food_row, dict) else None,
                serving_unit=parse_serving_unit(unit_row)
                if isinstance(unit_row, dict)
                else None,
            )
        )
    return Meal(
        id=int(row["id"]),
        user_id=int(row["user_id"]),
        date_time=datetime.fromisoformat(str(row["date_time"])),
        meal_foods=meal_foods,
    )
