"""JSON serialization of domain records for HTTP responses."""

from nutrition_admin.domain.models import (
    Category,
    Food,
    Meal,
    NutritionTotals,
    PaginatedResult,
    ServingUnit,
)


def serialize_category(category: Category) -> dict[str, object]:
    return {"id": category.id, "name": category.name}


def serialize_serving_unit(serving_unit: ServingUnit) -> dict[str, object]:
    return {"id": serving_unit.id, "name": serving_unit.name}


def serialize_food(food: Food) -> dict[str, object]:
    return {
        "id": food.id,
        "name": food.name,
        "calories": food.calories,
        "protein": food.protein,
        "fat": food.fat,
        "carbohydrates": food.carbohydrates,
        "fiber": food.fiber,
        "sugar": food.sugar,
        "categoryId": food.category_id,
        "foodServingUnits": [
            {"servingUnitId": unit.serving_unit_id, "grams": unit.grams}
            for unit in food.serving_units
        ],
    }


def serialize_food_page(result: PaginatedResult[Food]) -> dict[str, object]:
    return {
        "data": [serialize_food(food) for food in result.data],
        "total": result.total,
        "page": result.page,
        "pageSize": result.page_size,
        "totalPages": result.total_pages,
    }


def serialize_meal(meal: Meal) -> dict[str, object]:
    return {
        "id": meal.id,
        "userId": meal.user_id,
        "dateTime": meal.date_time.isoformat(),
        "mealFoods": [
            {
                "foodId": item.food_id,
                "servingUnitId": item.serving_unit_id,
                "amount": item.amount,
                "food": serialize_food(item.food) if item.food else None,
                "servingUnit": serialize_serving_unit(item.serving_unit)
                if item.serving_unit
                else None,
            }
            for item in meal.meal_foods
        ],
    }


def serialize_totals(totals: NutritionTotals) -> dict[str, object]:
    return {
        "calories": totals.calories,
        "protein": totals.protein,
        "carbohydrates": totals.carbohydrates,
        "fat": totals.fat,
    }
