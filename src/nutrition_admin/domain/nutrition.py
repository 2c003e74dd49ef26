"""Nutrition totals for meals."""

from nutrition_admin.domain.models import Meal, NutritionTotals


def meal_totals(meal: Meal) -> NutritionTotals:
    """Sum food macros multiplied by the consumed amount."""
    calories = protein = carbohydrates = fat = 0.0
    for meal_food in meal.meal_foods:
        food = meal_food.food
        if food is None:
            continue
        multiplier = meal_food.amount
        calories += food.calories * multiplier
        protein += food.protein * multiplier
        carbohydrates += food.carbohydrates * multiplier
        fat += food.fat * multiplier
    return NutritionTotals(
        calories=calories,
        protein=protein,
        carbohydrates=carbohydrates,
        fat=fat,
    )


def daily_totals(meals: list[Meal]) -> NutritionTotals:
    """Sum totals across a list of meals."""
    total = NutritionTotals()
    for meal in meals:
        current = meal_totals(meal)
        total = NutritionTotals(
            calories=total.calories + current.calories,
            protein=total.protein + current.protein,
            carbohydrates=total.carbohydrates + current.carbohydrates,
            fat=total.fat + current.fat,
        )
    return total
