"""Supabase repository for meals."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from nutrition_admin.adapters.supabase_rows import parse_meal, single_row
from nutrition_admin.domain.models import Meal, MealFood
from nutrition_admin.services.meals import MealRepository

_MEAL_COLUMNS = (
    "id, user_id, date_time, "
    "meal_foods(food_id, serving_unit_id, amount, foods(*), serving_units(id, name))"
)


@dataclass
class SupabaseMealRepository(MealRepository):
    """Supabase implementation for meals."""

    client: Client

    def list_meals(
        self, user_id: int | None, start: datetime, end: datetime
    ) -> list[Meal]:
        """Return meals logged in [start, end), newest first."""
        request = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .gte("date_time", start.isoformat())
            .lt("date_time", end.isoformat())
        )
        if user_id is not None:
            request = request.eq("user_id", user_id)
        response = request.order("date_time", desc=True).execute()
        return [parse_meal(row) for row in response.data or []]

    def get_meal(self, meal_id: int) -> Meal | None:
        """Return a meal by id, if present."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("id", meal_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_meal(response.data[0])

    def create_meal(
        self, user_id: int, date_time: datetime, meal_foods: list[MealFood]
    ) -> Meal:
        """Create a meal together with its foods."""
        response = self.client.rpc(
            "create_meal_with_foods",
            {
                "user_id": user_id,
                "date_time": date_time.isoformat(),
                "meal_foods": _serialize_foods(meal_foods),
            },
        ).execute()
        return parse_meal(single_row(response.data, "create meal"))

    def replace_meal(
        self, meal_id: int, date_time: datetime, meal_foods: list[MealFood]
    ) -> Meal:
        """Update a meal and replace its foods atomically."""
        response = self.client.rpc(
            "replace_meal_with_foods",
            {
                "meal_id": meal_id,
                "date_time": date_time.isoformat(),
                "meal_foods": _serialize_foods(meal_foods),
            },
        ).execute()
        return parse_meal(single_row(response.data, "update meal"))

    def delete_meal(self, meal_id: int) -> None:
        """Delete a meal and its foods atomically."""
        self.client.rpc("delete_meal_cascade", {"meal_id": meal_id}).execute()


def _serialize_foods(meal_foods: list[MealFood]) -> list[dict[str, object]]:
    return [
        {
            "food_id": item.food_id,
            "serving_unit_id": item.serving_unit_id,
            "amount": item.amount,
        }
        for item in meal_foods
    ]
