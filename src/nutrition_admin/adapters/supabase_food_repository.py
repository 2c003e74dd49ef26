"""Supabase implementation for the food catalog.

Writes that touch a food and its serving units run inside Postgres
functions so each one commits or rolls back as a whole.
"""

from dataclasses import dataclass

from supabase import Client

from nutrition_admin.adapters.supabase_rows import parse_food, single_row
from nutrition_admin.domain.models import Food, FoodServingUnit
from nutrition_admin.services.foods import FoodQuery, FoodRepository

_FOOD_COLUMNS = (
    "id, name, calories, protein, fat, carbohydrates, fiber, sugar, category_id, "
    "food_serving_units(serving_unit_id, grams)"
)


@dataclass
class SupabaseFoodRepository(FoodRepository):
    """Supabase-backed repository for foods."""

    client: Client

    def list_foods(self, query: FoodQuery) -> tuple[list[Food], int]:
        """Return one page of foods and the total match count."""
        request = self.client.table("foods").select(_FOOD_COLUMNS, count="exact")
        if query.search_term:
            request = request.ilike("name", f"%{query.search_term}%")
        if query.calories_min is not None:
            request = request.gte("calories", query.calories_min)
        if query.calories_max is not None:
            request = request.lte("calories", query.calories_max)
        if query.protein_min is not None:
            request = request.gte("protein", query.protein_min)
        if query.protein_max is not None:
            request = request.lte("protein", query.protein_max)
        if query.category_id is not None:
            request = request.eq("category_id", query.category_id)
        response = (
            request.order(query.sort_by, desc=query.sort_order == "desc")
            .range(query.skip, query.skip + query.take - 1)
            .execute()
        )
        foods = [parse_food(row) for row in response.data or []]
        return foods, int(response.count or 0)

    def get_food(self, food_id: int) -> Food | None:
        """Return a food with its serving units, if present."""
        response = (
            self.client.table("foods")
            .select(_FOOD_COLUMNS)
            .eq("id", food_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_food(response.data[0])

    def create_food(
        self, fields: dict[str, object], serving_units: list[FoodServingUnit]
    ) -> Food:
        """Create a food together with its serving units."""
        response = self.client.rpc(
            "create_food_with_serving_units",
            {"food": fields, "serving_units": _serialize_units(serving_units)},
        ).execute()
        return parse_food(single_row(response.data, "create food"))

    def replace_food(
        self,
        food_id: int,
        fields: dict[str, object],
        serving_units: list[FoodServingUnit],
    ) -> Food:
        """Update a food and replace all of its serving units atomically."""
        response = self.client.rpc(
            "replace_food_with_serving_units",
            {
                "food_id": food_id,
                "food": fields,
                "serving_units": _serialize_units(serving_units),
            },
        ).execute()
        return parse_food(single_row(response.data, "update food"))

    def delete_food(self, food_id: int) -> None:
        """Delete a food and its serving units atomically."""
        self.client.rpc("delete_food_cascade", {"food_id": food_id}).execute()


def _serialize_units(serving_units: list[FoodServingUnit]) -> list[dict[str, object]]:
    return [
        {"serving_unit_id": unit.serving_unit_id, "grams": unit.grams}
        for unit in serving_units
    ]
