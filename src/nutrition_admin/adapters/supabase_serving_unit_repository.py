"""Supabase implementation for serving units."""

from dataclasses import dataclass

from supabase import Client

from nutrition_admin.adapters.supabase_rows import parse_serving_unit, single_row
from nutrition_admin.domain.models import ServingUnit
from nutrition_admin.services.serving_units import ServingUnitRepository


@dataclass
class SupabaseServingUnitRepository(ServingUnitRepository):
    """Supabase-backed repository for serving units."""

    client: Client

    def list_serving_units(self) -> list[ServingUnit]:
        """Return all serving units ordered by name."""
        response = (
            self.client.table("serving_units").select("id, name").order("name").execute()
        )
        return [parse_serving_unit(row) for row in response.data or []]

    def get_serving_unit(self, serving_unit_id: int) -> ServingUnit | None:
        """Return a serving unit by id, if present."""
        response = (
            self.client.table("serving_units")
            .select("id, name")
            .eq("id", serving_unit_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_serving_unit(response.data[0])

    def create_serving_unit(self, name: str) -> ServingUnit:
        """Create a serving unit and return it."""
        response = self.client.table("serving_units").insert({"name": name}).execute()
        return parse_serving_unit(single_row(response.data, "create serving unit"))

    def update_serving_unit(self, serving_unit_id: int, name: str) -> ServingUnit:
        """Rename a serving unit and return it."""
        response = (
            self.client.table("serving_units")
            .update({"name": name})
            .eq("id", serving_unit_id)
            .execute()
        )
        return parse_serving_unit(single_row(response.data, "update serving unit"))

    def delete_serving_unit(self, serving_unit_id: int) -> None:
        """Delete a serving unit."""
        self.client.table("serving_units").delete().eq("id", serving_unit_id).execute()
