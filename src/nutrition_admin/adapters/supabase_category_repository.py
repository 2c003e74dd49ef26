"""Supabase implementation for categories."""

from dataclasses import dataclass

from supabase import Client

from nutrition_admin.adapters.supabase_rows import parse_category, single_row
from nutrition_admin.domain.models import Category
from nutrition_admin.services.categories import CategoryRepository


@dataclass
class SupabaseCategoryRepository(CategoryRepository):
    """Supabase-backed repository for categories."""

    client: Client

    def list_categories(self) -> list[Category]:
        """Return all categories ordered by name."""
        response = (
            self.client.table("categories").select("id, name").order("name").execute()
        )
        return [parse_category(row) for row in response.data or []]

    def get_category(self, category_id: int) -> Category | None:
        """Return a category by id, if present."""
        response = (
            self.client.table("categories")
            .select("id, name")
            .eq("id", category_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return parse_category(response.data[0])

    def create_category(self, name: str) -> Category:
        """Create a category and return it."""
        response = self.client.table("categories").insert({"name": name}).execute()
        return parse_category(single_row(response.data, "create category"))

    def update_category(self, category_id: int, name: str) -> Category:
        """Rename a category and return it."""
        response = (
            self.client.table("categories")
            .update({"name": name})
            .eq("id", category_id)
            .execute()
        )
        return parse_category(single_row(response.data, "update category"))

    def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        self.client.table("categories").delete().eq("id", category_id).execute()
