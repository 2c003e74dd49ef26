"""Services for managing food categories."""

from dataclasses import dataclass
from typing import Protocol

from nutrition_admin.domain.errors import EntityNotFoundError
from nutrition_admin.domain.models import Category
from nutrition_admin.domain.schemas import CategoryCreate, CategoryUpdate


class CategoryRepository(Protocol):
    """Persistence interface for categories."""

    def list_categories(self) -> list[Category]:
        """Return all categories."""

    def get_category(self, category_id: int) -> Category | None:
        """Return a category by id, if present."""

    def create_category(self, name: str) -> Category:
        """Create a category and return it."""

    def update_category(self, category_id: int, name: str) -> Category:
        """Rename a category and return it."""

    def delete_category(self, category_id: int) -> None:
        """Delete a category."""


@dataclass
class CategoryService:
    """Application service for category operations."""

    repository: CategoryRepository

    def list_categories(self) -> list[Category]:
        """Return all categories."""
        return self.repository.list_categories()

    def get_category(self, category_id: int) -> CategoryUpdate | None:
        """Return the edit form for a category, or None when it is gone."""
        category = self.repository.get_category(category_id)
        if category is None:
            return None
        return CategoryUpdate(id=category.id, name=category.name)

    def create_category(self, payload: dict[str, object]) -> Category:
        """Validate and create a category."""
        data = CategoryCreate.model_validate(payload)
        return self.repository.create_category(data.name)

    def update_category(self, payload: dict[str, object]) -> Category:
        """Validate and update a category."""
        data = CategoryUpdate.model_validate(payload)
        if self.repository.get_category(data.id) is None:
            raise EntityNotFoundError("Category", data.id)
        return self.repository.update_category(data.id, data.name)

    def delete_category(self, category_id: int) -> None:
        """Delete a category."""
        self.repository.delete_category(category_id)
