"""Services for managing serving units."""

from dataclasses import dataclass
from typing import Protocol

from nutrition_admin.domain.errors import EntityNotFoundError
from nutrition_admin.domain.models import ServingUnit
from nutrition_admin.domain.schemas import ServingUnitCreate, ServingUnitUpdate


class ServingUnitRepository(Protocol):
    """Persistence interface for serving units."""

    def list_serving_units(self) -> list[ServingUnit]:
        """Return all serving units."""

    def get_serving_unit(self, serving_unit_id: int) -> ServingUnit | None:
        """Return a serving unit by id, if present."""

    def create_serving_unit(self, name: str) -> ServingUnit:
        """Create a serving unit and return it."""

    def update_serving_unit(self, serving_unit_id: int, name: str) -> ServingUnit:
        """Rename a serving unit and return it."""

    def delete_serving_unit(self, serving_unit_id: int) -> None:
        """Delete a serving unit."""


@dataclass
class ServingUnitService:
    """Application service for serving unit operations."""

    repository: ServingUnitRepository

    def list_serving_units(self) -> list[ServingUnit]:
        """Return all serving units."""
        return self.repository.list_serving_units()

    def get_serving_unit(self, serving_unit_id: int) -> ServingUnitUpdate | None:
        """Return the edit form for a serving unit, or None when it is gone."""
        serving_unit = self.repository.get_serving_unit(serving_unit_id)
        if serving_unit is None:
            return None
        return ServingUnitUpdate(id=serving_unit.id, name=serving_unit.name)

    def create_serving_unit(self, payload: dict[str, object]) -> ServingUnit:
        """Validate and create a serving unit."""
        data = ServingUnitCreate.model_validate(payload)
        return self.repository.create_serving_unit(data.name)

    def update_serving_unit(self, payload: dict[str, object]) -> ServingUnit:
        """Validate and update a serving unit."""
        data = ServingUnitUpdate.model_validate(payload)
        if self.repository.get_serving_unit(data.id) is None:
            raise EntityNotFoundError("Serving unit", data.id)
        return self.repository.update_serving_unit(data.id, data.name)

    def delete_serving_unit(self, serving_unit_id: int) -> None:
        """Delete a serving unit."""
        self.repository.delete_serving_unit(serving_unit_id)
