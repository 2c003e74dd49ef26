"""UI state stores for each entity screen and the global alert dialog."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal

from nutrition_admin.client.store import (
    StateSetter,
    StateStorage,
    Store,
    StoreRegistry,
    create_store,
)
from nutrition_admin.domain.filters import (
    FoodFilters,
    MealFilters,
    default_food_filters,
    default_meal_filters,
)

if TYPE_CHECKING:
    from nutrition_admin.client.confirmation import AlertConfig

CATEGORIES_STORE = "categories-store"
SERVING_UNITS_STORE = "serving-units-store"
FOODS_STORE = "foods-store"
MEALS_STORE = "meals-store"
GLOBAL_STORE = "global-store"

PageAction = Literal["next", "prev"] | int


def selection_state(set_state: StateSetter, entity: str) -> dict[str, object]:
    """Return selection and dialog state plus actions for one entity.

    Closing the dialog always clears the selection, whether through
    ``close_<entity>_dialog`` or ``update_<entity>_dialog_open(False)``.
    """
    selected_key = f"selected_{entity}_id"
    open_key = f"{entity}_dialog_open"

    def update_selected_id(entity_id: int | None) -> None:
        set_state(lambda state: {selected_key: entity_id})

    def update_dialog_open(is_open: bool) -> None:
        def recipe(state: dict[str, object]) -> None:
            state[open_key] = is_open
            if not is_open:
                state[selected_key] = None

        set_state(recipe)

    def close_dialog() -> None:
        update_dialog_open(False)

    return {
        selected_key: None,
        open_key: False,
        f"update_selected_{entity}_id": update_selected_id,
        f"update_{entity}_dialog_open": update_dialog_open,
        f"close_{entity}_dialog": close_dialog,
    }


def create_categories_store(
    storage: StateStorage | None = None, registry: StoreRegistry | None = None
) -> Store:
    return create_store(
        lambda set_state: selection_state(set_state, "category"),
        name=CATEGORIES_STORE,
        storage=storage,
        registry=registry,
    )


def create_serving_units_store(
    storage: StateStorage | None = None, registry: StoreRegistry | None = None
) -> Store:
    return create_store(
        lambda set_state: selection_state(set_state, "serving_unit"),
        name=SERVING_UNITS_STORE,
        storage=storage,
        registry=registry,
    )


def _foods_state(set_state: StateSetter) -> dict[str, object]:
    def update_food_filters(filters: FoodFilters) -> None:
        set_state(lambda state: {"food_filters": filters})

    def update_food_filters_drawer_open(is_open: bool) -> None:
        set_state(lambda state: {"food_filters_drawer_open": is_open})

    def update_food_filters_page(action: PageAction) -> None:
        def recipe(state: dict[str, object]) -> dict[str, object]:
            filters: FoodFilters = state["food_filters"]
            if action == "next":
                page = filters.page + 1
            elif action == "prev":
                page = max(filters.page - 1, 1)
            else:
                page = max(int(action), 1)
            return {"food_filters": filters.model_copy(update={"page": page})}

        set_state(recipe)

    def update_food_filters_search_term(search_term: str) -> None:
        def recipe(state: dict[str, object]) -> dict[str, object]:
            filters: FoodFilters = state["food_filters"]
            return {
                "food_filters": filters.model_copy(update={"search_term": search_term})
            }

        set_state(recipe)

    return {
        **selection_state(set_state, "food"),
        "food_filters": default_food_filters(),
        "food_filters_drawer_open": False,
        "update_food_filters": update_food_filters,
        "update_food_filters_drawer_open": update_food_filters_drawer_open,
        "update_food_filters_page": update_food_filters_page,
        "update_food_filters_search_term": update_food_filters_search_term,
    }


def create_foods_store(
    storage: StateStorage | None = None, registry: StoreRegistry | None = None
) -> Store:
    return create_store(
        _foods_state,
        name=FOODS_STORE,
        storage=storage,
        exclude_from_persist={"food_filters"},
        registry=registry,
    )


def _meals_state(set_state: StateSetter) -> dict[str, object]:
    def update_meal_filters(filters: MealFilters) -> None:
        set_state(lambda state: {"meal_filters": filters})

    return {
        **selection_state(set_state, "meal"),
        "meal_filters": default_meal_filters(),
        "update_meal_filters": update_meal_filters,
    }


def create_meals_store(
    storage: StateStorage | None = None, registry: StoreRegistry | None = None
) -> Store:
    return create_store(
        _meals_state,
        name=MEALS_STORE,
        storage=storage,
        exclude_from_persist={"meal_filters"},
        registry=registry,
    )


def _global_state(set_state: StateSetter) -> dict[str, object]:
    def update_alert_open(is_open: bool) -> None:
        def recipe(state: dict[str, object]) -> None:
            state["alert_open"] = is_open
            if not is_open:
                state["alert_config"] = None

        set_state(recipe)

    def show_alert(config: AlertConfig) -> None:
        set_state(lambda state: {"alert_open": True, "alert_config": config})

    return {
        "alert_open": False,
        "alert_config": None,
        "update_alert_open": update_alert_open,
        "show_alert": show_alert,
    }


def create_global_store(
    storage: StateStorage | None = None, registry: StoreRegistry | None = None
) -> Store:
    return create_store(
        _global_state,
        name=GLOBAL_STORE,
        storage=storage,
        exclude_from_persist={"alert_open", "alert_config"},
        registry=registry,
    )


@dataclass
class ClientStores:
    """All UI stores of one client session."""

    categories: Store
    serving_units: Store
    foods: Store
    meals: Store
    global_store: Store


def create_client_stores(
    storage: StateStorage | None = None, registry: StoreRegistry | None = None
) -> ClientStores:
    """Create every entity store plus the global alert store."""
    resolved_registry = registry or StoreRegistry()
    return ClientStores(
        categories=create_categories_store(storage, resolved_registry),
        serving_units=create_serving_units_store(storage, resolved_registry),
        foods=create_foods_store(storage, resolved_registry),
        meals=create_meals_store(storage, resolved_registry),
        global_store=create_global_store(storage, resolved_registry),
    )
