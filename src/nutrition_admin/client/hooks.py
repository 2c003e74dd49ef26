"""Entity queries, mutations and form dialogs wired to one client."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from nutrition_admin.client.dialogs import EntityFormDialog
from nutrition_admin.client.field_groups import FieldGroup
from nutrition_admin.client.filters import FoodFiltersController
from nutrition_admin.client.forms import FormState
from nutrition_admin.client.queries import Mutation, Query
from nutrition_admin.domain.schemas import (
    category_default_values,
    category_schema,
    food_default_values,
    food_schema,
    meal_default_values,
    meal_schema,
    serving_unit_default_values,
    serving_unit_schema,
)

if TYPE_CHECKING:
    from nutrition_admin.containers import ClientContainer

CATEGORIES = "categories"
SERVING_UNITS = "serving-units"
FOODS = "foods"
MEALS = "meals"


def use_categories(client: ClientContainer) -> Query[list[dict[str, object]]]:
    return Query(
        client.query_client,
        lambda: (CATEGORIES,),
        lambda key: client.api.list_categories(),
    ).start()


def use_category(client: ClientContainer) -> Query[dict[str, object] | None]:
    """Load the selected category's form; idle while nothing is selected."""
    store = client.stores.categories

    def key() -> tuple:
        return (CATEGORIES, {"id": store.get_state()["selected_category_id"]})

    return Query(
        client.query_client,
        key,
        lambda key: client.api.get_category(key[1]["id"]),
        enabled=lambda: store.get_state()["selected_category_id"] is not None,
        stores=[store],
    ).start()


def use_serving_units(client: ClientContainer) -> Query[list[dict[str, object]]]:
    return Query(
        client.query_client,
        lambda: (SERVING_UNITS,),
        lambda key: client.api.list_serving_units(),
    ).start()


def use_serving_unit(client: ClientContainer) -> Query[dict[str, object] | None]:
    """Load the selected serving unit's form; idle while nothing is selected."""
    store = client.stores.serving_units

    def key() -> tuple:
        return (SERVING_UNITS, {"id": store.get_state()["selected_serving_unit_id"]})

    return Query(
        client.query_client,
        key,
        lambda key: client.api.get_serving_unit(key[1]["id"]),
        enabled=lambda: store.get_state()["selected_serving_unit_id"] is not None,
        stores=[store],
    ).start()


def use_foods(client: ClientContainer) -> Query[dict[str, object]]:
    """Load the page of foods selected by the committed filters."""
    store = client.stores.foods
    return Query(
        client.query_client,
        lambda: (FOODS, store.get_state()["food_filters"]),
        lambda key: client.api.list_foods(key[1].to_query_params()),
        stores=[store],
    ).start()


def use_food(client: ClientContainer) -> Query[dict[str, object] | None]:
    store = client.stores.foods

    def key() -> tuple:
        return (FOODS, {"id": store.get_state()["selected_food_id"]})

    return Query(
        client.query_client,
        key,
        lambda key: client.api.get_food(key[1]["id"]),
        enabled=lambda: store.get_state()["selected_food_id"] is not None,
        stores=[store],
    ).start()


def use_food_filters(client: ClientContainer) -> FoodFiltersController:
    """Return the search box and filter drawer controller for the food list."""
    return FoodFiltersController(
        client.stores.foods,
        debounce_seconds=client.settings.search_debounce_ms / 1000,
    )


def use_meals(client: ClientContainer) -> Query[list[dict[str, object]]]:
    """Load the session user's meals for the day in the meal filters."""
    store = client.stores.meals
    return Query(
        client.query_client,
        lambda: (MEALS, store.get_state()["meal_filters"]),
        lambda key: client.api.list_meals(key[1].to_query_params()),
        stores=[store],
    ).start()


def use_meal(client: ClientContainer) -> Query[dict[str, object] | None]:
    store = client.stores.meals

    def key() -> tuple:
        return (MEALS, {"id": store.get_state()["selected_meal_id"]})

    return Query(
        client.query_client,
        key,
        lambda key: client.api.get_meal(key[1]["id"]),
        enabled=lambda: store.get_state()["selected_meal_id"] is not None,
        stores=[store],
    ).start()


def use_meal_totals(client: ClientContainer) -> Query[dict[str, object]]:
    store = client.stores.meals
    return Query(
        client.query_client,
        lambda: (MEALS, "totals", store.get_state()["meal_filters"]),
        lambda key: client.api.get_meal_totals(key[2].to_query_params()),
        stores=[store],
    ).start()


def _mutation(
    client: ClientContainer,
    mutate_fn: Any,
    family: str,
    message: str,
    schema: Any = None,
) -> Mutation:
    return Mutation(
        client.query_client,
        mutate_fn,
        family=family,
        notifier=client.notifier,
        schema=schema,
        success_message=message,
    )


def use_create_category(client: ClientContainer) -> Mutation:
    return _mutation(
        client,
        client.api.create_category,
        CATEGORIES,
        "Category created successfully.",
        category_schema,
    )


def use_update_category(client: ClientContainer) -> Mutation:
    return _mutation(
        client,
        client.api.update_category,
        CATEGORIES,
        "Category updated successfully.",
        category_schema,
    )


def use_delete_category(client: ClientContainer) -> Mutation:
    return _mutation(
        client, client.api.delete_category, CATEGORIES, "Category deleted successfully."
    )


def use_create_serving_unit(client: ClientContainer) -> Mutation:
    return _mutation(
        client,
        client.api.create_serving_unit,
        SERVING_UNITS,
        "Serving unit created successfully.",
        serving_unit_schema,
    )


def use_update_serving_unit(client: ClientContainer) -> Mutation:
    return _mutation(
        client,
        client.api.update_serving_unit,
        SERVING_UNITS,
        "Serving unit updated successfully.",
        serving_unit_schema,
    )


def use_delete_serving_unit(client: ClientContainer) -> Mutation:
    return _mutation(
        client,
        client.api.delete_serving_unit,
        SERVING_UNITS,
        "Serving unit deleted successfully.",
    )


def use_create_food(client: ClientContainer) -> Mutation:
    return _mutation(
        client,
        client.api.create_food,
        FOODS,
        "Food created successfully.",
        food_schema,
    )


def use_update_food(client: ClientContainer) -> Mutation:
    return _mutation(
        client,
        client.api.update_food,
        FOODS,
        "Food updated successfully.",
        food_schema,
    )


def use_delete_food(client: ClientContainer) -> Mutation:
    return _mutation(client, client.api.delete_food, FOODS, "Food deleted successfully.")


def use_create_meal(client: ClientContainer) -> Mutation:
    return _mutation(
        client,
        client.api.create_meal,
        MEALS,
        "Meal created successfully.",
        meal_schema,
    )


def use_update_meal(client: ClientContainer) -> Mutation:
    return _mutation(
        client,
        client.api.update_meal,
        MEALS,
        "Meal updated successfully.",
        meal_schema,
    )


def use_delete_meal(client: ClientContainer) -> Mutation:
    return _mutation(client, client.api.delete_meal, MEALS, "Meal deleted successfully.")


def use_category_form(client: ClientContainer) -> EntityFormDialog:
    return EntityFormDialog(
        store=client.stores.categories,
        entity="category",
        form=FormState(category_default_values),
        schema=category_schema,
        query=use_category(client),
        create=use_create_category(client),
        update=use_update_category(client),
    )


def use_serving_unit_form(client: ClientContainer) -> EntityFormDialog:
    return EntityFormDialog(
        store=client.stores.serving_units,
        entity="serving_unit",
        form=FormState(serving_unit_default_values),
        schema=serving_unit_schema,
        query=use_serving_unit(client),
        create=use_create_serving_unit(client),
        update=use_update_serving_unit(client),
    )


def use_food_form(client: ClientContainer) -> tuple[EntityFormDialog, FieldGroup]:
    """Return the food dialog and its serving-unit rows.

    Submitting is suspended while the inline category or serving-unit
    dialog is open.
    """
    dialog = EntityFormDialog(
        store=client.stores.foods,
        entity="food",
        form=FormState(food_default_values),
        schema=food_schema,
        query=use_food(client),
        create=use_create_food(client),
        update=use_update_food(client),
        blocking=[
            (client.stores.categories, "category_dialog_open"),
            (client.stores.serving_units, "serving_unit_dialog_open"),
        ],
    )
    return dialog, FieldGroup(dialog.form, "foodServingUnits")


def use_meal_form(client: ClientContainer) -> tuple[EntityFormDialog, FieldGroup]:
    """Return the meal dialog, pre-filled with the session user, and its rows."""
    user_id = client.user.id if client.user else ""
    dialog = EntityFormDialog(
        store=client.stores.meals,
        entity="meal",
        form=FormState(lambda: meal_default_values(user_id)),
        schema=meal_schema,
        query=use_meal(client),
        create=use_create_meal(client),
        update=use_update_meal(client),
        blocking=[
            (client.stores.foods, "food_dialog_open"),
            (client.stores.serving_units, "serving_unit_dialog_open"),
        ],
    )
    return dialog, FieldGroup(dialog.form, "mealFoods")
