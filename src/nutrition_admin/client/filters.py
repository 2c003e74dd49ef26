"""Coordination between the food filter form and the committed filters.

Raw input lives in a ``FormState``; the foods store only ever holds a
validated ``FoodFilters``. The quick-search box commits its term alone
after a quiet period, while the filter drawer commits every field at
once on submit.
"""

import logging
from collections.abc import Mapping

from nutrition_admin.client.debounce import Debouncer
from nutrition_admin.client.forms import FormState
from nutrition_admin.client.store import Store
from nutrition_admin.client.stores import PageAction
from nutrition_admin.domain.filters import (
    FOOD_FILTERS_DEFAULT_VALUES,
    FoodFilters,
    default_food_filters,
)

logger = logging.getLogger(__name__)

SEARCH_DEBOUNCE_SECONDS = 0.4


class FoodFiltersController:
    """Drives the quick search box and the filter drawer of the food list."""

    def __init__(
        self, store: Store, *, debounce_seconds: float = SEARCH_DEBOUNCE_SECONDS
    ) -> None:
        self.store = store
        self.form = FormState(FOOD_FILTERS_DEFAULT_VALUES)
        self.form.reset(self.committed.to_form())
        self._debouncer: Debouncer[str] = Debouncer(
            debounce_seconds, self._commit_search_term
        )
        self._unsubscribe = store.subscribe(self._on_store_change)

    @property
    def committed(self) -> FoodFilters:
        return self.store.get_state()["food_filters"]

    @property
    def drawer_open(self) -> bool:
        return bool(self.store.get_state()["food_filters_drawer_open"])

    @property
    def filters_modified(self) -> bool:
        """True when the committed filters differ from the defaults."""
        return self.committed != default_food_filters()

    def set_search_term(self, search_term: str) -> None:
        """Record a keystroke; the term is committed once typing pauses."""
        self.form.set("searchTerm", search_term)
        self._debouncer.push(search_term)

    def set_field(self, path: str, value: object) -> None:
        """Edit a drawer field without committing it."""
        self.form.set(path, value)

    def set_drawer_open(self, is_open: bool) -> None:
        self.store.get_state()["update_food_filters_drawer_open"](is_open)

    def submit(self) -> FoodFilters | None:
        """Commit every drawer field at once and close the drawer."""
        validated = self.form.validate(FoodFilters)
        if validated is None:
            return None
        state = self.store.get_state()
        state["update_food_filters"](validated)
        state["update_food_filters_drawer_open"](False)
        return validated

    def reset(self) -> None:
        """Restore the form to the default filters without committing."""
        self._debouncer.cancel()
        self.form.reset()

    def update_page(self, action: PageAction) -> None:
        self.store.get_state()["update_food_filters_page"](action)

    def close(self) -> None:
        self._debouncer.cancel()
        self._unsubscribe()

    def _commit_search_term(self, search_term: str) -> None:
        if search_term == self.committed.search_term:
            return
        logger.debug("Committing search term %r", search_term)
        self.store.get_state()["update_food_filters_search_term"](search_term)

    def _on_store_change(
        self, new: Mapping[str, object], old: Mapping[str, object]
    ) -> None:
        if new["food_filters_drawer_open"]:
            return
        changed = (
            old["food_filters_drawer_open"]
            or new["food_filters"] != old["food_filters"]
        )
        if not changed:
            return
        values = new["food_filters"].to_form()
        if self._debouncer.pending:
            values["searchTerm"] = self.form.get("searchTerm")
        self.form.reset(values)
