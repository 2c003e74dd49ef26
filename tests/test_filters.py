"""Tests for the food filter form and its debounced search box."""

import asyncio

from nutrition_admin.client.filters import FoodFiltersController
from nutrition_admin.client.store import InMemoryStorage
from nutrition_admin.client.stores import create_foods_store
from nutrition_admin.domain.filters import default_food_filters

DEBOUNCE = 0.02


def _controller() -> FoodFiltersController:
    return FoodFiltersController(
        create_foods_store(InMemoryStorage()), debounce_seconds=DEBOUNCE
    )


def test_drawer_edits_commit_only_on_submit() -> None:
    controller = _controller()
    controller.set_drawer_open(True)

    controller.set_field("categoryId", "2")
    controller.set_field("caloriesRange.1", "300")

    assert controller.committed == default_food_filters()

    committed = controller.submit()

    assert committed is not None
    assert controller.committed.category_id == "2"
    assert controller.committed.calories_range == ("0", "300")
    assert controller.drawer_open is False


def test_invalid_drawer_values_are_not_committed() -> None:
    controller = _controller()
    controller.set_drawer_open(True)
    controller.set_field("proteinRange.0", "abc")

    assert controller.submit() is None
    assert "proteinRange.0" in controller.form.errors
    assert controller.committed == default_food_filters()
    assert controller.drawer_open is True


def test_search_term_commits_once_after_quiet_period() -> None:
    async def scenario() -> tuple[list[str], str]:
        controller = _controller()
        commits: list[str] = []
        controller.store.subscribe(
            lambda new, old: commits.append(new["food_filters"].search_term)
            if new["food_filters"] != old["food_filters"]
            else None
        )
        for term in ("c", "ch", "chi", "chicken"):
            controller.set_search_term(term)
            await asyncio.sleep(DEBOUNCE / 4)
        assert controller.committed.search_term == ""
        await asyncio.sleep(DEBOUNCE * 3)
        return commits, controller.committed.search_term

    commits, committed = asyncio.run(scenario())

    assert commits == ["chicken"]
    assert committed == "chicken"


def test_search_term_equal_to_committed_is_not_recommitted() -> None:
    async def scenario() -> int:
        controller = _controller()
        changes: list[object] = []
        controller.store.subscribe(lambda new, old: changes.append(new))
        controller.set_search_term("")
        await asyncio.sleep(DEBOUNCE * 3)
        return len(changes)

    assert asyncio.run(scenario()) == 0


def test_filters_modified_tracks_committed_filters() -> None:
    async def scenario() -> list[bool]:
        controller = _controller()
        seen = [controller.filters_modified]
        controller.set_search_term("egg")
        seen.append(controller.filters_modified)
        await asyncio.sleep(DEBOUNCE * 3)
        seen.append(controller.filters_modified)
        return seen

    assert asyncio.run(scenario()) == [False, False, True]


def test_reset_restores_defaults_without_committing() -> None:
    async def scenario() -> tuple[str, str, dict[str, object]]:
        controller = _controller()
        controller.set_drawer_open(True)
        controller.set_field("categoryId", "5")
        controller.set_search_term("beans")
        controller.reset()
        await asyncio.sleep(DEBOUNCE * 3)
        return (
            controller.committed.search_term,
            controller.committed.category_id,
            controller.form.values,
        )

    search_term, category_id, values = asyncio.run(scenario())

    assert search_term == ""
    assert category_id == ""
    assert values == default_food_filters().to_form()


def test_closing_drawer_discards_uncommitted_edits() -> None:
    controller = _controller()
    controller.set_drawer_open(True)
    controller.set_field("categoryId", "7")

    controller.set_drawer_open(False)

    assert controller.form.get("categoryId") == ""


def test_page_change_resyncs_form_while_drawer_is_closed() -> None:
    controller = _controller()

    controller.update_page("next")

    assert controller.committed.page == 2
    assert controller.form.get("page") == 2


def test_close_stops_pending_commit() -> None:
    async def scenario() -> str:
        controller = _controller()
        controller.set_search_term("tofu")
        controller.close()
        await asyncio.sleep(DEBOUNCE * 3)
        return controller.committed.search_term

    assert asyncio.run(scenario()) == ""
