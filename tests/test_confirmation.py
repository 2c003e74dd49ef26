"""Tests for the global confirmation dialog."""

import asyncio

import pytest

from nutrition_admin.client.confirmation import (
    DEFAULT_CANCEL_LABEL,
    DEFAULT_CONFIRM_LABEL,
    DEFAULT_DESCRIPTION,
    DEFAULT_TITLE,
    AlertConfig,
    AlertDialogRenderer,
    ConfirmationChannel,
)
from nutrition_admin.client.dialogs import confirm_delete
from nutrition_admin.client.notifications import Notifier
from nutrition_admin.client.queries import Mutation, QueryClient
from nutrition_admin.client.store import InMemoryStorage
from nutrition_admin.client.stores import create_global_store


def _channel() -> tuple[ConfirmationChannel, AlertDialogRenderer]:
    store = create_global_store(InMemoryStorage())
    return ConfirmationChannel(store), AlertDialogRenderer(store)


def test_nothing_rendered_without_request() -> None:
    _, renderer = _channel()

    assert renderer.render() is None


def test_render_fills_in_default_texts() -> None:
    channel, renderer = _channel()

    channel.request(AlertConfig())
    rendered = renderer.render()

    assert rendered is not None
    assert rendered.open is True
    assert rendered.title == DEFAULT_TITLE
    assert rendered.description == DEFAULT_DESCRIPTION
    assert rendered.confirm_label == DEFAULT_CONFIRM_LABEL
    assert rendered.cancel_label == DEFAULT_CANCEL_LABEL


def test_confirm_runs_callback_once_and_closes() -> None:
    channel, renderer = _channel()
    confirmed: list[int] = []
    cancelled: list[int] = []
    channel.request(
        AlertConfig(
            title="Delete food?",
            on_confirm=lambda: confirmed.append(1),
            on_cancel=lambda: cancelled.append(1),
        )
    )

    renderer.confirm()
    renderer.confirm()

    assert confirmed == [1]
    assert cancelled == []
    assert renderer.render() is None


def test_dismiss_counts_as_cancel() -> None:
    channel, renderer = _channel()
    cancelled: list[int] = []
    channel.request(AlertConfig(on_cancel=lambda: cancelled.append(1)))

    renderer.dismiss()

    assert cancelled == [1]
    assert renderer.config is None


def test_latest_request_replaces_pending_one() -> None:
    channel, renderer = _channel()
    calls: list[str] = []
    channel.request(AlertConfig(title="first", on_confirm=lambda: calls.append("a")))
    channel.request(AlertConfig(title="second", on_confirm=lambda: calls.append("b")))

    assert renderer.render().title == "second"
    renderer.confirm()

    assert calls == ["b"]


def test_dialog_closes_even_when_callback_fails() -> None:
    channel, renderer = _channel()

    def explode() -> None:
        raise RuntimeError("boom")

    channel.request(AlertConfig(on_confirm=explode))

    with pytest.raises(RuntimeError):
        renderer.confirm()
    assert renderer.render() is None


def test_confirm_delete_runs_mutation_only_after_confirmation() -> None:
    async def scenario() -> tuple[list[int], list[int]]:
        channel, renderer = _channel()
        deleted: list[int] = []

        async def delete(entity_id: int) -> None:
            deleted.append(entity_id)

        mutation = Mutation(
            QueryClient(), delete, family="foods", notifier=Notifier()
        )
        confirm_delete(channel, mutation, 7, title="Delete food?")
        before = list(deleted)
        renderer.confirm()
        await asyncio.sleep(0)
        await asyncio.sleep(0)
        return before, deleted

    before, after = asyncio.run(scenario())

    assert before == []
    assert after == [7]
