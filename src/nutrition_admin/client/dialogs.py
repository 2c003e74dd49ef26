"""Create/edit dialog controller shared by every entity form."""

from collections.abc import Iterable
from typing import Any

from pydantic import TypeAdapter

from nutrition_admin.client.confirmation import AlertConfig, ConfirmationChannel
from nutrition_admin.client.forms import FormState
from nutrition_admin.client.queries import Mutation, Query
from nutrition_admin.client.store import Store


class EntityFormDialog:
    """Couples an entity store, its by-id query, a form and its mutations.

    ``blocking`` lists ``(store, flag)`` pairs of nested creation dialogs;
    while any flag is set the parent submit is suspended.
    """

    def __init__(  # noqa: PLR0913
        self,
        *,
        store: Store,
        entity: str,
        form: FormState,
        schema: TypeAdapter,
        query: Query,
        create: Mutation,
        update: Mutation,
        blocking: Iterable[tuple[Store, str]] = (),
    ) -> None:
        self.store = store
        self.entity = entity
        self.form = form
        self.schema = schema
        self.query = query
        self.create = create
        self.update = update
        self.blocking = list(blocking)

    @property
    def selected_id(self) -> int | None:
        return self.store.get_state()[f"selected_{self.entity}_id"]

    @property
    def is_open(self) -> bool:
        return bool(self.store.get_state()[f"{self.entity}_dialog_open"])

    @property
    def is_pending(self) -> bool:
        return self.create.is_pending or self.update.is_pending

    @property
    def submit_disabled(self) -> bool:
        """True while a nested creation dialog is open or a save is running."""
        nested_open = any(store.get_state()[flag] for store, flag in self.blocking)
        return nested_open or self.is_pending

    def open(self, entity_id: int | None = None) -> None:
        """Open the dialog to create (no id) or edit an entity."""
        state = self.store.get_state()
        state[f"update_selected_{self.entity}_id"](entity_id)
        state[f"update_{self.entity}_dialog_open"](True)

    def set_open(self, is_open: bool) -> None:
        """Open or close the dialog; closing clears selection and the form."""
        self.store.get_state()[f"update_{self.entity}_dialog_open"](is_open)
        if not is_open:
            self.form.reset()

    async def load(self) -> None:
        """Fill the form from the selected entity once its query settles."""
        data = await self.query.wait()
        if self.selected_id is not None and data:
            self.form.reset(data)

    async def submit(self) -> Any | None:
        """Validate and save the form; close the dialog on success."""
        if self.submit_disabled:
            return None
        validated = self.form.validate(self.schema)
        if validated is None:
            return None
        mutation = self.create if validated.action == "create" else self.update
        return await mutation.mutate_async(
            self.form.values, on_success=lambda _: self.set_open(False)
        )


def confirm_delete(
    channel: ConfirmationChannel,
    mutation: Mutation,
    entity_id: int,
    *,
    title: str | None = None,
    description: str | None = None,
) -> None:
    """Ask for confirmation, then run the delete mutation on confirm."""
    channel.request(
        AlertConfig(
            title=title,
            description=description,
            on_confirm=lambda: mutation.mutate(entity_id),
        )
    )
