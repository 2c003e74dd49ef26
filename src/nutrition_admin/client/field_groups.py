"""Repeatable groups of fields inside one parent form.

Rows are addressed by a stable key assigned at append time. The dotted
path a row's fields bind to is derived from its current position on every
lookup, so removing a row never leaves a key pointing at another row's
path.
"""

import copy
import itertools
from dataclasses import dataclass
from typing import Any

from nutrition_admin.client.forms import FormState


@dataclass(frozen=True)
class FieldEntry:
    """One row of a field group as seen by a renderer."""

    key: str
    index: int
    values: dict[str, Any]


class FieldGroup:
    """Controller for the list stored under ``name`` in a form."""

    def __init__(self, form: FormState, name: str) -> None:
        self.form = form
        self.name = name
        self._counter = itertools.count(1)
        self._rows: list[Any] | None = None
        self._keys: list[str] = []
        self._sync()

    def _new_key(self) -> str:
        return f"{self.name}-{next(self._counter)}"

    def _sync(self) -> list[Any]:
        rows = self.form.values.setdefault(self.name, [])
        if rows is not self._rows or len(rows) != len(self._keys):
            # the form was reset; rows are new objects
            self._rows = rows
            self._keys = [self._new_key() for _ in rows]
        return rows

    def append(self, default: dict[str, Any]) -> str:
        """Add a row with the given defaults and return its key."""
        rows = self._sync()
        rows.append(copy.deepcopy(default))
        key = self._new_key()
        self._keys.append(key)
        return key

    def remove(self, index: int) -> None:
        """Delete the row at ``index``; later rows shift up by one."""
        rows = self._sync()
        if not 0 <= index < len(rows):
            msg = f"{self.name} has no row {index}"
            raise IndexError(msg)
        del rows[index]
        del self._keys[index]
        self.form.clear_errors(f"{self.name}.")

    def list(self) -> list[FieldEntry]:
        rows = self._sync()
        return [
            FieldEntry(key=key, index=index, values=row)
            for index, (key, row) in enumerate(zip(self._keys, rows, strict=True))
        ]

    @property
    def is_empty(self) -> bool:
        """True when the group has no rows and should render its empty state."""
        return not self._sync()

    def index_of(self, key: str) -> int:
        self._sync()
        try:
            return self._keys.index(key)
        except ValueError:
            msg = f"{self.name} has no row {key!r}"
            raise KeyError(msg) from None

    def path(self, key: str, field: str) -> str:
        """Return the form path the row's field currently binds to."""
        return f"{self.name}.{self.index_of(key)}.{field}"

    def get(self, key: str, field: str) -> Any:
        return self.form.get(self.path(key, field))

    def set(self, key: str, field: str, value: Any) -> None:
        self.form.set(self.path(key, field), value)

    def error(self, key: str, field: str) -> str | None:
        return self.form.errors.get(self.path(key, field))
