"""Transient form values with field-level validation errors."""

import copy
from collections.abc import Callable
from typing import Any

from pydantic import BaseModel, TypeAdapter, ValidationError

from nutrition_admin.domain.errors import format_validation_errors

Validator = TypeAdapter | type[BaseModel]


def _split(path: str) -> list[str | int]:
    return [int(part) if part.isdigit() else part for part in path.split(".")]


class FormState:
    """Raw form input addressed by dotted paths such as ``rows.0.grams``.

    Values may be partial or invalid; ``validate`` turns them into a model
    or records one message per failing path in ``errors``.
    """

    def __init__(self, defaults: dict[str, Any] | Callable[[], dict[str, Any]]) -> None:
        self._defaults = defaults
        self.values: dict[str, Any] = self._default_values()
        self.errors: dict[str, str] = {}

    def _default_values(self) -> dict[str, Any]:
        defaults = self._defaults() if callable(self._defaults) else self._defaults
        return copy.deepcopy(defaults)

    def get(self, path: str) -> Any:
        """Return the value at a dotted path, or None when it is missing."""
        node: Any = self.values
        for part in _split(path):
            try:
                node = node[part]
            except (KeyError, IndexError, TypeError):
                return None
        return node

    def set(self, path: str, value: Any) -> None:
        """Set the value at a dotted path and clear that path's error."""
        parts = _split(path)
        node: Any = self.values
        for part in parts[:-1]:
            node = node[part]
        node[parts[-1]] = value
        self.errors.pop(path, None)

    def reset(self, values: dict[str, Any] | None = None) -> None:
        """Replace all values (defaults when omitted) and clear errors."""
        if values is None:
            self.values = self._default_values()
        else:
            self.values = copy.deepcopy(values)
        self.errors = {}

    def clear_errors(self, prefix: str) -> None:
        for path in [path for path in self.errors if path.startswith(prefix)]:
            del self.errors[path]

    @property
    def is_dirty(self) -> bool:
        return self.values != self._default_values()

    def validate(self, validator: Validator) -> Any | None:
        """Validate the values; return the model, or None with errors recorded."""
        try:
            if isinstance(validator, TypeAdapter):
                result = validator.validate_python(self.values)
            else:
                result = validator.model_validate(self.values)
        except ValidationError as exc:
            self.errors = format_validation_errors(exc)
            return None
        self.errors = {}
        return result
