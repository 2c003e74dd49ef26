"""Domain errors and validation message formatting."""

from pydantic import ValidationError

_UNION_TAGS = {"create", "update"}


class EntityNotFoundError(LookupError):
    """Raised when an entity addressed by id does not exist."""

    def __init__(self, entity: str, entity_id: int) -> None:
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class RepositoryError(RuntimeError):
    """Raised when the data source rejects or fails an operation."""


def format_validation_errors(exc: ValidationError) -> dict[str, str]:
    """Map a validation error to one message per dotted field path."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        loc = list(error.get("loc", ()))
        if loc and loc[0] in _UNION_TAGS:
            loc = loc[1:]
        path = ".".join(str(part) for part in loc) or "__root__"
        errors.setdefault(path, _message_for(error))
    return errors


def _message_for(error: dict) -> str:  # noqa: PLR0911
    error_type = error.get("type", "")
    ctx = error.get("ctx") or {}
    if error_type == "missing":
        return "This field is required"
    if error_type == "string_too_short":
        if ctx.get("min_length") == 1:
            return "This field is required"
        return f"Minimum {ctx.get('min_length')} characters required"
    if error_type == "string_too_long":
        return f"Maximum {ctx.get('max_length')} characters allowed"
    if error_type == "string_pattern_mismatch":
        return "Enter a number between 0 and 9999 with up to two decimals"
    if error_type in {"int_parsing", "float_parsing", "int_type", "float_type"}:
        return "Please enter a number"
    if error_type in {"greater_than_equal", "greater_than"}:
        return f"Number must be greater than or equal to {ctx.get('ge', ctx.get('gt'))}"
    if error_type in {"less_than_equal", "less_than"}:
        return f"Number must be less than or equal to {ctx.get('le', ctx.get('lt'))}"
    if error_type.startswith("datetime") or error_type.startswith("date"):
        return "Please enter a valid date"
    if error_type == "string_type":
        return "Please enter text"
    if error_type == "extra_forbidden":
        return "Unexpected field"
    if error_type in {"literal_error", "union_tag_invalid", "union_tag_not_found"}:
        return "Invalid option"
    return str(error.get("msg") or "Invalid value")
