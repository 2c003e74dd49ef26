"""Conversions between form-friendly strings and stored numbers."""


def to_number_safe(value: object) -> int | float:
    """Convert a form value to a number, falling back to zero."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int | float):
        return value
    if isinstance(value, str):
        cleaned = value.strip()
        if not cleaned:
            return 0
        try:
            return int(cleaned)
        except ValueError:
            pass
        try:
            return float(cleaned)
        except ValueError:
            return 0
    return 0


def to_string_safe(value: object) -> str:
    """Convert a stored value to a form string; None becomes empty."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def to_optional_id(value: object) -> int | None:
    """Convert a select value to an id, treating empty and zero as unset."""
    number = int(to_number_safe(value))
    return number or None
