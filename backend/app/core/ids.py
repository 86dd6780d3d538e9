"""Parsing of caller-supplied identifiers."""

from __future__ import annotations

from app.core.errors import InvalidRequestError


def parse_id(value: object, field: str = "id") -> int:
    """Convert an identifier received as text into a positive integer key."""

    if isinstance(value, bool):
        raise InvalidRequestError(f"Invalid {field}")
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        raise InvalidRequestError(f"Invalid {field}") from None
    if parsed <= 0:
        raise InvalidRequestError(f"Invalid {field}")
    return parsed


def parse_optional_id(value: object | None, field: str = "id") -> int | None:
    if value is None or value == "":
        return None
    return parse_id(value, field)
