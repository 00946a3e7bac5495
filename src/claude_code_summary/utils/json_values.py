"""Lenient coercion of decoded JSON values."""

from typing import Any


def as_int(value: Any) -> int:
    """Return value as an int, or 0 when it is not a number."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    return 0


def as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""
