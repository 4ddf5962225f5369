"""
Argument validation helpers for the command layer.

These run before any connection is acquired, so invalid calls never reach
the store.
"""

from collections.abc import Iterable

from ..exceptions import ArgumentError


def is_blank(value: str | None) -> bool:
    """True for None, empty, or whitespace-only strings."""
    return value is None or str(value).strip() == ""


def require_key(value: str, name: str = "key") -> str:
    """
    Validate a single key-like argument.

    Args:
        value: The argument value
        name: Argument name used in the error message

    Returns:
        The value unchanged

    Raises:
        ArgumentError: If the value is blank
    """
    if is_blank(value):
        raise ArgumentError(f"empty {name}")
    return value


def require_keys(values: Iterable[str], name: str = "keys") -> list[str]:
    """
    Validate a non-empty collection of key-like arguments.

    Raises:
        ArgumentError: If there are no values or any value is blank
    """
    values = list(values)
    if not values:
        raise ArgumentError(f"no {name}")
    if any(is_blank(v) for v in values):
        raise ArgumentError(f"empty {name}")
    return values
