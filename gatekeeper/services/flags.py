"""Normalization of boolean-like request values."""

from typing import Any

_TRUTHY = frozenset({"true", "1", "yes"})


def normalize_flag(value: Any) -> bool:
    """
    Map a boolean-like value to a strict flag.

    True, 1 and the strings "true", "1", "yes" (any case, surrounding
    whitespace ignored) are enabled; everything else, including None, is
    disabled.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value == 1
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return False
