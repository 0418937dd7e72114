"""Coercion of answer values to the string and number forms used for comparison."""

from __future__ import annotations

import math
from typing import Any


def to_text(value: Any) -> str:
    """Stringify a scalar the way the browser runtime does.

    Booleans become ``true``/``false`` and integral floats lose their
    trailing ``.0`` so that ``42``, ``42.0`` and ``"42"`` compare equal.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def to_number(value: Any) -> float | None:
    """Coerce a scalar to a float, or ``None`` when it is not numeric."""
    if value is None or isinstance(value, (bool, list, tuple, set, dict)):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number):
        return None
    return number


def as_list(value: Any) -> list[Any]:
    """Normalize an answer value to a list of selections."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set)):
        return list(value)
    if isinstance(value, str) and value == "":
        return []
    return [value]


def is_empty_answer(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    if isinstance(value, (list, tuple, set)):
        return len(value) == 0
    return False


def join_values(value: Any, separator: str = ", ") -> str:
    if isinstance(value, (list, tuple)):
        return separator.join(to_text(v) for v in value)
    return to_text(value)
