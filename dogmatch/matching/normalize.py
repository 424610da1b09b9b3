"""Canonicalize quiz answers and dog fields before scoring.

Shelter data and stored quiz answers arrive in many shapes: lists, comma
separated strings, booleans stored as text, NaN from spreadsheet exports.
Every helper here is total over its input and never raises.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from typing import Any

_TRUE_TOKENS = frozenset({"true", "yes", "y", "1", "t"})
_FALSE_TOKENS = frozenset({"false", "no", "n", "0", "f"})


def is_missing(value: Any) -> bool:
    """Return True for None, NaN, and blank strings."""
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def normalize_token(value: Any) -> str:
    """Normalize a scalar answer or attribute to a trimmed lower-case string.

    Args:
        value: Any raw value.

    Returns:
        Canonical token, or ``""`` when the value is missing.
    """
    if is_missing(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip().lower()


def normalize_tokens(value: Any) -> list[str]:
    """Normalize a multi-select value into a list of tokens.

    Lists, tuples and sets are normalized element-wise; strings are split
    on commas; any other single value is wrapped. Empty elements are
    dropped and order of first appearance is kept.

    Args:
        value: Any raw value.

    Returns:
        List of canonical tokens, possibly empty.
    """
    if is_missing(value):
        return []

    if isinstance(value, str):
        parts: Iterable[Any] = value.split(",")
    elif isinstance(value, (list, tuple, set, frozenset)):
        parts = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
    else:
        parts = [value]

    tokens: list[str] = []
    for part in parts:
        token = normalize_token(part)
        if token and token not in tokens:
            tokens.append(token)
    return tokens


def normalize_flag(value: Any) -> bool | None:
    """Parse a yes/no attribute into ``True``, ``False`` or ``None`` (unknown)."""
    if isinstance(value, bool):
        return value
    token = normalize_token(value)
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    return None


def normalize_number(value: Any) -> float | None:
    """Parse a numeric attribute, returning None when it is not a finite number."""
    if isinstance(value, bool) or is_missing(value):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if not math.isfinite(number):
        return None
    return number


def is_open(tokens: str | Iterable[str], markers: Iterable[str]) -> bool:
    """Return True when any preference token is an open marker.

    Args:
        tokens: A normalized scalar token or list of tokens.
        markers: The criterion's open-marker set.
    """
    if isinstance(tokens, str):
        tokens = [tokens] if tokens else []
    marker_set = set(markers)
    return any(token in marker_set for token in tokens)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero for non-negative values.

    Python's ``round`` uses banker's rounding, which would make a 12.5
    point overlap score 12 rather than 13.
    """
    if not math.isfinite(value):
        return 0.0
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def round_points(value: float) -> int:
    """Round a point value to the nearest integer, halves up."""
    return int(round_half_up(value))
