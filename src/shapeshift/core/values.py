"""
Primitive value utilities: deep clone, deep equality and date arithmetic.

These are the engine's clone/equals collaborators. ``equals`` is kind-sensitive so that
``eq``/``in`` constraints and default minimization never confuse ``True`` with ``1`` or a
string with a number.

Notes:
    - ``clone`` shares functions and compiled patterns (``copy.deepcopy`` treats both as atomic).
    - ``equals`` compares lists and tuples element-wise, mappings by key set and values, dates
      by epoch millis, patterns by (pattern, flags), and considers NaN equal to NaN.
    - Naive datetimes are interpreted as UTC by ``epoch_millis``.

Examples:
    >>> from shapeshift.core.values import equals
    >>> equals({"a": [1, 2]}, {"a": (1, 2)})
    True
    >>> equals(True, 1)
    False
"""

from __future__ import annotations

import copy
import math
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Final

from .kinds import Kind, kind_of

__all__ = [
    "UNSET",
    "clone",
    "equals",
    "epoch_millis",
]


class _Unset:
    """Marker for "no argument given", distinct from an absent (None) value."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET: Final = _Unset()


def clone(value: Any) -> Any:
    """Return a deep, independent copy of value."""
    return copy.deepcopy(value)


def epoch_millis(dt: datetime) -> int:
    """
    Milliseconds since the Unix epoch.

    Args:
        dt (datetime): Aware or naive datetime (naive is read as UTC).

    Returns:
        int: Epoch milliseconds, truncated toward negative infinity.
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    delta = dt - datetime(1970, 1, 1, tzinfo=UTC)
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def equals(a: Any, b: Any) -> bool:
    """
    Deep structural equality.

    Args:
        a (Any): Left value.
        b (Any): Right value.

    Returns:
        bool: True if both values have the same kind and the same structure.
    """
    ka = kind_of(a)
    if ka != kind_of(b):
        return False
    if ka == Kind.NUMBER.value:
        if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
            return True
        return a == b
    if ka == Kind.ARRAY.value:
        return len(a) == len(b) and all(equals(x, y) for x, y in zip(a, b))
    if ka == Kind.OBJECT.value:
        return _mapping_equals(a, b)
    if ka == Kind.DATE.value:
        return epoch_millis(a) == epoch_millis(b)
    if ka == Kind.REGEX.value:
        return a.pattern == b.pattern and a.flags == b.flags
    return a == b


def _mapping_equals(a: Mapping[Any, Any], b: Mapping[Any, Any]) -> bool:
    if set(a) != set(b):
        return False
    return all(equals(a[k], b[k]) for k in a)
