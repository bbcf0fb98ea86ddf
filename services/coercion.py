"""Coercion of "functionally numeric" input into plain numbers.

Accepted inputs are ints, floats, ``Decimal`` instances, booleans (as 1/0),
numeric strings (``,`` grouping characters and surrounding whitespace are
ignored) and one-element lists or tuples wrapping any of those. Everything
else coerces to ``None`` and is dropped by the arithmetic helpers instead of
raising.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from typing import Any, Iterable, List, Optional, Tuple

from models.records import Number

__all__ = [
    "coerce",
    "is_numeric",
    "partition_numeric",
]

_INVALID_TOKENS = frozenset({"", "NaN", "null", "undefined"})
_DECIMAL_LITERAL = re.compile(
    r"^[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|Infinity)$"
)


def _coerce_string(value: str) -> Optional[float]:
    candidate = value.replace(",", "").strip()
    if candidate in _INVALID_TOKENS or not _DECIMAL_LITERAL.match(candidate):
        return None
    return float(candidate.replace("Infinity", "inf"))


def coerce(value: Any) -> Optional[Number]:
    """Return the numeric form of ``value`` or ``None`` when it has none."""
    if value is None:
        return None
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return None if math.isnan(value) else value
    if isinstance(value, Decimal):
        return None if value.is_nan() else float(value)
    if isinstance(value, str):
        return _coerce_string(value)
    if isinstance(value, (list, tuple)) and len(value) == 1:
        return coerce(value[0])
    return None


def is_numeric(value: Any) -> bool:
    return coerce(value) is not None


def partition_numeric(values: Iterable[Any]) -> Tuple[List[Number], List[Any]]:
    """Split ``values`` into coerced numbers and the raw entries that were dropped."""
    kept: List[Number] = []
    dropped: List[Any] = []
    for value in values:
        number = coerce(value)
        if number is None:
            dropped.append(value)
        else:
            kept.append(number)
    return kept, dropped
