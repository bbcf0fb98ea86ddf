"""Decimal-safe arithmetic on binary floats.

Operands are scaled to integers sharing a power-of-ten exponent before they
are combined, so results match decimal arithmetic for ordinary decimal
literals: ``add(0.1, 0.2) == 0.3`` and ``multiply(0.1, 0.1) == 0.01``.

Every operation is variadic and folds left over its operands. A single list or
tuple argument is treated as the operand sequence. Operands that are not
functionally numeric (see :mod:`services.coercion`) are dropped before the
fold and never raise.
"""

from __future__ import annotations

import logging
import math
from decimal import Decimal
from typing import Any, List, NamedTuple, Optional, Tuple

from models.records import Number
from services.coercion import coerce, partition_numeric

__all__ = [
    "ExpandedPair",
    "SMALL_MAGNITUDE",
    "add",
    "divide",
    "expand",
    "minus",
    "multiply",
]

logger = logging.getLogger(__name__)

# Below this magnitude values skip alignment and are combined as raw floats.
SMALL_MAGNITUDE = 1e-6


class ExpandedPair(NamedTuple):
    """Two operands scaled to integers by a shared ``exponent``.

    ``left / exponent`` and ``right / exponent`` give back the operands. In the
    small-magnitude fallback ``exponent`` is 1 and the operands are untouched.
    """

    left: Number
    right: Number
    exponent: int


def _is_small(value: Number) -> bool:
    return value != 0 and abs(value) < SMALL_MAGNITUDE


def _fraction_digits(value: Number) -> int:
    if isinstance(value, int) or not math.isfinite(value):
        return 0
    exponent = Decimal(repr(value)).as_tuple().exponent
    return -exponent if exponent < 0 else 0


def _scale(value: Number, exponent: int) -> Number:
    """Scale ``value`` by ``exponent`` and truncate toward zero.

    Non-finite values have no integer form and come back as the plain product.
    """
    if isinstance(value, int):
        return value * exponent
    if not math.isfinite(value):
        return value * exponent
    return int(Decimal(repr(value)) * exponent)


def expand(x: Any, y: Any) -> ExpandedPair:
    """Align ``x`` and ``y`` to integers sharing a power-of-ten exponent.

    >>> expand(1.23, 1.234)
    ExpandedPair(left=1230, right=1234, exponent=1000)
    """
    left = coerce(x)
    right = coerce(y)
    if left is None:
        left = math.nan
    if right is None:
        right = math.nan

    if _is_small(left) or _is_small(right):
        return ExpandedPair(left, right, 1)

    digits = max(_fraction_digits(left), _fraction_digits(right))
    exponent = 10**digits
    return ExpandedPair(_scale(left, exponent), _scale(right, exponent), exponent)


def _true_divide(numerator: Number, denominator: Number) -> float:
    try:
        return numerator / denominator
    except ZeroDivisionError:
        if numerator == 0 or (isinstance(numerator, float) and math.isnan(numerator)):
            return math.nan
        return math.copysign(math.inf, numerator) * math.copysign(1, denominator)
    except OverflowError:
        return math.copysign(math.inf, numerator) * math.copysign(1, denominator)


def _operands(values: Tuple[Any, ...]) -> List[Number]:
    if len(values) == 1 and isinstance(values[0], (list, tuple)):
        values = tuple(values[0])
    kept, dropped = partition_numeric(values)
    if dropped:
        logger.debug(
            "Dropped non-numeric operands",
            extra={"dropped_count": len(dropped)},
        )
    return kept


def add(*values: Any) -> Number:
    """Sum the numeric operands; 0 when there are none."""
    total: Number = 0
    for addend in _operands(values):
        left, right, exponent = expand(total, addend)
        total = _true_divide(left + right, exponent)
    return total


def minus(*values: Any) -> Optional[Number]:
    """Subtract every following operand from the first.

    Returns ``None`` when no operand is numeric.
    """
    numbers = _operands(values)
    if not numbers:
        return None
    difference = numbers[0]
    for subtrahend in numbers[1:]:
        left, right, exponent = expand(difference, subtrahend)
        difference = _true_divide(left - right, exponent)
    return difference


def multiply(*values: Any) -> Number:
    """Multiply the numeric operands; 1 when there are none."""
    product: Number = 1
    for multiplier in _operands(values):
        left, right, exponent = expand(product, multiplier)
        # both operands carry the exponent
        product = _true_divide(left * right, exponent * exponent)
    return product


def divide(*values: Any) -> Optional[Number]:
    """Divide the first operand by every following operand in turn.

    Scaling both sides by the same exponent leaves a quotient unchanged, so
    no descaling is needed. Division by zero follows IEEE 754 instead of
    raising. Returns ``None`` when no operand is numeric.
    """
    numbers = _operands(values)
    if not numbers:
        return None
    quotient = numbers[0]
    for divisor in numbers[1:]:
        left, right, _ = expand(quotient, divisor)
        quotient = _true_divide(left, right)
    return quotient
