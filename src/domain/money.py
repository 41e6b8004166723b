"""Fixed-point money helpers

All monetary quantities are ``Decimal`` values quantized to cents. Binary
floating point never enters a sum or a comparison.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Union

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

MoneyLike = Union[Decimal, int, str, float]


def to_money(value: Optional[MoneyLike]) -> Decimal:
    """Convert a value to a cent-quantized Decimal (``None`` is zero)"""
    if value is None:
        return ZERO
    if isinstance(value, float):
        # go through repr so 0.1 stays 0.1 instead of its binary expansion
        value = repr(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_sum(values: Iterable[Optional[MoneyLike]]) -> Decimal:
    total = ZERO
    for value in values:
        total += to_money(value)
    return total


def is_whole_cents(value: Decimal) -> bool:
    """True when the amount has no digits below the cent"""
    return value == value.quantize(CENT)


def clamp_non_negative(value: Decimal) -> Decimal:
    return value if value > ZERO else ZERO
