"""Decimal helpers for prices and cash balances."""

from decimal import ROUND_HALF_EVEN, Decimal
from typing import Union

CENT = Decimal("0.01")

Number = Union[Decimal, int, float, str]


def to_money(value: Number) -> Decimal:
    """Convert a number to a Decimal quantized to cents."""
    if isinstance(value, float):
        # str() avoids binary float expansion (0.1 -> 0.1000000000000000055...)
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_EVEN)


def percent_of(amount: Decimal, pct: Number) -> Decimal:
    """Return pct percent of amount, quantized to cents."""
    return to_money(amount * Decimal(str(pct)) / Decimal(100))
