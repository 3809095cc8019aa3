"""Money helpers using exact decimal arithmetic.

Amounts are never quantized: a limit comparison sees exactly the value the
caller supplied, and non-finite limits ("no limit") stay usable.
"""

from __future__ import annotations

from decimal import Decimal


def to_decimal(value: Decimal | float | int | str) -> Decimal:
    """Exact decimal for the shortest repr of ``value`` (0.1 -> 0.1, inf -> Infinity)."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def sum_amounts(values) -> Decimal:
    """Sum amounts as decimals so float drift never reaches a comparison."""
    return sum((to_decimal(v) for v in values), Decimal(0))


def format_amount(value: Decimal | float | int | str) -> str:
    """Format an amount the way reason strings display it: $15, $50.01, $1250."""
    dec = to_decimal(value)
    if not dec.is_finite():
        return "-$Infinity" if dec.is_signed() else "$Infinity"
    text = format(dec.normalize(), "f")
    return f"${text}"


def is_over(amount: Decimal | float | int, limit: Decimal | float | int) -> bool:
    """Strict ``amount > limit``; a NaN on either side never counts as over."""
    amount, limit = to_decimal(amount), to_decimal(limit)
    if amount.is_nan() or limit.is_nan():
        return False
    return amount > limit
