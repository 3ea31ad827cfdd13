"""
Integer-cent helpers shared by the fee policies and checkout builder.

All money in this app is an int count of minor units (cents). Percentages
are applied with Decimal arithmetic and rounded half-up to whole cents.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def require_cents(name: str, value: object) -> int:
    """
    Return value if it is a non-negative int, else raise ValueError.

    bool is rejected even though it subclasses int, and so are floats
    with integral values.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer number of cents")
    if value < 0:
        raise ValueError(f"{name} must not be negative")
    return value


def percent_of(amount_cents: int, rate: Decimal) -> int:
    """Apply rate to amount_cents, rounding half-up to whole cents."""
    return int(
        (Decimal(amount_cents) * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    )
