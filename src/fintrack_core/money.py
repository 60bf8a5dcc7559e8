"""Minor-unit money arithmetic and period-over-period change helpers.

Amounts are summed as integer cents so that thousands of small
transactions never drift, then converted back to two-place Decimals at the
output boundary.
"""

from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Union

Number = Union[Decimal, int, float]

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_cents(amount: Number) -> int:
    """Convert a display amount to integer cents (half-up)."""
    if not isinstance(amount, Decimal):
        amount = Decimal(str(amount))
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a two-place Decimal."""
    return (Decimal(cents) / 100).quantize(CENT)


def sum_amounts(amounts: Iterable[Number]) -> Decimal:
    """Sum display amounts at cent precision."""
    return from_cents(sum(to_cents(a) for a in amounts))


def round_money(value: Number) -> Decimal:
    """Round a computed value to two decimal places (half-up)."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def percent_change(current: Number, previous: Number) -> float:
    """Percent change from ``previous`` to ``current``.

    Returns 0 when ``previous`` is not positive. A move from no activity
    to some activity is therefore reported as a flat 0%, not infinity.
    """
    current = Decimal(str(current))
    previous = Decimal(str(previous))
    if previous <= 0:
        return 0.0
    return float((current - previous) / previous * 100)


def balance_change(current: Number, previous: Number) -> float:
    """Percent change of a signed balance, relative to ``abs(previous)``.

    Returns 0 when the previous balance is exactly zero.
    """
    current = Decimal(str(current))
    previous = Decimal(str(previous))
    if previous == 0:
        return 0.0
    return float((current - previous) / abs(previous) * 100)


def format_money(amount: Number) -> str:
    """Render an amount the way response templates expect, e.g. ``$1234.50``."""
    return f"${round_money(amount):.2f}"
