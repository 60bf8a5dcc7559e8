"""Small statistical helpers over Decimal series.

All helpers are total: an empty series yields zero rather than raising,
so callers never have to special-case missing history.
"""

from decimal import Decimal
from typing import Sequence

ZERO = Decimal("0")


def mean(values: Sequence[Decimal]) -> Decimal:
    """Arithmetic mean; 0 for an empty series."""
    if not values:
        return ZERO
    return sum(values, ZERO) / len(values)


def population_variance(values: Sequence[Decimal]) -> Decimal:
    """Population variance (divides by N); 0 for an empty series."""
    if not values:
        return ZERO
    m = mean(values)
    return sum(((v - m) ** 2 for v in values), ZERO) / len(values)


def coefficient_of_variation(values: Sequence[Decimal]) -> Decimal:
    """Standard deviation divided by the mean; 0 when the mean is 0."""
    m = mean(values)
    if m == 0:
        return ZERO
    return population_variance(values).sqrt() / m


def ols_slope(values: Sequence[Decimal]) -> Decimal:
    """Least-squares slope of ``values`` against x = 1..N.

    Uses the closed form ``(N*Sxy - Sx*Sy) / (N*Sxx - Sx^2)``. Fewer than
    two points have no defined slope and return 0.
    """
    n = len(values)
    if n < 2:
        return ZERO
    sum_x = Decimal(n * (n + 1) // 2)
    sum_x2 = Decimal(n * (n + 1) * (2 * n + 1) // 6)
    sum_y = sum(values, ZERO)
    sum_xy = sum((v * (i + 1) for i, v in enumerate(values)), ZERO)
    denominator = n * sum_x2 - sum_x * sum_x
    return (n * sum_xy - sum_x * sum_y) / denominator


def moving_average(values: Sequence[Decimal], window: int) -> Decimal:
    """Mean of the last ``window`` values (or all of them if fewer)."""
    if window <= 0:
        return ZERO
    return mean(list(values)[-window:])


def range_dispersion(maximum: Decimal, minimum: Decimal) -> Decimal:
    """Range/4 as a rough standard deviation proxy."""
    return (maximum - minimum) / 4
