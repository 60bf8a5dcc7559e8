"""Tests for money arithmetic and statistics helpers."""

from decimal import Decimal

import pytest

from fintrack_core.money import (
    balance_change,
    format_money,
    from_cents,
    percent_change,
    round_money,
    sum_amounts,
    to_cents,
)
from fintrack_core.stats import (
    coefficient_of_variation,
    mean,
    moving_average,
    ols_slope,
    population_variance,
    range_dispersion,
)


class TestMinorUnits:
    """Cent conversion and summation."""

    def test_to_cents_rounds_half_up(self):
        assert to_cents(Decimal("4.505")) == 451
        assert to_cents(Decimal("4.504")) == 450

    def test_to_cents_accepts_floats_without_binary_noise(self):
        assert to_cents(0.1) == 10

    def test_from_cents_is_two_places(self):
        assert from_cents(450) == Decimal("4.50")
        assert str(from_cents(7)) == "0.07"

    def test_many_small_amounts_do_not_drift(self):
        """Ten thousand 0.01 amounts sum to exactly 100.00."""
        assert sum_amounts([Decimal("0.01")] * 10_000) == Decimal("100.00")

    def test_round_money(self):
        assert round_money(Decimal("16.665")) == Decimal("16.67")
        assert round_money(2) == Decimal("2.00")

    def test_format_money(self):
        assert format_money(Decimal("1234.5")) == "$1234.50"


class TestPercentChange:
    """Period-over-period change helpers."""

    @pytest.mark.parametrize("current", [Decimal("0"), Decimal("150"), Decimal("99999.99")])
    def test_zero_previous_is_zero_change(self, current):
        assert percent_change(current, Decimal("0")) == 0.0

    def test_regular_change(self):
        assert percent_change(Decimal("150"), Decimal("100")) == pytest.approx(50.0)
        assert percent_change(Decimal("80"), Decimal("100")) == pytest.approx(-20.0)

    def test_balance_change_uses_absolute_previous(self):
        # From -100 to +50 is an improvement of 150% of the old magnitude
        assert balance_change(Decimal("50"), Decimal("-100")) == pytest.approx(150.0)

    def test_balance_change_zero_previous(self):
        assert balance_change(Decimal("50"), Decimal("0")) == 0.0


class TestStats:
    """Decimal statistics over monthly series."""

    def test_empty_series_are_zero(self):
        assert mean([]) == 0
        assert population_variance([]) == 0
        assert coefficient_of_variation([]) == 0
        assert ols_slope([]) == 0
        assert moving_average([], 3) == 0

    def test_mean_and_variance(self):
        values = [Decimal("2"), Decimal("4"), Decimal("4"), Decimal("4"),
                  Decimal("5"), Decimal("5"), Decimal("7"), Decimal("9")]
        assert mean(values) == Decimal("5")
        assert population_variance(values) == Decimal("4")

    def test_coefficient_of_variation(self):
        values = [Decimal("100"), Decimal("1000")] * 3
        # mean 550, standard deviation 450
        assert float(coefficient_of_variation(values)) == pytest.approx(450 / 550)

    def test_slope_of_flat_series_is_zero(self):
        assert ols_slope([Decimal("1000")] * 6) == 0

    def test_slope_of_linear_series(self):
        values = [Decimal("100"), Decimal("200"), Decimal("300"), Decimal("400")]
        assert ols_slope(values) == Decimal("100")

    def test_single_point_has_no_slope(self):
        assert ols_slope([Decimal("500")]) == 0

    def test_moving_average_uses_last_values(self):
        values = [Decimal("10"), Decimal("20"), Decimal("30"), Decimal("40")]
        assert moving_average(values, 3) == Decimal("30")
        assert moving_average(values[:2], 3) == Decimal("15")

    def test_range_dispersion(self):
        assert range_dispersion(Decimal("500"), Decimal("100")) == Decimal("100")
