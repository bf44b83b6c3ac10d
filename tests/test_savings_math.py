"""Tester for spareprognose"""
from config.settings import MAX_SAFE_OERE
from core.savings_math import calc_savings_projection, savings_projection_series


class TestSavingsProjection:
    """Sparing med rentes rente"""

    def test_zero_return_is_linear(self):
        """Uten avkastning er verdien bare summen av innskuddene"""
        assert calc_savings_projection(100_000, 1_000, 0, 5) == 160_000

    def test_monthly_compounding(self):
        # 1 000 kr, 12 % i ett år: 1000 * 1.01^12
        assert calc_savings_projection(100_000, 0, 12, 1) == 112_683

    def test_contributions_grow(self):
        plain = calc_savings_projection(0, 100_000, 0, 10)
        grown = calc_savings_projection(0, 100_000, 7, 10)
        assert grown > plain

    def test_nothing_in_nothing_out(self):
        assert calc_savings_projection(0, 0, 7, 30) == 0

    def test_zero_years(self):
        assert calc_savings_projection(50_000, 1_000, 7, 0) == 50_000

    def test_saturates(self):
        assert calc_savings_projection(100_000, 1_000, 1_000_000, 100) == MAX_SAFE_OERE


class TestSavingsSeries:
    """Månedlig spareserie"""

    def test_shape(self):
        series = savings_projection_series(100_000, 1_000, 7, 5)
        assert list(series.columns) == ["month", "balance_oere", "contributed_oere"]
        assert len(series) == 61
        assert series["balance_oere"].iloc[0] == 100_000

    def test_matches_projection(self):
        series = savings_projection_series(100_000, 5_000, 7, 10)
        expected = calc_savings_projection(100_000, 5_000, 7, 10)
        assert abs(int(series["balance_oere"].iloc[-1]) - expected) <= 1

    def test_zero_return(self):
        series = savings_projection_series(0, 1_000, 0, 2)
        assert (series["balance_oere"] == series["contributed_oere"]).all()
        assert series["contributed_oere"].iloc[-1] == 24_000

    def test_monotonic(self):
        series = savings_projection_series(0, 1_000, 5, 3)
        assert series["balance_oere"].is_monotonic_increasing
