from decimal import Decimal

import pytest

from src.engine.rates import annual_to_monthly_rate, monthly_to_annual_rate
from src.models.mortgage import InvalidMortgageConfiguration


class TestAnnualToMonthly:
    def test_ten_percent(self):
        monthly = annual_to_monthly_rate(Decimal("10"))
        assert abs(monthly - Decimal("0.00797414043")) < Decimal("1e-11")

    def test_twelve_compounded_months_give_annual(self):
        monthly = annual_to_monthly_rate(Decimal("12"))
        assert abs((1 + monthly) ** 12 - Decimal("1.12")) < Decimal("1e-20")

    def test_zero_rate(self):
        assert annual_to_monthly_rate(Decimal("0")) == 0

    def test_below_minus_hundred_rejected(self):
        with pytest.raises(InvalidMortgageConfiguration):
            annual_to_monthly_rate(Decimal("-150"))


class TestMonthlyToAnnual:
    def test_one_percent_monthly(self):
        annual = monthly_to_annual_rate(Decimal("0.01"))
        assert annual.quantize(Decimal("0.0001")) == Decimal("12.6825")

    @pytest.mark.parametrize("annual", ["0", "0.5", "7.25", "10", "13.5", "25", "50"])
    def test_round_trip(self, annual):
        rate = Decimal(annual)
        assert abs(monthly_to_annual_rate(annual_to_monthly_rate(rate)) - rate) < Decimal("1e-9")
