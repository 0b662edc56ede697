from datetime import date
from decimal import Decimal

from src.engine.early_payoff import simulate_early_payoff
from src.models.mortgage import AmortizationSystem


class TestEarlyPayoff:
    def test_payoff_costs_the_balance(self):
        result = simulate_early_payoff(
            Decimal("120000"), 120, Decimal("8"), Decimal("0"),
            reference_date=date(2025, 6, 10),
        )
        assert result.payoff_amount == Decimal("120000.00")
        assert result.current_balance == Decimal("120000.00")
        assert result.remaining_installments == 120

    def test_savings_are_remaining_payments_minus_payoff(self):
        result = simulate_early_payoff(
            Decimal("120000"), 120, Decimal("8"), Decimal("0"),
            reference_date=date(2025, 6, 10),
        )
        assert result.total_interest_remaining > 0
        assert result.total_savings == result.total_remaining_payments - result.payoff_amount
        # Without insurance or fees everything saved is interest
        assert result.total_savings == result.total_interest_remaining

    def test_insurance_and_fees_count_as_savings(self):
        result = simulate_early_payoff(
            Decimal("120000"), 120, Decimal("8"), Decimal("200000"),
            mip_rate=Decimal("0.03"), dfi_rate=Decimal("0.12"), admin_fee=Decimal("25"),
            reference_date=date(2025, 6, 10),
        )
        assert result.total_savings > result.total_interest_remaining + Decimal("3000")

    def test_zero_rate_saves_nothing(self):
        result = simulate_early_payoff(Decimal("120000"), 120, Decimal("0"), Decimal("0"))
        assert result.total_remaining_payments == Decimal("120000.00")
        assert result.total_savings == Decimal("0.00")

    def test_price_contract(self):
        sac = simulate_early_payoff(Decimal("120000"), 120, Decimal("8"), Decimal("0"))
        price = simulate_early_payoff(
            Decimal("120000"), 120, Decimal("8"), Decimal("0"),
            amortization_system=AmortizationSystem.PRICE,
        )
        # Slower amortization under PRICE leaves more interest to avoid
        assert price.total_interest_remaining > sac.total_interest_remaining

    def test_zero_remaining_term(self):
        result = simulate_early_payoff(Decimal("1000"), 0, Decimal("8"), Decimal("0"))
        assert result.total_remaining_payments == Decimal("0.00")
        assert result.payoff_amount == Decimal("1000.00")
