"""Early payoff economics.

Paying off costs exactly the outstanding principal (no prepayment penalty);
the saving is everything the remaining schedule would have charged on top.
"""

from datetime import date
from decimal import Decimal

from src.engine.schedule import project_remaining, to_cents
from src.models.mortgage import AmortizationSystem, EarlyPayoffResult


def simulate_early_payoff(
    current_balance: Decimal,
    remaining_installments: int,
    annual_rate: Decimal,
    property_value: Decimal,
    mip_rate: Decimal = Decimal("0"),
    dfi_rate: Decimal = Decimal("0"),
    admin_fee: Decimal = Decimal("0"),
    amortization_system: AmortizationSystem = AmortizationSystem.SAC,
    reference_date: date | None = None,
) -> EarlyPayoffResult:
    projection = project_remaining(
        current_balance,
        remaining_installments,
        annual_rate,
        property_value,
        mip_rate,
        dfi_rate,
        admin_fee,
        amortization_system,
        reference_date or date.today(),
    )

    payoff_amount = current_balance
    total_savings = projection.total_paid - payoff_amount

    return EarlyPayoffResult(
        current_balance=to_cents(current_balance),
        remaining_installments=remaining_installments,
        total_remaining_payments=to_cents(projection.total_paid),
        total_interest_remaining=to_cents(projection.total_interest),
        payoff_amount=to_cents(payoff_amount),
        total_savings=to_cents(total_savings),
    )
