"""Side-by-side comparison of the current schedule against extra-payment plans.

Pure computation. No I/O. The "with extra payments" schedule is built month
by month and stops as soon as the balance is paid off.
"""

import logging
from datetime import date
from decimal import Decimal

from src.config import settings
from src.engine.rates import annual_to_monthly_rate
from src.engine.schedule import (
    ZERO,
    add_months,
    build_installment,
    monthly_dfi,
    monthly_mip,
    project_remaining,
    safe_divide,
    summarize_installments,
    to_cents,
)
from src.models.mortgage import (
    AmortizationScenario,
    AmortizationSimulation,
    AmortizationSystem,
    CalculatedInstallment,
    ExtraPaymentConfig,
    MortgageProjection,
    ScenarioComparison,
    ScenarioSummary,
)

logger = logging.getLogger(__name__)

ORIGINAL_SCENARIO = "Original"
EXTRA_PAYMENTS_SCENARIO = "Com Aportes"


def _scenario(
    name: str,
    projection: MortgageProjection,
    final_installment_number: int,
    fallback_end_date: date,
) -> AmortizationScenario:
    installments = projection.installments
    return AmortizationScenario(
        name=name,
        installments=installments,
        summary=ScenarioSummary(
            total_paid=to_cents(projection.total_paid),
            total_interest=to_cents(projection.total_interest),
            total_amortization=to_cents(projection.total_amortization),
            final_installment_number=final_installment_number,
            estimated_end_date=installments[-1].due_date if installments else fallback_end_date,
        ),
    )


def extra_payment_for_month(
    extra_payments: list[ExtraPaymentConfig],
    installment_number: int,
    remaining_installments: int,
) -> Decimal:
    """Sum of every configured extra payment due with this installment."""
    return sum(
        (
            extra.amount
            for extra in extra_payments
            if extra.applies_to(installment_number, remaining_installments)
        ),
        ZERO,
    )


def schedule_with_extra_payments(
    current_balance: Decimal,
    remaining_installments: int,
    annual_rate: Decimal,
    property_value: Decimal,
    first_installment_date: date,
    extra_payments: list[ExtraPaymentConfig],
    mip_rate: Decimal = Decimal("0"),
    dfi_rate: Decimal = Decimal("0"),
    admin_fee: Decimal = Decimal("0"),
) -> tuple[list[CalculatedInstallment], Decimal]:
    """Month-by-month schedule at constant amortization plus extra payments.

    Returns the emitted installments and the total extra actually applied.
    Extra payments are capped so they never amortize past the balance left
    after the regular slice, and a leftover at or below the payoff threshold
    takes no extra at all. Generation stops at the installment that brings
    the balance to the payoff threshold or below.
    """
    monthly_rate = annual_to_monthly_rate(annual_rate)
    base_amortization = safe_divide(current_balance, Decimal(remaining_installments))
    dfi = monthly_dfi(property_value, dfi_rate)
    threshold = settings.payoff_threshold

    installments: list[CalculatedInstallment] = []
    total_extra = ZERO
    balance = current_balance

    for i in range(remaining_installments):
        if balance <= threshold:
            break

        number = i + 1
        interest = balance * monthly_rate
        amortization = min(base_amortization, balance)
        mip = monthly_mip(balance, mip_rate)

        extra = extra_payment_for_month(extra_payments, number, remaining_installments)
        headroom = balance - amortization
        # Sub-cent leftovers of the constant slice take no extra
        effective_extra = min(extra, headroom) if headroom > threshold else ZERO
        total_extra += effective_extra

        total_amortization = amortization + effective_extra
        balance_after = max(ZERO, balance - total_amortization)

        installments.append(build_installment(
            number=number,
            due_date=add_months(first_installment_date, i),
            amortization=total_amortization,
            interest=interest,
            mip=mip,
            dfi=dfi,
            admin_fee=admin_fee,
            total=amortization + interest + mip + dfi + admin_fee + effective_extra,
            balance_before=balance,
            balance_after=balance_after,
        ))
        balance = balance_after

    return installments, total_extra


def simulate_multiple_extra_payments(
    current_balance: Decimal,
    remaining_installments: int,
    annual_rate: Decimal,
    property_value: Decimal,
    first_installment_date: date,
    extra_payments: list[ExtraPaymentConfig],
    amortization_system: AmortizationSystem = AmortizationSystem.SAC,
    mip_rate: Decimal = Decimal("0"),
    dfi_rate: Decimal = Decimal("0"),
    admin_fee: Decimal = Decimal("0"),
    include_original_schedule: bool = True,
) -> AmortizationSimulation:
    """Compare the unchanged schedule with one that applies the extra payments.

    The extra-payment scenario always uses constant amortization
    (current_balance / remaining_installments), whatever amortization_system
    says; the system only shapes the "Original" scenario.

    With no extra payments the result holds the original scenario alone (or
    nothing) and no comparison. The comparison is only produced when both
    scenarios are present.
    """
    scenarios: list[AmortizationScenario] = []
    original: MortgageProjection | None = None

    if include_original_schedule:
        original = project_remaining(
            current_balance, remaining_installments, annual_rate, property_value,
            mip_rate, dfi_rate, admin_fee, amortization_system, first_installment_date,
        )
        scenarios.append(_scenario(
            ORIGINAL_SCENARIO, original, remaining_installments, first_installment_date
        ))

    if not extra_payments:
        return AmortizationSimulation(scenarios=scenarios)

    if amortization_system is not AmortizationSystem.SAC:
        logger.debug(
            "Extra payment scenario uses constant amortization for a %s contract",
            amortization_system.value,
        )

    rows, total_extra = schedule_with_extra_payments(
        current_balance,
        remaining_installments,
        annual_rate,
        property_value,
        first_installment_date,
        extra_payments,
        mip_rate,
        dfi_rate,
        admin_fee,
    )
    with_extras = summarize_installments(rows)
    scenarios.append(_scenario(
        EXTRA_PAYMENTS_SCENARIO, with_extras, len(rows), first_installment_date
    ))

    if original is None:
        return AmortizationSimulation(scenarios=scenarios)

    interest_saved = original.total_interest - with_extras.total_interest
    applied_extra = to_cents(total_extra)
    roi = safe_divide(interest_saved, applied_extra) * 100 if applied_extra > 0 else ZERO

    comparison = ScenarioComparison(
        interest_saved=to_cents(interest_saved),
        months_reduced=remaining_installments - len(rows),
        total_saved=to_cents(original.total_paid - with_extras.total_paid),
        roi_percentage=to_cents(roi),
    )
    logger.debug(
        "Extra payments shorten the term by %d months, interest saved %s",
        comparison.months_reduced,
        comparison.interest_saved,
    )
    return AmortizationSimulation(scenarios=scenarios, comparison=comparison)
