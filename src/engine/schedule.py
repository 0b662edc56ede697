"""Mortgage installment schedules under SAC, PRICE and SACRE.

Pure functions: MortgageParameters in, MortgageProjection out. No I/O.

Balances are carried unrounded from one installment to the next; each
monetary field is rounded to cents only when its CalculatedInstallment is
created, and projection totals are summed from those rounded rows.
"""

import calendar
import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from src.engine.rates import annual_to_monthly_rate
from src.models.mortgage import (
    AmortizationSystem,
    CalculatedInstallment,
    InvalidMortgageConfiguration,
    MortgageParameters,
    MortgageProjection,
)

logger = logging.getLogger(__name__)

TWO_PLACES = Decimal("0.01")
ZERO = Decimal("0")


def to_cents(value: Decimal) -> Decimal:
    return value.quantize(TWO_PLACES, ROUND_HALF_UP)


def safe_divide(numerator: Decimal, denominator: Decimal) -> Decimal:
    """numerator / denominator, with anything over zero defined as zero."""
    if denominator == 0:
        return ZERO
    return Decimal(numerator) / Decimal(denominator)


def add_months(start: date, months: int) -> date:
    """Shift a date by whole calendar months, clamping to the month's last day."""
    year = start.year + (start.month - 1 + months) // 12
    month = (start.month - 1 + months) % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def monthly_dfi(property_value: Decimal, dfi_rate: Decimal) -> Decimal:
    """DFI (property damage) premium: annual percent of property value, paid monthly."""
    return property_value * (dfi_rate / 100) / 12


def monthly_mip(balance: Decimal, mip_rate: Decimal) -> Decimal:
    """MIP (life/disability) premium: monthly percent of the outstanding balance."""
    return balance * (mip_rate / 100)


def build_installment(
    number: int,
    due_date: date,
    amortization: Decimal,
    interest: Decimal,
    mip: Decimal,
    dfi: Decimal,
    admin_fee: Decimal,
    total: Decimal,
    balance_before: Decimal,
    balance_after: Decimal,
) -> CalculatedInstallment:
    return CalculatedInstallment(
        installment_number=number,
        due_date=due_date,
        amortization_amount=to_cents(amortization),
        interest_amount=to_cents(interest),
        mip_insurance=to_cents(mip),
        dfi_insurance=to_cents(dfi),
        admin_fee=to_cents(admin_fee),
        tr_adjustment=to_cents(ZERO),
        total_amount=to_cents(total),
        balance_before=to_cents(balance_before),
        balance_after=to_cents(balance_after),
    )


def calculate_sac_installments(params: MortgageParameters) -> list[CalculatedInstallment]:
    """Constant amortization: decreasing interest and decreasing installments.

    The amortization slice comes from the original financed amount and term,
    so a schedule resumed from a later installment keeps the same slice.
    """
    monthly_rate = annual_to_monthly_rate(params.annual_rate)
    amortization = params.financed_amount / params.total_installments
    dfi = monthly_dfi(params.property_value, params.dfi_rate)

    installments: list[CalculatedInstallment] = []
    balance = params.opening_balance

    for i in range(params.remaining_installments):
        interest = balance * monthly_rate
        mip = monthly_mip(balance, params.mip_rate)
        total = amortization + interest + mip + dfi + params.admin_fee
        balance_after = max(ZERO, balance - amortization)

        installments.append(build_installment(
            number=params.starting_installment + i,
            due_date=add_months(params.first_installment_date, i),
            amortization=amortization,
            interest=interest,
            mip=mip,
            dfi=dfi,
            admin_fee=params.admin_fee,
            total=total,
            balance_before=balance,
            balance_after=balance_after,
        ))
        balance = balance_after

    return installments


def price_payment(balance: Decimal, monthly_rate: Decimal, periods: int) -> Decimal:
    """Level payment: PMT = PV * [i(1+i)^n] / [(1+i)^n - 1], or PV/n at zero rate."""
    if periods <= 0:
        return ZERO
    if monthly_rate == 0:
        return balance / periods
    factor = (1 + monthly_rate) ** periods
    return balance * (monthly_rate * factor) / (factor - 1)


def calculate_price_installments(params: MortgageParameters) -> list[CalculatedInstallment]:
    """Constant installment (French table): growing amortization, falling interest.

    Insurance and fees sit on top of the level payment, so the all-in
    installment still moves with the balance-dependent MIP premium.
    """
    monthly_rate = annual_to_monthly_rate(params.annual_rate)
    periods = params.remaining_installments
    dfi = monthly_dfi(params.property_value, params.dfi_rate)

    installments: list[CalculatedInstallment] = []
    balance = params.opening_balance
    pmt = price_payment(balance, monthly_rate, periods)

    for i in range(periods):
        interest = balance * monthly_rate
        amortization = pmt - interest
        mip = monthly_mip(balance, params.mip_rate)
        total = pmt + mip + dfi + params.admin_fee
        balance_after = max(ZERO, balance - amortization)

        installments.append(build_installment(
            number=params.starting_installment + i,
            due_date=add_months(params.first_installment_date, i),
            amortization=amortization,
            interest=interest,
            mip=mip,
            dfi=dfi,
            admin_fee=params.admin_fee,
            total=total,
            balance_before=balance,
            balance_after=balance_after,
        ))
        balance = balance_after

    return installments


def calculate_sacre_installments(params: MortgageParameters) -> list[CalculatedInstallment]:
    # Approximation: SACRE's periodic TR-driven recalculation is not modelled,
    # so the schedule is the SAC one.
    return calculate_sac_installments(params)


_CALCULATORS = {
    AmortizationSystem.SAC: calculate_sac_installments,
    AmortizationSystem.PRICE: calculate_price_installments,
    AmortizationSystem.SACRE: calculate_sacre_installments,
}


def summarize_installments(installments: list[CalculatedInstallment]) -> MortgageProjection:
    """Aggregate a list of emitted rows into a projection."""
    total_paid = sum((inst.total_amount for inst in installments), ZERO)
    total_interest = sum((inst.interest_amount for inst in installments), ZERO)
    total_amortization = sum((inst.amortization_amount for inst in installments), ZERO)
    total_insurance = sum((inst.insurance for inst in installments), ZERO)
    total_admin_fee = sum((inst.admin_fee for inst in installments), ZERO)

    return MortgageProjection(
        installments=installments,
        total_paid=total_paid,
        total_interest=total_interest,
        total_amortization=total_amortization,
        total_insurance=total_insurance,
        total_admin_fee=total_admin_fee,
        average_installment=to_cents(safe_divide(total_paid, Decimal(len(installments)))),
        first_installment=installments[0].total_amount if installments else ZERO,
        last_installment=installments[-1].total_amount if installments else ZERO,
    )


def calculate_mortgage_installments(params: MortgageParameters) -> MortgageProjection:
    """Generate the schedule for installments starting_installment..total_installments.

    Always emits every installment of the range; it never stops early on a
    zero balance.

    Raises:
        InvalidMortgageConfiguration: non-positive term, starting installment
            below 1, or negative financed amount.
    """
    if params.total_installments <= 0:
        raise InvalidMortgageConfiguration(
            f"total_installments must be positive, got {params.total_installments}"
        )
    if params.starting_installment < 1:
        raise InvalidMortgageConfiguration(
            f"starting_installment must be at least 1, got {params.starting_installment}"
        )
    if params.financed_amount < 0:
        raise InvalidMortgageConfiguration(
            f"financed_amount cannot be negative, got {params.financed_amount}"
        )

    calculator = _CALCULATORS[params.amortization_system]
    installments = calculator(params)
    logger.debug(
        "%s schedule: %d installments from #%d",
        params.amortization_system.value,
        len(installments),
        params.starting_installment,
    )
    return summarize_installments(installments)


def project_remaining(
    balance: Decimal,
    remaining_installments: int,
    annual_rate: Decimal,
    property_value: Decimal,
    mip_rate: Decimal,
    dfi_rate: Decimal,
    admin_fee: Decimal,
    amortization_system: AmortizationSystem,
    first_installment_date: date,
) -> MortgageProjection:
    """Project an outstanding balance over the remaining term as a fresh loan.

    Used by the simulators. A non-positive term or a negative balance is a
    degenerate but valid simulation input and projects to no installments.
    """
    if remaining_installments <= 0 or balance < 0:
        return summarize_installments([])

    return calculate_mortgage_installments(MortgageParameters(
        financed_amount=balance,
        total_installments=remaining_installments,
        annual_rate=annual_rate,
        amortization_system=amortization_system,
        first_installment_date=first_installment_date,
        property_value=property_value,
        mip_rate=mip_rate,
        dfi_rate=dfi_rate,
        admin_fee=admin_fee,
    ))
