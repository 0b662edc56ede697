"""Extraordinary payment simulation.

Pure functions. An extra payment lowers the outstanding balance and then
either shortens the term at the same amortization (REDUCE_TERM) or keeps the
term and shrinks the installment (REDUCE_INSTALLMENT).
"""

import logging
import math
from datetime import date
from decimal import Decimal

from src.engine.rates import annual_to_monthly_rate
from src.engine.schedule import (
    monthly_dfi,
    monthly_mip,
    project_remaining,
    safe_divide,
    to_cents,
)
from src.models.mortgage import (
    AmortizationSystem,
    ExtraPaymentPolicy,
    ExtraPaymentResult,
)

logger = logging.getLogger(__name__)


def simulate_extra_payment(
    current_balance: Decimal,
    remaining_installments: int,
    current_installment_value: Decimal,
    extra_payment_amount: Decimal,
    payment_type: ExtraPaymentPolicy,
    annual_rate: Decimal,
    property_value: Decimal,
    mip_rate: Decimal = Decimal("0"),
    dfi_rate: Decimal = Decimal("0"),
    admin_fee: Decimal = Decimal("0"),
    amortization_system: AmortizationSystem = AmortizationSystem.SAC,
    reference_date: date | None = None,
) -> ExtraPaymentResult:
    """Simulate one extra payment against the current balance.

    The payment is not checked against the balance: an amount above it yields
    a negative new balance and a schedule with no installments left. Under
    REDUCE_TERM the new term is negative too, so months_reduced then exceeds
    remaining_installments (balance 1000 over 10 months less 1500 gives a
    term of -5 and 15 months reduced).

    Savings come from projecting the balance before and after the payment
    with the same amortization system. total_saved is net of the payment
    itself.
    """
    new_balance = current_balance - extra_payment_amount
    if new_balance < 0:
        logger.warning(
            "Extra payment %s exceeds balance %s", extra_payment_amount, current_balance
        )

    monthly_rate = annual_to_monthly_rate(annual_rate)
    interest = new_balance * monthly_rate
    mip = monthly_mip(new_balance, mip_rate)
    dfi = monthly_dfi(property_value, dfi_rate)

    if payment_type is ExtraPaymentPolicy.REDUCE_TERM:
        # Same amortization slice as before the payment, fewer installments.
        # balance * n / current_balance equals balance / slice without the
        # inexact intermediate slice.
        amortization = safe_divide(current_balance, Decimal(remaining_installments))
        new_remaining = math.ceil(
            safe_divide(new_balance * remaining_installments, current_balance)
        )
        months_reduced = remaining_installments - new_remaining
    else:
        new_remaining = remaining_installments
        amortization = safe_divide(new_balance, Decimal(remaining_installments))
        months_reduced = 0

    new_installment_value = amortization + interest + mip + dfi + admin_fee

    start = reference_date or date.today()
    original = project_remaining(
        current_balance, remaining_installments, annual_rate, property_value,
        mip_rate, dfi_rate, admin_fee, amortization_system, start,
    )
    after = project_remaining(
        new_balance, new_remaining, annual_rate, property_value,
        mip_rate, dfi_rate, admin_fee, amortization_system, start,
    )

    interest_saved = original.total_interest - after.total_interest
    total_saved = original.total_paid - after.total_paid - extra_payment_amount

    logger.debug(
        "%s extra payment %s: %d -> %d installments, interest saved %s",
        payment_type.value,
        extra_payment_amount,
        remaining_installments,
        new_remaining,
        interest_saved,
    )

    return ExtraPaymentResult(
        payment_type=payment_type,
        amount=to_cents(extra_payment_amount),
        current_balance=to_cents(current_balance),
        new_balance=to_cents(new_balance),
        current_remaining_installments=remaining_installments,
        new_remaining_installments=new_remaining,
        current_installment_value=to_cents(current_installment_value),
        new_installment_value=to_cents(new_installment_value),
        interest_saved=to_cents(interest_saved),
        months_reduced=months_reduced,
        total_saved=to_cents(total_saved),
    )
