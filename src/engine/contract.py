"""Contract-level entry points.

Resolve a MortgageContract (as the application tracks it) into engine
arguments: effective rate, outstanding balance, remaining term and the next
due date. Nothing here loads or stores contracts.
"""

import logging
from dataclasses import replace
from datetime import date
from decimal import Decimal

from src.engine.early_payoff import simulate_early_payoff
from src.engine.extra_payment import simulate_extra_payment
from src.engine.scenarios import simulate_multiple_extra_payments
from src.engine.schedule import add_months, calculate_mortgage_installments
from src.models.mortgage import (
    AmortizationSimulation,
    CalculatedInstallment,
    EarlyPayoffResult,
    ExtraPaymentConfig,
    ExtraPaymentPolicy,
    ExtraPaymentRecord,
    ExtraPaymentResult,
    InstallmentStatus,
    MortgageContract,
    MortgageParameters,
    MortgageProjection,
    PaidInstallment,
)

logger = logging.getLogger(__name__)


def contract_parameters(contract: MortgageContract) -> MortgageParameters:
    """Parameters for the contract's full schedule, from installment #1."""
    return MortgageParameters(
        financed_amount=contract.financed_amount,
        total_installments=contract.total_installments,
        annual_rate=contract.effective_annual_rate,
        amortization_system=contract.amortization_system,
        first_installment_date=contract.first_installment_date,
        property_value=contract.property_value,
        mip_rate=contract.mip_rate,
        dfi_rate=contract.dfi_rate,
        admin_fee=contract.admin_fee,
        rate_index=contract.rate_index,
    )


def next_due_date(contract: MortgageContract) -> date:
    if contract.next_installment is not None:
        return contract.next_installment.due_date
    return add_months(contract.first_installment_date, contract.paid_installments)


def remaining_schedule(contract: MortgageContract) -> MortgageProjection:
    """Schedule for the unpaid installments, resumed from the outstanding balance.

    SAC keeps the contract's original amortization slice; PRICE re-solves the
    level payment over the remaining term.
    """
    params = replace(
        contract_parameters(contract),
        starting_installment=contract.paid_installments + 1,
        starting_balance=contract.outstanding_balance,
        first_installment_date=next_due_date(contract),
    )
    return calculate_mortgage_installments(params)


def _current_installment_value(contract: MortgageContract) -> Decimal:
    if contract.next_installment is None:
        return Decimal("0")
    return contract.next_installment.total_amount


def simulate_contract_extra_payment(
    contract: MortgageContract,
    amount: Decimal,
    payment_type: ExtraPaymentPolicy,
) -> ExtraPaymentResult:
    return simulate_extra_payment(
        current_balance=contract.outstanding_balance,
        remaining_installments=contract.remaining_installments,
        current_installment_value=_current_installment_value(contract),
        extra_payment_amount=amount,
        payment_type=payment_type,
        annual_rate=contract.effective_annual_rate,
        property_value=contract.property_value,
        mip_rate=contract.mip_rate,
        dfi_rate=contract.dfi_rate,
        admin_fee=contract.admin_fee,
        amortization_system=contract.amortization_system,
        reference_date=next_due_date(contract),
    )


def simulate_contract_early_payoff(contract: MortgageContract) -> EarlyPayoffResult:
    return simulate_early_payoff(
        current_balance=contract.outstanding_balance,
        remaining_installments=contract.remaining_installments,
        annual_rate=contract.effective_annual_rate,
        property_value=contract.property_value,
        mip_rate=contract.mip_rate,
        dfi_rate=contract.dfi_rate,
        admin_fee=contract.admin_fee,
        amortization_system=contract.amortization_system,
        reference_date=next_due_date(contract),
    )


def simulate_contract_amortization(
    contract: MortgageContract,
    extra_payments: list[ExtraPaymentConfig],
    include_current_schedule: bool = True,
) -> AmortizationSimulation:
    return simulate_multiple_extra_payments(
        current_balance=contract.outstanding_balance,
        remaining_installments=contract.remaining_installments,
        annual_rate=contract.effective_annual_rate,
        property_value=contract.property_value,
        first_installment_date=next_due_date(contract),
        extra_payments=extra_payments,
        amortization_system=contract.amortization_system,
        mip_rate=contract.mip_rate,
        dfi_rate=contract.dfi_rate,
        admin_fee=contract.admin_fee,
        include_original_schedule=include_current_schedule,
    )


def apply_extra_payment(
    contract: MortgageContract,
    amount: Decimal,
    payment_type: ExtraPaymentPolicy,
    payment_date: date,
    notes: str | None = None,
) -> tuple[ExtraPaymentRecord, MortgageContract]:
    """Record an extra payment and return the contract with its new balance.

    The returned contract is a copy; the caller decides what to persist.
    """
    simulation = simulate_contract_extra_payment(contract, amount, payment_type)

    record = ExtraPaymentRecord(
        payment_date=payment_date,
        amount=simulation.amount,
        payment_type=payment_type,
        balance_before=simulation.current_balance,
        balance_after=simulation.new_balance,
        remaining_installments_before=simulation.current_remaining_installments,
        remaining_installments_after=simulation.new_remaining_installments,
        installment_value_before=simulation.current_installment_value,
        installment_value_after=simulation.new_installment_value,
        interest_saved=simulation.interest_saved,
        months_reduced=simulation.months_reduced,
        notes=notes,
    )
    logger.info(
        "Extra payment of %s on contract %s: balance %s -> %s",
        record.amount,
        contract.contract_number,
        record.balance_before,
        record.balance_after,
    )

    updated = replace(contract, current_balance=simulation.new_balance)
    return record, updated


def pay_installment(
    contract: MortgageContract,
    installment: CalculatedInstallment,
    paid_amount: Decimal | None = None,
    payment_date: date | None = None,
    notes: str | None = None,
) -> tuple[PaidInstallment, MortgageContract]:
    """Record payment of a scheduled installment.

    paid_amount defaults to the installment total and payment_date to today.
    Anything below the total is a partial payment and leaves the contract
    untouched. A full payment moves the contract to the installment's
    closing balance and counts it as paid.
    """
    amount = installment.total_amount if paid_amount is None else paid_amount
    is_paid = amount >= installment.total_amount

    paid = PaidInstallment(
        installment=installment,
        status=InstallmentStatus.PAID if is_paid else InstallmentStatus.PARTIAL,
        paid_amount=amount,
        payment_date=payment_date or date.today(),
        notes=notes,
    )
    if not is_paid:
        logger.info(
            "Partial payment of %s on installment %d of contract %s (due %s)",
            amount,
            installment.installment_number,
            contract.contract_number,
            installment.total_amount,
        )
        return paid, contract

    next_installment = contract.next_installment
    if (
        next_installment is not None
        and next_installment.installment_number <= installment.installment_number
    ):
        next_installment = None

    updated = replace(
        contract,
        current_balance=installment.balance_after,
        paid_installments=installment.installment_number,
        next_installment=next_installment,
    )
    logger.info(
        "Installment %d of contract %s paid, balance now %s",
        installment.installment_number,
        contract.contract_number,
        updated.current_balance,
    )
    return paid, updated
