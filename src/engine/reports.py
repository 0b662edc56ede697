"""Installment aggregation for yearly views, annual statements and portfolios.

Pure functions over already computed (or already paid) installments.
"""

from decimal import Decimal, ROUND_HALF_UP

from src.models.mortgage import (
    AnnualMortgageReport,
    CalculatedInstallment,
    ExtraPaymentRecord,
    InstallmentStatus,
    MortgageContract,
    MortgageStatus,
    PaidInstallment,
    PaymentProgress,
    PortfolioSummary,
    YearlyInstallmentSummary,
)

TWO_PLACES = Decimal("0.01")


def yearly_installment_summary(
    installments: list[CalculatedInstallment],
) -> list[YearlyInstallmentSummary]:
    """Aggregate installments by calendar year of their due date.

    Input is expected in due-date order, as every schedule is emitted.
    """
    yearly: list[YearlyInstallmentSummary] = []
    bucket: list[CalculatedInstallment] = []

    for inst in installments:
        if bucket and inst.due_date.year != bucket[0].due_date.year:
            yearly.append(_summarize_year(bucket))
            bucket = []
        bucket.append(inst)

    if bucket:
        yearly.append(_summarize_year(bucket))
    return yearly


def _summarize_year(bucket: list[CalculatedInstallment]) -> YearlyInstallmentSummary:
    return YearlyInstallmentSummary(
        year=bucket[0].due_date.year,
        installments=len(bucket),
        amortization=sum((i.amortization_amount for i in bucket), Decimal("0")),
        interest=sum((i.interest_amount for i in bucket), Decimal("0")),
        insurance=sum((i.insurance for i in bucket), Decimal("0")),
        admin_fee=sum((i.admin_fee for i in bucket), Decimal("0")),
        total_paid=sum((i.total_amount for i in bucket), Decimal("0")),
        ending_balance=bucket[-1].balance_after,
    )


def _fully_paid(payments: list[PaidInstallment]) -> list[PaidInstallment]:
    return [p for p in payments if p.status is InstallmentStatus.PAID]


def payment_progress(
    contract: MortgageContract, payments: list[PaidInstallment]
) -> PaymentProgress:
    """How far a contract has been paid, counting fully paid installments only."""
    paid = _fully_paid(payments)
    total_installments = contract.total_installments

    if total_installments > 0:
        progress = Decimal(len(paid)) / Decimal(total_installments) * 100
    else:
        progress = Decimal("0")

    return PaymentProgress(
        paid_installments=len(paid),
        remaining_installments=total_installments - len(paid),
        progress_percentage=progress.quantize(TWO_PLACES, ROUND_HALF_UP),
        total_paid=sum((p.installment.total_amount for p in paid), Decimal("0")),
        total_interest_paid=sum((p.installment.interest_amount for p in paid), Decimal("0")),
        total_amortization_paid=sum(
            (p.installment.amortization_amount for p in paid), Decimal("0")
        ),
    )


def annual_report(
    contract: MortgageContract,
    year: int,
    payments: list[PaidInstallment],
    extra_payments: list[ExtraPaymentRecord],
) -> AnnualMortgageReport:
    """Statement of what was paid on a contract during one calendar year.

    Only fully paid installments whose payment date falls in the year count,
    at the amount actually paid. Extra payments are selected by their own
    payment date. Without any paid installment in the year both balances
    fall back to the contract's outstanding balance.
    """
    installments = sorted(
        (p for p in _fully_paid(payments) if p.payment_date.year == year),
        key=lambda p: p.installment.installment_number,
    )
    extras = sorted(
        (e for e in extra_payments if e.payment_date.year == year),
        key=lambda e: e.payment_date,
    )

    report = AnnualMortgageReport(
        year=year,
        contract_number=contract.contract_number,
        institution_name=contract.institution_name,
        balance_start_of_year=(
            installments[0].installment.balance_before
            if installments
            else contract.outstanding_balance
        ),
        balance_end_of_year=(
            installments[-1].installment.balance_after
            if installments
            else contract.outstanding_balance
        ),
        installments=installments,
        extra_payments=extras,
    )
    for paid in installments:
        inst = paid.installment
        report.total_paid += paid.paid_amount
        report.total_amortization += inst.amortization_amount
        report.total_interest += inst.interest_amount
        report.total_insurance += inst.insurance
        report.total_admin_fee += inst.admin_fee
    report.extra_payments_total = sum((e.amount for e in extras), Decimal("0"))
    return report


def portfolio_summary(contracts: list[MortgageContract]) -> PortfolioSummary:
    """Totals across a user's contracts. Cancelled contracts are excluded."""
    tracked = [c for c in contracts if c.status is not MortgageStatus.CANCELLED]
    active = [c for c in tracked if c.status is MortgageStatus.ACTIVE]

    total_financed = sum((c.financed_amount for c in tracked), Decimal("0"))
    total_balance = sum((c.outstanding_balance for c in tracked), Decimal("0"))
    total_installments = sum(c.total_installments for c in tracked)
    total_paid_installments = sum(c.paid_installments for c in tracked)

    if total_installments > 0:
        progress = Decimal(total_paid_installments) / Decimal(total_installments) * 100
    else:
        progress = Decimal("0")

    return PortfolioSummary(
        total_mortgages=len(tracked),
        active_mortgages=len(active),
        total_financed=total_financed,
        total_current_balance=total_balance,
        total_paid=total_financed - total_balance,
        overall_progress=progress.quantize(TWO_PLACES, ROUND_HALF_UP),
    )
