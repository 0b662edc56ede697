"""CLI for the mortgage engine.

Usage:
    python -m src.cli schedule 300000 360 10 --system SAC --first 2025-01-10
    python -m src.cli extra 250000 300 10 --amount 20000 --policy REDUCE_TERM
    python -m src.cli payoff 250000 300 10
    python -m src.cli scenarios 250000 300 10 --recurring 1000 --once 20000:12
"""

import argparse
import logging
import sys
from datetime import date
from decimal import Decimal, InvalidOperation

from src.config import settings
from src.engine.early_payoff import simulate_early_payoff
from src.engine.extra_payment import simulate_extra_payment
from src.engine.reports import yearly_installment_summary
from src.engine.scenarios import simulate_multiple_extra_payments
from src.engine.schedule import calculate_mortgage_installments
from src.models.mortgage import (
    AmortizationSystem,
    ExtraPaymentConfig,
    ExtraPaymentPolicy,
    ExtraPaymentType,
    InvalidMortgageConfiguration,
    MortgageParameters,
)


def money(value: str) -> Decimal:
    try:
        return Decimal(value.replace(",", ""))
    except InvalidOperation:
        raise argparse.ArgumentTypeError(f"not a number: {value}")


def recurring_payment(value: str) -> ExtraPaymentConfig:
    """AMOUNT[:START[:END]]"""
    parts = value.split(":")
    try:
        return ExtraPaymentConfig(
            type=ExtraPaymentType.RECURRING,
            amount=money(parts[0]),
            start_month=int(parts[1]) if len(parts) > 1 else 1,
            end_month=int(parts[2]) if len(parts) > 2 else None,
        )
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected AMOUNT[:START[:END]], got {value}")


def one_time_payment(value: str) -> ExtraPaymentConfig:
    """AMOUNT:MONTH"""
    amount, _, month = value.partition(":")
    try:
        return ExtraPaymentConfig(
            type=ExtraPaymentType.ONE_TIME,
            amount=money(amount),
            start_month=int(month or 1),
        )
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected AMOUNT:MONTH, got {value}")


def print_schedule(projection, yearly: bool) -> None:
    print(f"\n{'=' * 60}")
    print(f"  Installments:       {len(projection.installments)}")
    print(f"  First installment:  {projection.first_installment:,.2f}")
    print(f"  Last installment:   {projection.last_installment:,.2f}")
    print(f"  Average:            {projection.average_installment:,.2f}")
    print(f"  Total interest:     {projection.total_interest:,.2f}")
    print(f"  Total insurance:    {projection.total_insurance:,.2f}")
    print(f"  Total paid:         {projection.total_paid:,.2f}")
    print(f"{'=' * 60}")

    if yearly:
        for y in yearly_installment_summary(projection.installments):
            print(
                f"  {y.year}  {y.installments:>3} inst  amort {y.amortization:>12,.2f}"
                f"  interest {y.interest:>12,.2f}  balance {y.ending_balance:>14,.2f}"
            )
    else:
        for inst in projection.installments:
            print(
                f"  #{inst.installment_number:<4} {inst.due_date}  amort {inst.amortization_amount:>10,.2f}"
                f"  interest {inst.interest_amount:>10,.2f}  total {inst.total_amount:>10,.2f}"
                f"  balance {inst.balance_after:>12,.2f}"
            )
    print()


def print_record(title: str, record) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")
    for name, value in vars(record).items():
        if hasattr(value, "value"):
            value = value.value
        print(f"  {name.replace('_', ' ').capitalize():<32} {value}")
    print()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Mortgage schedules and simulations")
    sub = parser.add_subparsers(dest="command", required=True)

    def loan_args(p):
        p.add_argument("balance", type=money, help="Financed amount or current balance")
        p.add_argument("installments", type=int, help="Total or remaining installments")
        p.add_argument("rate", type=money, help="Effective annual rate, percent")
        p.add_argument(
            "--system",
            choices=[s.value for s in AmortizationSystem],
            default=settings.default_amortization_system.value,
        )
        p.add_argument("--property-value", type=money, default=Decimal("0"))
        p.add_argument("--mip", type=money, default=Decimal("0"), help="MIP, monthly %% over balance")
        p.add_argument("--dfi", type=money, default=Decimal("0"), help="DFI, annual %% over property")
        p.add_argument("--fee", type=money, default=Decimal("0"), help="Monthly admin fee")
        p.add_argument("--first", type=date.fromisoformat, default=date.today(), help="First due date")

    p_schedule = sub.add_parser("schedule", help="Full installment schedule")
    loan_args(p_schedule)
    p_schedule.add_argument("--yearly", action="store_true", help="Aggregate by calendar year")

    p_extra = sub.add_parser("extra", help="Simulate one extra payment")
    loan_args(p_extra)
    p_extra.add_argument("--amount", type=money, required=True)
    p_extra.add_argument(
        "--policy", choices=[p.value for p in ExtraPaymentPolicy], default="REDUCE_TERM"
    )
    p_extra.add_argument("--current-installment", type=money, default=Decimal("0"))

    p_payoff = sub.add_parser("payoff", help="Simulate paying off the balance now")
    loan_args(p_payoff)

    p_scen = sub.add_parser("scenarios", help="Compare schedules with extra payments")
    loan_args(p_scen)
    p_scen.add_argument("--recurring", type=recurring_payment, action="append", default=[])
    p_scen.add_argument("--once", type=one_time_payment, action="append", default=[])

    args = parser.parse_args(argv)
    logging.basicConfig(level=settings.log_level)
    system = AmortizationSystem(args.system)

    try:
        if args.command == "schedule":
            projection = calculate_mortgage_installments(MortgageParameters(
                financed_amount=args.balance,
                total_installments=args.installments,
                annual_rate=args.rate,
                amortization_system=system,
                first_installment_date=args.first,
                property_value=args.property_value,
                mip_rate=args.mip,
                dfi_rate=args.dfi,
                admin_fee=args.fee,
            ))
            print_schedule(projection, args.yearly)

        elif args.command == "extra":
            result = simulate_extra_payment(
                args.balance, args.installments, args.current_installment, args.amount,
                ExtraPaymentPolicy(args.policy), args.rate, args.property_value,
                args.mip, args.dfi, args.fee, system, args.first,
            )
            print_record("Extra payment simulation", result)

        elif args.command == "payoff":
            result = simulate_early_payoff(
                args.balance, args.installments, args.rate, args.property_value,
                args.mip, args.dfi, args.fee, system, args.first,
            )
            print_record("Early payoff simulation", result)

        else:
            simulation = simulate_multiple_extra_payments(
                args.balance, args.installments, args.rate, args.property_value,
                args.first, args.recurring + args.once, system,
                args.mip, args.dfi, args.fee,
            )
            for scenario in simulation.scenarios:
                print_record(f"Scenario: {scenario.name}", scenario.summary)
            if simulation.comparison is not None:
                print_record("Comparison", simulation.comparison)
    except InvalidMortgageConfiguration as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
