"""Canonical test fixtures used across all engine tests.

Fixture: R$300K financed over 360 months at 10% a.a., first installment
on 2025-01-10, R$400K property.
"""

import pytest
from dataclasses import replace
from datetime import date
from decimal import Decimal

from src.models.mortgage import (
    AmortizationSystem,
    MortgageContract,
    MortgageParameters,
)


@pytest.fixture
def sac_params() -> MortgageParameters:
    """R$300K, 360 months, 10% a.a., SAC, no insurance or fees."""
    return MortgageParameters(
        financed_amount=Decimal("300000"),
        total_installments=360,
        annual_rate=Decimal("10"),
        amortization_system=AmortizationSystem.SAC,
        first_installment_date=date(2025, 1, 10),
        property_value=Decimal("400000"),
    )


@pytest.fixture
def price_params(sac_params) -> MortgageParameters:
    return replace(sac_params, amortization_system=AmortizationSystem.PRICE)


@pytest.fixture
def insured_params(sac_params) -> MortgageParameters:
    """Same loan with MIP 0.03%/month, DFI 0.12%/year and a R$25 fee."""
    return replace(
        sac_params,
        mip_rate=Decimal("0.03"),
        dfi_rate=Decimal("0.12"),
        admin_fee=Decimal("25"),
    )


@pytest.fixture
def contract() -> MortgageContract:
    """SAC contract with 10 of 360 installments paid."""
    return MortgageContract(
        contract_number="8.7877.0123456-7",
        institution_name="Caixa",
        financed_amount=Decimal("300000"),
        property_value=Decimal("400000"),
        total_installments=360,
        paid_installments=10,
        base_annual_rate=Decimal("10"),
        reduced_annual_rate=Decimal("9"),
        is_reduced_rate_active=False,
        amortization_system=AmortizationSystem.SAC,
        first_installment_date=date(2025, 1, 10),
        current_balance=Decimal("291666.67"),
    )
