"""Pydantic schemas for API request/response models."""

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from src.config import settings
from src.models.mortgage import (
    AmortizationSystem,
    ExtraPaymentPolicy,
    ExtraPaymentType,
)


def default_system() -> AmortizationSystem:
    return settings.default_amortization_system


# ---- Request schemas ----

class InsuranceFields(BaseModel):
    property_value: Decimal = Field(Decimal("0"), ge=0, description="Base for the DFI premium")
    mip_rate: Decimal = Field(Decimal("0"), ge=0, description="Monthly % over the balance")
    dfi_rate: Decimal = Field(Decimal("0"), ge=0, description="Annual % over the property value")
    admin_fee: Decimal = Field(Decimal("0"), ge=0, description="Flat monthly fee")


class ScheduleRequest(InsuranceFields):
    financed_amount: Decimal = Field(..., gt=0)
    total_installments: int = Field(..., ge=1)
    annual_rate: Decimal = Field(..., ge=0, description="Effective annual rate, percent")
    amortization_system: AmortizationSystem = Field(default_factory=default_system)
    first_installment_date: date

    # Resume from a later installment (e.g. after an extra payment)
    starting_installment: int = Field(1, ge=1)
    starting_balance: Decimal | None = Field(None, ge=0)

    @model_validator(mode="after")
    def check_starting_installment(self):
        if self.starting_installment > self.total_installments:
            raise ValueError("starting_installment cannot exceed total_installments")
        return self


class ExtraPaymentRequest(InsuranceFields):
    current_balance: Decimal = Field(..., gt=0)
    remaining_installments: int = Field(..., ge=1)
    current_installment_value: Decimal = Field(Decimal("0"), ge=0)
    amount: Decimal = Field(..., gt=0)
    payment_type: ExtraPaymentPolicy
    annual_rate: Decimal = Field(..., ge=0)
    amortization_system: AmortizationSystem = Field(default_factory=default_system)
    reference_date: date | None = None

    @model_validator(mode="after")
    def check_amount(self):
        if self.amount > self.current_balance:
            raise ValueError("amount cannot exceed current_balance")
        return self


class EarlyPayoffRequest(InsuranceFields):
    current_balance: Decimal = Field(..., gt=0)
    remaining_installments: int = Field(..., ge=1)
    annual_rate: Decimal = Field(..., ge=0)
    amortization_system: AmortizationSystem = Field(default_factory=default_system)
    reference_date: date | None = None


class ExtraPaymentConfigRequest(BaseModel):
    type: ExtraPaymentType
    amount: Decimal = Field(..., gt=0)
    start_month: int = Field(1, ge=1)
    end_month: int | None = Field(None, ge=1)
    payment_type: ExtraPaymentPolicy = ExtraPaymentPolicy.REDUCE_TERM

    @model_validator(mode="after")
    def check_months(self):
        if self.end_month is not None and self.end_month < self.start_month:
            raise ValueError("end_month cannot precede start_month")
        return self


class AmortizationSimulationRequest(InsuranceFields):
    current_balance: Decimal = Field(..., gt=0)
    remaining_installments: int = Field(..., ge=1)
    annual_rate: Decimal = Field(..., ge=0)
    first_installment_date: date
    extra_payments: list[ExtraPaymentConfigRequest] = Field(default_factory=list)
    amortization_system: AmortizationSystem = Field(default_factory=default_system)
    include_current_schedule: bool = True


class RateConversionRequest(BaseModel):
    annual_rate: Decimal | None = Field(None, ge=-100, description="Percent per year")
    monthly_rate: Decimal | None = Field(None, ge=-1, description="Fraction per month")

    @model_validator(mode="after")
    def check_exactly_one(self):
        if (self.annual_rate is None) == (self.monthly_rate is None):
            raise ValueError("Provide exactly one of annual_rate or monthly_rate")
        return self


# ---- Response schemas ----

class InstallmentResponse(BaseModel):
    installment_number: int
    due_date: date
    amortization_amount: Decimal
    interest_amount: Decimal
    mip_insurance: Decimal
    dfi_insurance: Decimal
    admin_fee: Decimal
    tr_adjustment: Decimal
    total_amount: Decimal
    balance_before: Decimal
    balance_after: Decimal


class ProjectionResponse(BaseModel):
    installments: list[InstallmentResponse]
    total_paid: Decimal
    total_interest: Decimal
    total_amortization: Decimal
    total_insurance: Decimal
    total_admin_fee: Decimal
    average_installment: Decimal
    first_installment: Decimal
    last_installment: Decimal


class ExtraPaymentResponse(BaseModel):
    payment_type: ExtraPaymentPolicy
    amount: Decimal
    current_balance: Decimal
    new_balance: Decimal
    current_remaining_installments: int
    new_remaining_installments: int
    current_installment_value: Decimal
    new_installment_value: Decimal
    interest_saved: Decimal
    months_reduced: int
    total_saved: Decimal


class EarlyPayoffResponse(BaseModel):
    current_balance: Decimal
    remaining_installments: int
    total_remaining_payments: Decimal
    total_interest_remaining: Decimal
    payoff_amount: Decimal
    total_savings: Decimal


class ScenarioSummaryResponse(BaseModel):
    total_paid: Decimal
    total_interest: Decimal
    total_amortization: Decimal
    final_installment_number: int
    estimated_end_date: date


class ScenarioResponse(BaseModel):
    name: str
    installments: list[InstallmentResponse]
    summary: ScenarioSummaryResponse


class ComparisonResponse(BaseModel):
    interest_saved: Decimal
    months_reduced: int
    total_saved: Decimal
    roi_percentage: Decimal


class AmortizationSimulationResponse(BaseModel):
    scenarios: list[ScenarioResponse]
    comparison: ComparisonResponse | None = None


class RateConversionResponse(BaseModel):
    annual_rate: Decimal
    monthly_rate: Decimal
