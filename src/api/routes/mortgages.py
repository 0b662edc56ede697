"""Mortgage simulation routes. Stateless: every request carries its own loan data."""

from dataclasses import asdict

from fastapi import APIRouter, HTTPException

from src.api.schemas import (
    AmortizationSimulationRequest,
    AmortizationSimulationResponse,
    EarlyPayoffRequest,
    EarlyPayoffResponse,
    ExtraPaymentRequest,
    ExtraPaymentResponse,
    ProjectionResponse,
    RateConversionRequest,
    RateConversionResponse,
    ScheduleRequest,
)
from src.engine.early_payoff import simulate_early_payoff
from src.engine.extra_payment import simulate_extra_payment
from src.engine.rates import annual_to_monthly_rate, monthly_to_annual_rate
from src.engine.scenarios import simulate_multiple_extra_payments
from src.engine.schedule import calculate_mortgage_installments
from src.models.mortgage import (
    ExtraPaymentConfig,
    InvalidMortgageConfiguration,
    MortgageParameters,
)

router = APIRouter(prefix="/api/v1/mortgages", tags=["mortgages"])


@router.post("/schedule", response_model=ProjectionResponse)
async def schedule(req: ScheduleRequest):
    """Full installment schedule for the given loan parameters."""
    params = MortgageParameters(
        financed_amount=req.financed_amount,
        total_installments=req.total_installments,
        annual_rate=req.annual_rate,
        amortization_system=req.amortization_system,
        first_installment_date=req.first_installment_date,
        property_value=req.property_value,
        mip_rate=req.mip_rate,
        dfi_rate=req.dfi_rate,
        admin_fee=req.admin_fee,
        starting_installment=req.starting_installment,
        starting_balance=req.starting_balance,
    )
    try:
        projection = calculate_mortgage_installments(params)
    except InvalidMortgageConfiguration as e:
        raise HTTPException(status_code=400, detail=str(e))
    return ProjectionResponse.model_validate(asdict(projection))


@router.post("/simulations/extra-payment", response_model=ExtraPaymentResponse)
async def extra_payment(req: ExtraPaymentRequest):
    result = simulate_extra_payment(
        current_balance=req.current_balance,
        remaining_installments=req.remaining_installments,
        current_installment_value=req.current_installment_value,
        extra_payment_amount=req.amount,
        payment_type=req.payment_type,
        annual_rate=req.annual_rate,
        property_value=req.property_value,
        mip_rate=req.mip_rate,
        dfi_rate=req.dfi_rate,
        admin_fee=req.admin_fee,
        amortization_system=req.amortization_system,
        reference_date=req.reference_date,
    )
    return ExtraPaymentResponse.model_validate(asdict(result))


@router.post("/simulations/early-payoff", response_model=EarlyPayoffResponse)
async def early_payoff(req: EarlyPayoffRequest):
    result = simulate_early_payoff(
        current_balance=req.current_balance,
        remaining_installments=req.remaining_installments,
        annual_rate=req.annual_rate,
        property_value=req.property_value,
        mip_rate=req.mip_rate,
        dfi_rate=req.dfi_rate,
        admin_fee=req.admin_fee,
        amortization_system=req.amortization_system,
        reference_date=req.reference_date,
    )
    return EarlyPayoffResponse.model_validate(asdict(result))


@router.post(
    "/simulations/amortization",
    response_model=AmortizationSimulationResponse,
    response_model_exclude_none=True,
)
async def amortization(req: AmortizationSimulationRequest):
    """Compare the current schedule with one applying the requested extra payments."""
    extra_payments = [
        ExtraPaymentConfig(
            type=e.type,
            amount=e.amount,
            start_month=e.start_month,
            end_month=e.end_month,
            payment_type=e.payment_type,
        )
        for e in req.extra_payments
    ]
    result = simulate_multiple_extra_payments(
        current_balance=req.current_balance,
        remaining_installments=req.remaining_installments,
        annual_rate=req.annual_rate,
        property_value=req.property_value,
        first_installment_date=req.first_installment_date,
        extra_payments=extra_payments,
        amortization_system=req.amortization_system,
        mip_rate=req.mip_rate,
        dfi_rate=req.dfi_rate,
        admin_fee=req.admin_fee,
        include_original_schedule=req.include_current_schedule,
    )
    return AmortizationSimulationResponse.model_validate(asdict(result))


@router.post("/rates/convert", response_model=RateConversionResponse)
async def convert_rate(req: RateConversionRequest):
    try:
        if req.annual_rate is not None:
            monthly = annual_to_monthly_rate(req.annual_rate)
            return RateConversionResponse(annual_rate=req.annual_rate, monthly_rate=monthly)
        annual = monthly_to_annual_rate(req.monthly_rate)
        return RateConversionResponse(annual_rate=annual, monthly_rate=req.monthly_rate)
    except InvalidMortgageConfiguration as e:
        raise HTTPException(status_code=400, detail=str(e))
