from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum


class InvalidMortgageConfiguration(ValueError):
    """Raised when a computation is mathematically undefined for the inputs."""


class AmortizationSystem(Enum):
    SAC = "SAC"  # constant amortization
    PRICE = "PRICE"  # constant installment (French table)
    SACRE = "SACRE"  # currently computed as SAC, see schedule.calculate_sacre_installments


class RateIndex(Enum):
    TR = "TR"
    IPCA = "IPCA"
    IGPM = "IGPM"
    FIXO = "FIXO"


class ExtraPaymentType(Enum):
    ONE_TIME = "ONE_TIME"
    RECURRING = "RECURRING"


class ExtraPaymentPolicy(Enum):
    REDUCE_TERM = "REDUCE_TERM"
    REDUCE_INSTALLMENT = "REDUCE_INSTALLMENT"


@dataclass(frozen=True)
class MortgageParameters:
    financed_amount: Decimal
    total_installments: int
    annual_rate: Decimal  # nominal annual percent, e.g. Decimal("10.5")
    amortization_system: AmortizationSystem
    first_installment_date: date  # due date of starting_installment
    property_value: Decimal = Decimal("0")
    mip_rate: Decimal = Decimal("0")  # monthly percent over the balance
    dfi_rate: Decimal = Decimal("0")  # annual percent over the property value
    admin_fee: Decimal = Decimal("0")
    starting_installment: int = 1
    starting_balance: Decimal | None = None  # defaults to financed_amount
    rate_index: RateIndex = RateIndex.TR

    @property
    def opening_balance(self) -> Decimal:
        if self.starting_balance is None:
            return self.financed_amount
        return self.starting_balance

    @property
    def remaining_installments(self) -> int:
        return self.total_installments - self.starting_installment + 1


@dataclass(frozen=True)
class CalculatedInstallment:
    installment_number: int
    due_date: date
    amortization_amount: Decimal
    interest_amount: Decimal
    mip_insurance: Decimal
    dfi_insurance: Decimal
    admin_fee: Decimal
    tr_adjustment: Decimal  # indexation is applied by the caller
    total_amount: Decimal
    balance_before: Decimal
    balance_after: Decimal

    @property
    def insurance(self) -> Decimal:
        return self.mip_insurance + self.dfi_insurance


@dataclass(frozen=True)
class MortgageProjection:
    installments: list[CalculatedInstallment]
    total_paid: Decimal
    total_interest: Decimal
    total_amortization: Decimal
    total_insurance: Decimal
    total_admin_fee: Decimal
    average_installment: Decimal
    first_installment: Decimal
    last_installment: Decimal


@dataclass(frozen=True)
class ExtraPaymentConfig:
    type: ExtraPaymentType
    amount: Decimal
    start_month: int = 1
    end_month: int | None = None  # defaults to the remaining term
    payment_type: ExtraPaymentPolicy = ExtraPaymentPolicy.REDUCE_TERM

    def applies_to(self, installment_number: int, remaining_installments: int) -> bool:
        """Whether this payment is due together with the given installment."""
        if self.type is ExtraPaymentType.ONE_TIME:
            return installment_number == self.start_month
        end_month = self.end_month if self.end_month is not None else remaining_installments
        return self.start_month <= installment_number <= end_month


@dataclass(frozen=True)
class ScenarioSummary:
    total_paid: Decimal
    total_interest: Decimal
    total_amortization: Decimal
    final_installment_number: int
    estimated_end_date: date


@dataclass(frozen=True)
class AmortizationScenario:
    name: str
    installments: list[CalculatedInstallment]
    summary: ScenarioSummary


@dataclass(frozen=True)
class ScenarioComparison:
    interest_saved: Decimal
    months_reduced: int
    total_saved: Decimal
    roi_percentage: Decimal  # interest saved per unit of extra paid, percent


@dataclass(frozen=True)
class AmortizationSimulation:
    scenarios: list[AmortizationScenario]
    comparison: ScenarioComparison | None = None

    def scenario(self, name: str) -> AmortizationScenario | None:
        return next((s for s in self.scenarios if s.name == name), None)


@dataclass(frozen=True)
class ExtraPaymentResult:
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


@dataclass(frozen=True)
class EarlyPayoffResult:
    current_balance: Decimal
    remaining_installments: int
    total_remaining_payments: Decimal
    total_interest_remaining: Decimal
    payoff_amount: Decimal
    total_savings: Decimal


# ---- Contract-level models ----

class MortgageStatus(Enum):
    ACTIVE = "ATIVO"
    PAID_OFF = "QUITADO"
    CANCELLED = "CANCELADO"


class InstallmentStatus(Enum):
    PENDING = "PENDENTE"
    PAID = "PAGA"
    PARTIAL = "PARCIAL"  # paid below the installment total


@dataclass(frozen=True)
class MortgageContract:
    """A financing contract as tracked by the application.

    The engine never loads or stores contracts; callers build one from
    whatever they persist and pass it in.
    """
    contract_number: str
    institution_name: str
    financed_amount: Decimal
    property_value: Decimal
    total_installments: int
    base_annual_rate: Decimal
    amortization_system: AmortizationSystem
    first_installment_date: date
    paid_installments: int = 0
    reduced_annual_rate: Decimal | None = None  # e.g. payroll-linked discount
    is_reduced_rate_active: bool = False
    mip_rate: Decimal = Decimal("0")
    dfi_rate: Decimal = Decimal("0")
    admin_fee: Decimal = Decimal("0")
    current_balance: Decimal | None = None
    next_installment: CalculatedInstallment | None = None
    status: MortgageStatus = MortgageStatus.ACTIVE
    rate_index: RateIndex = RateIndex.TR

    @property
    def effective_annual_rate(self) -> Decimal:
        if self.is_reduced_rate_active and self.reduced_annual_rate is not None:
            return self.reduced_annual_rate
        return self.base_annual_rate

    @property
    def outstanding_balance(self) -> Decimal:
        # Unset means nothing has been amortized yet
        if self.current_balance is None:
            return self.financed_amount
        return self.current_balance

    @property
    def remaining_installments(self) -> int:
        return max(0, self.total_installments - self.paid_installments)

    @property
    def progress_percentage(self) -> Decimal:
        if self.total_installments <= 0:
            return Decimal("0")
        pct = Decimal(self.paid_installments) / Decimal(self.total_installments) * 100
        return pct.quantize(Decimal("0.01"), ROUND_HALF_UP)


@dataclass(frozen=True)
class ExtraPaymentRecord:
    """An extraordinary payment applied to a contract, with its before/after state."""
    payment_date: date
    amount: Decimal
    payment_type: ExtraPaymentPolicy
    balance_before: Decimal
    balance_after: Decimal
    remaining_installments_before: int
    remaining_installments_after: int
    installment_value_before: Decimal
    installment_value_after: Decimal
    interest_saved: Decimal
    months_reduced: int
    notes: str | None = None


@dataclass(frozen=True)
class PaidInstallment:
    """A scheduled installment together with how it was actually paid."""
    installment: CalculatedInstallment
    status: InstallmentStatus
    paid_amount: Decimal
    payment_date: date
    notes: str | None = None


@dataclass(frozen=True)
class PaymentProgress:
    paid_installments: int
    remaining_installments: int
    progress_percentage: Decimal
    total_paid: Decimal
    total_interest_paid: Decimal
    total_amortization_paid: Decimal


@dataclass(frozen=True)
class YearlyInstallmentSummary:
    year: int
    installments: int
    amortization: Decimal
    interest: Decimal
    insurance: Decimal
    admin_fee: Decimal
    total_paid: Decimal
    ending_balance: Decimal


@dataclass
class AnnualMortgageReport:
    year: int
    contract_number: str
    institution_name: str
    balance_start_of_year: Decimal
    balance_end_of_year: Decimal
    total_paid: Decimal = Decimal("0")
    total_amortization: Decimal = Decimal("0")
    total_interest: Decimal = Decimal("0")
    total_insurance: Decimal = Decimal("0")
    total_admin_fee: Decimal = Decimal("0")
    extra_payments_total: Decimal = Decimal("0")
    installments: list[PaidInstallment] = field(default_factory=list)
    extra_payments: list[ExtraPaymentRecord] = field(default_factory=list)


@dataclass(frozen=True)
class PortfolioSummary:
    total_mortgages: int
    active_mortgages: int
    total_financed: Decimal
    total_current_balance: Decimal
    total_paid: Decimal
    overall_progress: Decimal
