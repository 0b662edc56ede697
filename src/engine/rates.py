"""Interest rate conversion between effective annual and monthly rates.

Pure functions. Annual rates are percentages (10 = 10% a.a.), monthly rates
are fractions (0.00797 = 0.797% a.m.), matching how contracts quote them.
"""

from decimal import Decimal

from src.models.mortgage import InvalidMortgageConfiguration

ONE_TWELFTH = Decimal(1) / Decimal(12)


def annual_to_monthly_rate(annual_rate_percent: Decimal) -> Decimal:
    """Equivalent monthly rate: (1 + annual/100)^(1/12) - 1."""
    base = 1 + Decimal(annual_rate_percent) / 100
    if base < 0:
        raise InvalidMortgageConfiguration(
            f"Annual rate below -100% has no real monthly equivalent: {annual_rate_percent}"
        )
    return base ** ONE_TWELFTH - 1


def monthly_to_annual_rate(monthly_rate: Decimal) -> Decimal:
    """Equivalent annual percentage: ((1 + monthly)^12 - 1) * 100."""
    return ((1 + Decimal(monthly_rate)) ** 12 - 1) * 100
