"""
Annuity Payment Calculations

Solves for the level payment that amortizes a present value or accumulates
to a future value. The same two closed forms serve loan payments, retirement
income and required savings contributions.
"""

import logging
import math
from typing import Optional
from dataclasses import dataclass

logger = logging.getLogger(__name__)

COMPOUNDING_PERIODS = {
    "annual": 1,
    "semiannual": 2,
    "quarterly": 4,
    "monthly": 12,
    "weekly": 52,
    "daily": 365,
}

PRESENT_VALUE = "present"
FUTURE_VALUE = "future"


@dataclass
class AnnuityParameters:
    """Target value and terms for an annuity payment solve."""

    target_value: float
    annual_rate: float  # Percent
    years: float
    target: str = PRESENT_VALUE
    compounding: str = "annual"
    annuity_due: bool = False


@dataclass
class AnnuityResult:
    """Solved annuity payment with totals for display."""

    payment: float
    periodic_rate: float
    total_periods: int
    total_payments: float
    total_interest: float


def payment_for_present_value(pv: float, rate: float, periods: int) -> Optional[float]:
    """
    Payment that fully amortizes a present value.

    pmt = pv * r / (1 - (1 + r)^-n), or pv / n when r is zero.
    """
    if periods < 1 or 1 + rate <= 0:
        return None
    # 1 - (1 + r)^-n without cancellation for small r
    discount = -math.expm1(-periods * math.log1p(rate))
    if discount == 0:
        return pv / periods
    return pv * rate / discount


def payment_for_future_value(fv: float, rate: float, periods: int) -> Optional[float]:
    """
    Payment that accumulates to a future value.

    pmt = fv * r / ((1 + r)^n - 1), or fv / n when r is zero.
    """
    if periods < 1 or 1 + rate <= 0:
        return None
    growth_less_one = math.expm1(periods * math.log1p(rate))
    if growth_less_one == 0:
        return fv / periods
    return fv * rate / growth_less_one


def get_compounding_periods(compounding: str) -> int:
    """Look up periods per year for a compounding frequency name."""
    try:
        return COMPOUNDING_PERIODS[compounding]
    except KeyError:
        raise ValueError(f"Unknown compounding frequency: {compounding}")


def solve_annuity_payment(params: AnnuityParameters) -> Optional[AnnuityResult]:
    """
    Solve for the annuity payment matching the caller's target.

    Annuity-due payments occur at the start of each period, so the PV payment
    is discounted one period and the FV payment is compounded one period.

    Args:
        params: Target value, rate, term and compounding

    Returns:
        AnnuityResult, or None if the term covers less than one period or the
        periodic rate is -100% or lower

    Raises:
        ValueError: Unknown target or compounding frequency
    """
    per_year = get_compounding_periods(params.compounding)
    rate = params.annual_rate / 100 / per_year
    total_periods = int(round(params.years * per_year))

    if params.target == PRESENT_VALUE:
        payment = payment_for_present_value(params.target_value, rate, total_periods)
        if payment is not None and params.annuity_due:
            payment = payment / (1 + rate)
    elif params.target == FUTURE_VALUE:
        payment = payment_for_future_value(params.target_value, rate, total_periods)
        if payment is not None and params.annuity_due:
            payment = payment * (1 + rate)
    else:
        raise ValueError(f"Unknown annuity target: {params.target}")

    if payment is None:
        logger.debug("Annuity solve skipped: %s periods", total_periods)
        return None

    total_payments = payment * total_periods
    if params.target == PRESENT_VALUE:
        total_interest = total_payments - params.target_value
    else:
        total_interest = params.target_value - total_payments

    return AnnuityResult(
        payment=payment,
        periodic_rate=rate,
        total_periods=total_periods,
        total_payments=total_payments,
        total_interest=total_interest,
    )
