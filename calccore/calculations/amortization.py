"""
Loan Amortization Calculations

Implements fixed-rate loan payments, amortization schedules and the
adjustable-rate comparison used by the loan calculators.
"""

import logging
import math
from typing import List, Dict, Optional
from datetime import date
from dataclasses import dataclass
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

MAX_ANNUAL_RATE = 100.0


@dataclass
class LoanParameters:
    """Loan terms for the adjustable-rate comparison."""

    principal: Optional[float]
    annual_rate: Optional[float]  # Initial annual rate in percent (e.g., 4 for 4%)
    term_periods: Optional[int]
    rate_cap: Optional[float] = None  # Lifetime cap in percentage points
    adjustment_frequency: Optional[int] = None  # Periods between adjustments
    periods_per_year: int = 12


@dataclass
class AdjustableLoanResult:
    """Payment range and interest estimate for an adjustable-rate loan."""

    initial_payment: float
    max_payment: float
    total_interest_estimate: float
    max_rate: float  # Annual percent
    remaining_balance: float  # Left after the term at the averaged rate


def periodic_rate(annual_rate_pct: float, periods_per_year: int = 12) -> float:
    """Convert an annual percentage rate to a periodic decimal rate."""
    return annual_rate_pct / 100 / periods_per_year


def fixed_payment(
    principal: Optional[float], rate: float, periods: Optional[int]
) -> Optional[float]:
    """
    Calculate the level payment that retires a loan.

    Matches Excel's PMT() function (sign flipped to positive).

    Args:
        principal: Loan principal amount
        rate: Periodic interest rate as decimal (e.g., 0.05 / 12)
        periods: Number of payment periods

    Returns:
        Payment per period, or None if principal or periods is missing or
        the rate is -100% or lower
    """
    if principal is None or periods is None or periods <= 0:
        return None
    if 1 + rate <= 0:
        return None

    # (1 + r)^n - 1 without cancellation for small r
    growth_less_one = math.expm1(periods * math.log1p(rate))
    if growth_less_one == 0:
        return principal / periods

    return principal * rate * (1 + growth_less_one) / growth_less_one


def calculate_remaining_balance(
    principal: float,
    rate: float,
    periods: int,
    payments_completed: int,
) -> float:
    """Calculate remaining loan balance after N payments."""
    payment = fixed_payment(principal, rate, periods)
    if payment is None:
        return 0.0

    if rate == 0:
        return max(0.0, principal - payment * payments_completed)

    growth_less_one = math.expm1(payments_completed * math.log1p(rate))
    balance = principal * (1 + growth_less_one) - payment * growth_less_one / rate

    return max(0.0, balance)


def generate_amortization_schedule(
    principal: float,
    rate: float,
    periods: int,
    start_date: Optional[date] = None,
    max_rows: Optional[int] = None,
) -> List[Dict]:
    """
    Generate a full amortization schedule.

    Args:
        principal: Loan principal amount
        rate: Periodic interest rate as decimal
        periods: Number of payment periods
        start_date: Date of first payment; rows carry no date when omitted
        max_rows: Truncate the schedule after this many rows

    Returns:
        List of amortization rows
    """
    payment = fixed_payment(principal, rate, periods)
    if payment is None:
        return []

    schedule = []
    balance = principal
    last_period = periods if max_rows is None else min(periods, max_rows)

    for period in range(1, last_period + 1):
        interest = balance * rate
        principal_pmt = min(payment - interest, balance)

        # Final period absorbs rounding drift
        if period == periods:
            principal_pmt = balance

        ending_balance = balance - principal_pmt

        row = {
            "period": period,
            "beginning_balance": round(balance, 2),
            "payment": round(principal_pmt + interest, 2),
            "interest": round(interest, 2),
            "principal": round(principal_pmt, 2),
            "ending_balance": round(max(0, ending_balance), 2),
        }
        if start_date is not None:
            row["date"] = (start_date + relativedelta(months=period - 1)).isoformat()
        schedule.append(row)

        balance = max(0.0, ending_balance)

        if balance == 0:
            break

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row["interest"] for row in schedule)


def adjustable_loan_comparison(params: LoanParameters) -> Optional[AdjustableLoanResult]:
    """
    Compare initial and worst-case payments for an adjustable-rate loan.

    Total interest is an estimate: the loan is amortized at the average of the
    initial and capped periodic rates instead of a real rate path. Each period
    pays the lesser of the scheduled (initial) payment and the full balance
    with interest, so the balance never goes negative.

    Args:
        params: Loan terms with the initial rate and optional cap

    Returns:
        AdjustableLoanResult, or None if principal, rate or term is missing
    """
    if (
        params.principal is None
        or params.annual_rate is None
        or params.term_periods is None
        or params.term_periods == 0
    ):
        logger.debug("Adjustable loan comparison skipped: incomplete loan terms")
        return None

    periods = params.term_periods
    initial_rate = periodic_rate(params.annual_rate, params.periods_per_year)
    max_annual_rate = min(params.annual_rate + (params.rate_cap or 0), MAX_ANNUAL_RATE)
    max_rate = periodic_rate(max_annual_rate, params.periods_per_year)

    initial_payment = fixed_payment(params.principal, initial_rate, periods)
    max_payment = fixed_payment(params.principal, max_rate, periods)
    if initial_payment is None or max_payment is None:
        logger.debug("Adjustable loan comparison skipped: rate at or below -100%")
        return None

    avg_rate = (initial_rate + max_rate) / 2
    balance = params.principal
    total_interest = 0.0

    for _ in range(periods):
        payment = min(balance * (1 + avg_rate), initial_payment)
        total_interest += balance * avg_rate
        balance = max(0.0, balance * (1 + avg_rate) - payment)

    return AdjustableLoanResult(
        initial_payment=initial_payment,
        max_payment=max_payment,
        total_interest_estimate=total_interest,
        max_rate=max_annual_rate,
        remaining_balance=balance,
    )
