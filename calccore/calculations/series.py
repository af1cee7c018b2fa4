"""
Time Series Statistics

Maximum drawdown over a value path, tracking difference/error between a fund
and its benchmark, and weighted-average portfolio return. Also parses the
pasted series text the calculators accept.
"""

import logging
import math
import re
from typing import List, Optional, Sequence
from dataclasses import dataclass

import numpy as np

logger = logging.getLogger(__name__)

PERIODS_PER_YEAR = {
    "daily": 252,
    "monthly": 12,
    "annual": 1,
}

DEFAULT_PERCENT_THRESHOLD = 2.0
FULL_ALLOCATION = 100.0
ALLOCATION_TOLERANCE = 0.01

_SEPARATORS = re.compile(r"[,\s]+")


@dataclass
class DrawdownResult:
    """Largest peak-to-trough decline and where it happened."""

    max_drawdown: float  # Fraction (0.1818 = 18.18%)
    peak_value: float
    peak_index: int
    trough_value: float
    trough_index: int

    @property
    def max_drawdown_pct(self) -> float:
        return self.max_drawdown * 100


@dataclass
class TrackingStatistics:
    """Mean and volatility of fund-minus-benchmark returns."""

    mean_diff: float
    std_diff: float
    annualized_mean_diff: float
    annualized_std_diff: float
    periods: int


@dataclass
class WeightedItem:
    """Portfolio holding with weight (0-100) and return (percent)."""

    weight: Optional[float] = None
    return_pct: Optional[float] = None


@dataclass
class WeightedReturnResult:
    """Weighted return plus the weight actually supplied."""

    weighted_return: float
    total_weight: float
    item_count: int

    @property
    def is_fully_allocated(self) -> bool:
        return abs(self.total_weight - FULL_ALLOCATION) < ALLOCATION_TOLERANCE


def _tokens(text: str) -> List[str]:
    return [t for t in _SEPARATORS.split(text or "") if t]


def parse_value_series(text: str) -> List[float]:
    """
    Parse portfolio values separated by commas, whitespace or newlines.

    Dollar signs are ignored. Every value must be a positive number.

    Raises:
        ValueError: Any token is not a positive finite number
    """
    values = []
    for token in _tokens(text):
        try:
            value = float(token.replace("$", ""))
        except ValueError:
            raise ValueError(f"Invalid portfolio value: {token!r}")
        if not math.isfinite(value) or value <= 0:
            raise ValueError(f"Portfolio values must be positive: {token!r}")
        values.append(value)
    return values


def parse_return_series(
    text: str,
    unit: str = "auto",
    percent_threshold: float = DEFAULT_PERCENT_THRESHOLD,
) -> List[float]:
    """
    Parse periodic returns into decimal fractions.

    unit="auto" applies a heuristic: any value whose magnitude exceeds
    ``percent_threshold`` is assumed to be a percentage and divided by 100.
    A genuine fractional return above 200% is therefore misread; pass
    unit="fraction" or unit="percent" when the unit is known.

    Raises:
        ValueError: Unknown unit, or any token is not a finite number
    """
    if unit not in ("auto", "percent", "fraction"):
        raise ValueError(f"Unknown return unit: {unit}")

    returns = []
    for token in _tokens(text):
        try:
            value = float(token.replace("%", ""))
        except ValueError:
            raise ValueError(f"Invalid return value: {token!r}")
        if not math.isfinite(value):
            raise ValueError(f"Invalid return value: {token!r}")

        if unit == "percent":
            value = value / 100
        elif unit == "auto" and abs(value) > percent_threshold:
            logger.debug("Treating %s as a percentage", token)
            value = value / 100
        returns.append(value)
    return returns


def maximum_drawdown(values: Sequence[float]) -> Optional[DrawdownResult]:
    """
    Find the largest peak-to-trough decline in a value path.

    Single forward pass with a running peak. The reported peak is the one in
    force when the worst trough was hit, so a later new high does not alter a
    drawdown that has already closed.

    Args:
        values: Positive portfolio values in time order

    Returns:
        DrawdownResult, or None for fewer than two points or non-positive values
    """
    if len(values) < 2 or any(v <= 0 for v in values):
        logger.debug("Drawdown skipped: need at least two positive values")
        return None

    peak = values[0]
    peak_idx = 0
    result = DrawdownResult(
        max_drawdown=0.0,
        peak_value=values[0],
        peak_index=0,
        trough_value=values[0],
        trough_index=0,
    )

    for i in range(1, len(values)):
        if values[i] > peak:
            peak = values[i]
            peak_idx = i
        drawdown = (peak - values[i]) / peak
        if drawdown > result.max_drawdown:
            result = DrawdownResult(
                max_drawdown=drawdown,
                peak_value=peak,
                peak_index=peak_idx,
                trough_value=values[i],
                trough_index=i,
            )

    return result


def tracking_statistics(
    fund: Sequence[float],
    benchmark: Sequence[float],
    frequency: str = "monthly",
    min_periods: int = 3,
) -> Optional[TrackingStatistics]:
    """
    Calculate tracking difference and tracking error.

    Uses the sample standard deviation (n - 1 denominator). Annualization
    multiplies the mean by the periods per year and the standard deviation by
    its square root.

    Args:
        fund: Periodic fund returns as decimals
        benchmark: Periodic benchmark returns as decimals, same length
        frequency: 'daily', 'monthly' or 'annual'
        min_periods: Minimum number of paired observations (at least 2)

    Returns:
        TrackingStatistics, or None for mismatched or too-short series

    Raises:
        ValueError: Unknown frequency
    """
    if frequency not in PERIODS_PER_YEAR:
        raise ValueError(f"Unknown return frequency: {frequency}")

    n = len(fund)
    if n != len(benchmark) or n < max(2, min_periods):
        logger.debug(
            "Tracking statistics skipped: %s fund vs %s benchmark periods",
            n,
            len(benchmark),
        )
        return None

    diffs = np.asarray(fund, dtype=float) - np.asarray(benchmark, dtype=float)
    mean = float(np.mean(diffs))
    std = float(np.std(diffs, ddof=1))
    per_year = PERIODS_PER_YEAR[frequency]

    return TrackingStatistics(
        mean_diff=mean,
        std_diff=std,
        annualized_mean_diff=mean * per_year,
        annualized_std_diff=std * math.sqrt(per_year),
        periods=n,
    )


def tracking_error(
    portfolio: Sequence[float], benchmark: Sequence[float]
) -> Optional[float]:
    """Sample standard deviation of active returns, in the units supplied."""
    stats = tracking_statistics(portfolio, benchmark, frequency="annual")
    if stats is None:
        return None
    return stats.std_diff


def weighted_average_return(items: Sequence[WeightedItem]) -> Optional[WeightedReturnResult]:
    """
    Calculate the weight-averaged return of a portfolio.

    Items missing a weight or a return are ignored. Weights are not
    renormalized; ``total_weight`` reports what was supplied so callers can
    flag an allocation that does not sum to 100.
    """
    usable = [
        item for item in items
        if item.weight is not None and item.return_pct is not None
    ]
    if not usable:
        return None

    weighted_return = sum((item.weight / 100) * item.return_pct for item in usable)
    total_weight = sum(item.weight for item in usable)

    return WeightedReturnResult(
        weighted_return=weighted_return,
        total_weight=total_weight,
        item_count=len(usable),
    )
