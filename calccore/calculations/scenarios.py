"""
Scenario NPV Calculations

Evaluates worst/base/best (or any number of) operating scenarios against a
shared initial investment, discount rate and project life.
"""

import logging
from typing import List, Optional
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

VIABLE = "Viable"
NOT_VIABLE = "Not Viable"


@dataclass
class Scenario:
    """One operating scenario. Any missing field makes it incomplete."""

    name: str
    units: Optional[float] = None
    price: Optional[float] = None
    variable_cost: Optional[float] = None
    fixed_cost: Optional[float] = None

    @property
    def is_complete(self) -> bool:
        return None not in (self.units, self.price, self.variable_cost, self.fixed_cost)


@dataclass
class ScenarioParameters:
    """Assumptions shared by every scenario."""

    initial_investment: float
    discount_rate: float  # Annual percent (e.g., 10 for 10%)
    periods: int
    scenarios: List[Scenario] = field(default_factory=list)


@dataclass
class ScenarioResult:
    """NPV outcome for a single scenario."""

    name: str
    annual_cash_flow: float
    npv: float
    label: str


@dataclass
class ScenarioAnalysis:
    """Results for computed scenarios plus the names of skipped ones."""

    results: List[ScenarioResult]
    skipped: List[str]

    @property
    def all_not_viable(self) -> bool:
        """True when every computed scenario, best case included, loses value."""
        return bool(self.results) and all(r.npv < 0 for r in self.results)


def annual_cash_flow(scenario: Scenario) -> Optional[float]:
    """Revenue minus variable and fixed costs, or None if incomplete."""
    if not scenario.is_complete:
        return None
    return (
        scenario.price * scenario.units
        - scenario.variable_cost * scenario.units
        - scenario.fixed_cost
    )


def calculate_npv(
    cash_flow: float, discount_rate: float, initial_investment: float, periods: int
) -> Optional[float]:
    """
    Calculate NPV of a level annual cash flow.

    Args:
        cash_flow: Cash flow received at the end of each period
        discount_rate: Periodic discount rate as decimal (e.g., 0.10 for 10%)
        initial_investment: Outflow at time zero (positive number)
        periods: Project life in periods

    Returns:
        NPV value, or None if the discount rate is -100% or lower
    """
    if 1 + discount_rate <= 0:
        return None

    npv = -initial_investment
    for t in range(1, periods + 1):
        npv += cash_flow / ((1 + discount_rate) ** t)
    return npv


def viability_label(npv: float) -> str:
    """Negative NPV is not viable; break-even and above is."""
    return NOT_VIABLE if npv < 0 else VIABLE


def run_scenarios(params: ScenarioParameters) -> ScenarioAnalysis:
    """
    Evaluate each scenario independently.

    Incomplete scenarios produce no result and are reported by name in
    ``skipped`` so they cannot be mistaken for a break-even NPV.
    """
    rate = params.discount_rate / 100
    results = []
    skipped = []

    for scenario in params.scenarios:
        cash_flow = annual_cash_flow(scenario)
        if cash_flow is None:
            logger.debug("Scenario %r skipped: missing inputs", scenario.name)
            skipped.append(scenario.name)
            continue

        npv = calculate_npv(cash_flow, rate, params.initial_investment, params.periods)
        if npv is None:
            logger.debug("Scenario %r skipped: discount rate %s%%", scenario.name, params.discount_rate)
            skipped.append(scenario.name)
            continue

        results.append(
            ScenarioResult(
                name=scenario.name,
                annual_cash_flow=cash_flow,
                npv=npv,
                label=viability_label(npv),
            )
        )

    return ScenarioAnalysis(results=results, skipped=skipped)
