"""
Calculation API endpoints.

These endpoints accept structured inputs from the calculator forms and return
result records. A null body means the inputs did not produce a result and the
form should render nothing.
"""

from dataclasses import asdict
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field, FiniteFloat, model_validator

from calccore.config import get_settings
from calccore.calculations import amortization, annuity, scenarios, series, band_tables
from calccore.calculations.bands import classify

router = APIRouter()


class PaymentInput(BaseModel):
    """Input for fixed-rate payment calculation."""

    principal: float = Field(gt=0)
    annual_rate: float = Field(gt=-100)  # Percent
    periods: int = Field(gt=0)
    periods_per_year: int = Field(default=12, gt=0)
    include_schedule: bool = False
    start_date: Optional[date] = None


class PaymentResponse(BaseModel):
    """Payment with optional amortization schedule."""

    payment: float
    total_interest: Optional[float] = None
    schedule: Optional[List[dict]] = None


@router.post("/payment", response_model=PaymentResponse)
async def calculate_payment(inputs: PaymentInput):
    """Calculate the level payment for a fixed-rate loan."""
    rate = amortization.periodic_rate(inputs.annual_rate, inputs.periods_per_year)
    payment = amortization.fixed_payment(inputs.principal, rate, inputs.periods)

    if not inputs.include_schedule:
        return PaymentResponse(payment=payment)

    schedule = amortization.generate_amortization_schedule(
        principal=inputs.principal,
        rate=rate,
        periods=inputs.periods,
        start_date=inputs.start_date,
        max_rows=get_settings().schedule_max_rows,
    )
    return PaymentResponse(
        payment=payment,
        total_interest=amortization.calculate_total_interest(schedule),
        schedule=schedule,
    )


class AdjustableLoanInput(BaseModel):
    """Input for adjustable-rate loan comparison."""

    principal: Optional[float] = Field(default=None, gt=0)
    annual_rate: Optional[float] = None
    term_years: Optional[int] = Field(default=None, ge=0)
    rate_cap: Optional[float] = None
    adjustment_frequency: Optional[int] = None


class AdjustableLoanResponse(BaseModel):
    initial_payment: float
    max_payment: float
    total_interest_estimate: float
    max_rate: float
    remaining_balance: float


@router.post("/adjustable-loan", response_model=Optional[AdjustableLoanResponse])
async def calculate_adjustable_loan(inputs: AdjustableLoanInput):
    """Compare initial and capped payments for an adjustable-rate loan."""
    result = amortization.adjustable_loan_comparison(
        amortization.LoanParameters(
            principal=inputs.principal,
            annual_rate=inputs.annual_rate,
            term_periods=inputs.term_years * 12 if inputs.term_years is not None else None,
            rate_cap=inputs.rate_cap,
            adjustment_frequency=inputs.adjustment_frequency,
        )
    )
    return asdict(result) if result else None


class AnnuityInput(BaseModel):
    """Input for annuity payment solve."""

    target_value: float = Field(gt=0)
    annual_rate: float = Field(gt=-100)  # Percent
    years: float = Field(gt=0)
    target: str = annuity.PRESENT_VALUE
    compounding: str = "annual"
    annuity_due: bool = False


class AnnuityResponse(BaseModel):
    payment: float
    periodic_rate: float
    total_periods: int
    total_payments: float
    total_interest: float


@router.post("/annuity", response_model=Optional[AnnuityResponse])
async def calculate_annuity(inputs: AnnuityInput):
    """Solve for the payment matching a present or future value."""
    try:
        result = annuity.solve_annuity_payment(annuity.AnnuityParameters(**inputs.model_dump()))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return asdict(result) if result else None


class ScenarioInput(BaseModel):
    """One scenario; missing fields mark it incomplete."""

    name: str
    units: Optional[float] = None
    price: Optional[float] = None
    variable_cost: Optional[float] = None
    fixed_cost: Optional[float] = None


class ScenarioAnalysisInput(BaseModel):
    """Input for scenario NPV analysis."""

    initial_investment: float = Field(gt=0)
    discount_rate: float = Field(gt=-100)  # Percent
    periods: int = Field(gt=0)
    scenarios: List[ScenarioInput]


class ScenarioResultResponse(BaseModel):
    name: str
    annual_cash_flow: float
    npv: float
    label: str


class ScenarioAnalysisResponse(BaseModel):
    results: List[ScenarioResultResponse]
    skipped: List[str]
    all_not_viable: bool


@router.post("/scenarios", response_model=ScenarioAnalysisResponse)
async def calculate_scenarios(inputs: ScenarioAnalysisInput):
    """Run NPV for each scenario against shared assumptions."""
    analysis = scenarios.run_scenarios(
        scenarios.ScenarioParameters(
            initial_investment=inputs.initial_investment,
            discount_rate=inputs.discount_rate,
            periods=inputs.periods,
            scenarios=[scenarios.Scenario(**s.model_dump()) for s in inputs.scenarios],
        )
    )
    return ScenarioAnalysisResponse(
        results=[asdict(r) for r in analysis.results],
        skipped=analysis.skipped,
        all_not_viable=analysis.all_not_viable,
    )


class DrawdownInput(BaseModel):
    """Portfolio values as a list or as pasted text."""

    values: Optional[List[FiniteFloat]] = None
    text: Optional[str] = None

    @model_validator(mode="after")
    def check_source(self):
        if self.values is None and self.text is None:
            raise ValueError("Provide either values or text")
        return self


class DrawdownResponse(BaseModel):
    max_drawdown: float
    max_drawdown_pct: float
    peak_value: float
    peak_index: int
    trough_value: float
    trough_index: int


@router.post("/drawdown", response_model=Optional[DrawdownResponse])
async def calculate_drawdown(inputs: DrawdownInput):
    """Calculate maximum drawdown of a value path."""
    try:
        values = inputs.values if inputs.values is not None else series.parse_value_series(inputs.text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    result = series.maximum_drawdown(values)
    if result is None:
        return None
    return DrawdownResponse(max_drawdown_pct=result.max_drawdown_pct, **asdict(result))


class TrackingInput(BaseModel):
    """Fund and benchmark returns as lists (decimals) or pasted text."""

    fund: Optional[List[FiniteFloat]] = None
    benchmark: Optional[List[FiniteFloat]] = None
    fund_text: Optional[str] = None
    benchmark_text: Optional[str] = None
    frequency: str = "monthly"
    unit: str = "auto"


class TrackingResponse(BaseModel):
    mean_diff: float
    std_diff: float
    annualized_mean_diff: float
    annualized_std_diff: float
    periods: int
    level: str


@router.post("/tracking", response_model=Optional[TrackingResponse])
async def calculate_tracking(inputs: TrackingInput):
    """Calculate tracking difference and tracking error."""
    settings = get_settings()

    try:
        fund = inputs.fund
        benchmark = inputs.benchmark
        if fund is None and inputs.fund_text is not None:
            fund = series.parse_return_series(
                inputs.fund_text, inputs.unit, settings.percent_detection_threshold
            )
        if benchmark is None and inputs.benchmark_text is not None:
            benchmark = series.parse_return_series(
                inputs.benchmark_text, inputs.unit, settings.percent_detection_threshold
            )
        if fund is None or benchmark is None:
            return None

        stats = series.tracking_statistics(
            fund, benchmark, inputs.frequency, settings.tracking_min_periods
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if stats is None:
        return None

    # Bands are per-period tracking error in percentage points
    level = classify(stats.std_diff * 100, band_tables.TRACKING_ERROR)
    return TrackingResponse(level=level.label, **asdict(stats))


class WeightedItemInput(BaseModel):
    weight: Optional[float] = Field(default=None, ge=0, le=100)
    return_pct: Optional[FiniteFloat] = None


class WeightedReturnInput(BaseModel):
    items: List[WeightedItemInput]


class WeightedReturnResponse(BaseModel):
    weighted_return: float
    total_weight: float
    item_count: int
    is_fully_allocated: bool
    level: str


@router.post("/weighted-return", response_model=Optional[WeightedReturnResponse])
async def calculate_weighted_return(inputs: WeightedReturnInput):
    """Calculate weighted-average portfolio return."""
    result = series.weighted_average_return(
        [series.WeightedItem(**item.model_dump()) for item in inputs.items]
    )
    if result is None:
        return None

    level = classify(result.weighted_return, band_tables.EXPECTED_RETURN)
    return WeightedReturnResponse(
        is_fully_allocated=result.is_fully_allocated,
        level=level.label,
        **asdict(result),
    )


class ClassifyInput(BaseModel):
    value: FiniteFloat


class ClassificationResponse(BaseModel):
    label: str
    color_tag: str
    interpretation: str
    recommendations: List[str]
    rank: int


class BloodPressureInput(BaseModel):
    systolic: float = Field(gt=0)
    diastolic: float = Field(gt=0)


@router.post("/classify/blood-pressure", response_model=ClassificationResponse)
async def classify_blood_pressure(inputs: BloodPressureInput):
    """Hypertension stage from a systolic/diastolic reading."""
    return asdict(band_tables.hypertension_stage(inputs.systolic, inputs.diastolic))


@router.post("/classify/{table_name}", response_model=ClassificationResponse)
async def classify_value(table_name: str, inputs: ClassifyInput):
    """Classify a value against a named band table."""
    try:
        table = band_tables.get_table(table_name)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))

    try:
        return asdict(classify(inputs.value, table))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
