"""
Tests for loan, annuity and scenario calculations.
"""

import pytest
from datetime import date
from calccore.calculations.amortization import (
    LoanParameters,
    fixed_payment,
    periodic_rate,
    calculate_remaining_balance,
    generate_amortization_schedule,
    calculate_total_interest,
    adjustable_loan_comparison,
)
from calccore.calculations.annuity import (
    AnnuityParameters,
    payment_for_present_value,
    payment_for_future_value,
    solve_annuity_payment,
)
from calccore.calculations.scenarios import (
    Scenario,
    ScenarioParameters,
    annual_cash_flow,
    calculate_npv,
    run_scenarios,
    viability_label,
)


class TestFixedPayment:
    """Test fixed-rate payment calculation."""

    def test_thirty_year_mortgage(self):
        """$100k at 5% APR over 30 years."""
        payment = fixed_payment(100000, 0.05 / 12, 360)
        assert payment == pytest.approx(536.82, abs=0.01)

    @pytest.mark.parametrize(
        "principal,rate,periods",
        [
            (100000, 0.05 / 12, 360),
            (2500, 0.01, 1),
            (750000, 0.0725 / 12, 180),
            (1, 0.2, 40),
        ],
    )
    def test_payment_inverts_to_principal(self, principal, rate, periods):
        """Discounting the payment stream recovers the principal."""
        payment = fixed_payment(principal, rate, periods)
        annuity_factor = (1 - (1 + rate) ** -periods) / rate
        assert payment * annuity_factor == pytest.approx(principal, rel=1e-6)

    def test_zero_rate(self):
        """Zero rate degrades to straight-line repayment."""
        assert fixed_payment(12000, 0, 24) == 500

    def test_negative_rate_is_accepted(self):
        """Negative rates shrink the payment below straight-line."""
        payment = fixed_payment(12000, -0.001, 24)
        assert payment is not None
        assert payment < 500

    def test_missing_inputs(self):
        """Missing principal or zero periods returns no result."""
        assert fixed_payment(None, 0.01, 12) is None
        assert fixed_payment(1000, 0.01, None) is None
        assert fixed_payment(1000, 0.01, 0) is None

    def test_rate_at_or_below_minus_100_percent(self):
        assert fixed_payment(1000, -1, 12) is None
        assert fixed_payment(1000, -1.5, 12) is None

    def test_rate_too_small_to_change_one(self):
        """A rate lost in 1 + r still gives the straight-line payment."""
        assert fixed_payment(1000, 1e-17, 12) == pytest.approx(1000 / 12)

    def test_periodic_rate(self):
        assert periodic_rate(6) == pytest.approx(0.005)
        assert periodic_rate(6, 4) == pytest.approx(0.015)


class TestAmortizationSchedule:
    """Test loan amortization schedules."""

    def test_schedule_length(self):
        schedule = generate_amortization_schedule(100000, 0.06 / 12, 60)
        assert len(schedule) == 60

    def test_final_balance(self):
        """Final balance is zero."""
        schedule = generate_amortization_schedule(100000, 0.06 / 12, 60)
        assert schedule[-1]["ending_balance"] == 0

    def test_interest_plus_principal(self):
        """Principal repaid across the schedule equals the loan."""
        schedule = generate_amortization_schedule(100000, 0.06 / 12, 60)
        assert sum(row["principal"] for row in schedule) == pytest.approx(100000, abs=1)

    def test_total_interest(self):
        schedule = generate_amortization_schedule(100000, 0.06 / 12, 60)
        payment = fixed_payment(100000, 0.06 / 12, 60)
        assert calculate_total_interest(schedule) == pytest.approx(
            payment * 60 - 100000, abs=1
        )

    def test_schedule_dates(self):
        """Rows carry monthly dates only when a start date is given."""
        dated = generate_amortization_schedule(1000, 0.01, 3, start_date=date(2025, 1, 31))
        assert [row["date"] for row in dated] == ["2025-01-31", "2025-02-28", "2025-03-31"]

        undated = generate_amortization_schedule(1000, 0.01, 3)
        assert "date" not in undated[0]

    def test_max_rows(self):
        schedule = generate_amortization_schedule(100000, 0.05 / 12, 360, max_rows=12)
        assert len(schedule) == 12

    def test_invalid_periods(self):
        assert generate_amortization_schedule(1000, 0.01, 0) == []

    def test_remaining_balance_matches_schedule(self):
        schedule = generate_amortization_schedule(100000, 0.06 / 12, 60)
        balance = calculate_remaining_balance(100000, 0.06 / 12, 60, 24)
        assert balance == pytest.approx(schedule[23]["ending_balance"], abs=0.05)

    def test_remaining_balance_zero_rate(self):
        assert calculate_remaining_balance(1200, 0, 12, 6) == pytest.approx(600)

    def test_remaining_balance_tiny_rate(self):
        assert calculate_remaining_balance(1200, 1e-17, 12, 6) == pytest.approx(600)


class TestAdjustableLoan:
    """Test adjustable-rate loan comparison."""

    def test_payment_range(self):
        result = adjustable_loan_comparison(
            LoanParameters(principal=400000, annual_rate=4, term_periods=360, rate_cap=5)
        )
        assert result.initial_payment == pytest.approx(fixed_payment(400000, 0.04 / 12, 360))
        assert result.max_payment == pytest.approx(fixed_payment(400000, 0.09 / 12, 360))
        assert result.max_rate == 9
        assert result.max_payment > result.initial_payment
        assert result.total_interest_estimate > 0

    def test_max_rate_capped_at_100(self):
        result = adjustable_loan_comparison(
            LoanParameters(principal=1000, annual_rate=90, term_periods=12, rate_cap=50)
        )
        assert result.max_rate == 100

    def test_no_cap(self):
        """Without a cap the maximum payment equals the initial payment."""
        result = adjustable_loan_comparison(
            LoanParameters(principal=200000, annual_rate=5, term_periods=180)
        )
        assert result.max_payment == pytest.approx(result.initial_payment)

    def test_zero_rate_no_interest(self):
        result = adjustable_loan_comparison(
            LoanParameters(principal=12000, annual_rate=0, term_periods=12)
        )
        assert result.initial_payment == 1000
        assert result.total_interest_estimate == 0

    def test_rising_rate_leaves_balance(self):
        """A rising rate leaves the initial payment short, so interest exceeds the initial total."""
        result = adjustable_loan_comparison(
            LoanParameters(principal=100000, annual_rate=4, term_periods=360, rate_cap=2)
        )
        initial_total = result.initial_payment * 360 - 100000
        assert result.total_interest_estimate > initial_total
        assert result.remaining_balance > 0

    def test_falling_rate_pays_off_early(self):
        """A negative cap lowers the averaged rate, so the initial payment retires the loan."""
        result = adjustable_loan_comparison(
            LoanParameters(principal=100000, annual_rate=6, term_periods=360, rate_cap=-2)
        )
        assert result.max_rate == 4
        assert result.max_payment < result.initial_payment
        assert result.remaining_balance == 0
        assert result.total_interest_estimate < result.initial_payment * 360 - 100000

    def test_rate_at_or_below_minus_100_percent(self):
        result = adjustable_loan_comparison(
            LoanParameters(principal=1000, annual_rate=-1200, term_periods=12)
        )
        assert result is None

    @pytest.mark.parametrize(
        "params",
        [
            LoanParameters(principal=None, annual_rate=4, term_periods=360),
            LoanParameters(principal=1000, annual_rate=None, term_periods=360),
            LoanParameters(principal=1000, annual_rate=4, term_periods=None),
            LoanParameters(principal=1000, annual_rate=4, term_periods=0),
        ],
    )
    def test_incomplete_terms(self, params):
        assert adjustable_loan_comparison(params) is None


class TestAnnuity:
    """Test annuity payment solving."""

    def test_present_value_payment(self):
        payment = payment_for_present_value(100000, 0.05 / 12, 360)
        assert payment == pytest.approx(fixed_payment(100000, 0.05 / 12, 360))

    def test_future_value_payment(self):
        """Contributions compounded forward reach the target."""
        rate = 0.06 / 12
        payment = payment_for_future_value(50000, rate, 120)
        accumulated = payment * ((1 + rate) ** 120 - 1) / rate
        assert accumulated == pytest.approx(50000, rel=1e-9)

    def test_zero_rate(self):
        assert payment_for_present_value(1200, 0, 12) == 100
        assert payment_for_future_value(1200, 0, 12) == 100

    def test_less_than_one_period(self):
        assert payment_for_present_value(1000, 0.01, 0) is None
        assert payment_for_future_value(1000, 0.01, 0) is None

    def test_rate_at_or_below_minus_100_percent(self):
        assert payment_for_present_value(1000, -1, 12) is None
        assert payment_for_future_value(1000, -1, 12) is None
        assert solve_annuity_payment(
            AnnuityParameters(target_value=1000, annual_rate=-100, years=5)
        ) is None

    def test_rate_too_small_to_change_one(self):
        assert payment_for_present_value(1000, 1e-17, 12) == pytest.approx(1000 / 12)
        assert payment_for_future_value(1000, 1e-17, 12) == pytest.approx(1000 / 12)

    def test_solve_present_value_monthly(self):
        result = solve_annuity_payment(
            AnnuityParameters(target_value=100000, annual_rate=5, years=30, compounding="monthly")
        )
        assert result.total_periods == 360
        assert result.payment == pytest.approx(536.82, abs=0.01)
        assert result.total_interest == pytest.approx(result.total_payments - 100000)

    def test_annuity_due(self):
        """Payments at period start are smaller for the same target."""
        ordinary = solve_annuity_payment(
            AnnuityParameters(target_value=10000, annual_rate=6, years=5)
        )
        due = solve_annuity_payment(
            AnnuityParameters(target_value=10000, annual_rate=6, years=5, annuity_due=True)
        )
        assert due.payment == pytest.approx(ordinary.payment / 1.06)

        fv_ordinary = solve_annuity_payment(
            AnnuityParameters(target_value=10000, annual_rate=6, years=5, target="future")
        )
        fv_due = solve_annuity_payment(
            AnnuityParameters(
                target_value=10000, annual_rate=6, years=5, target="future", annuity_due=True
            )
        )
        assert fv_due.payment == pytest.approx(fv_ordinary.payment * 1.06)

    def test_future_value_growth_reported(self):
        result = solve_annuity_payment(
            AnnuityParameters(target_value=10000, annual_rate=6, years=5, target="future")
        )
        assert result.total_interest > 0
        assert result.total_payments + result.total_interest == pytest.approx(10000)

    def test_unknown_target(self):
        with pytest.raises(ValueError):
            solve_annuity_payment(
                AnnuityParameters(target_value=1000, annual_rate=5, years=1, target="both")
            )

    def test_unknown_compounding(self):
        with pytest.raises(ValueError):
            solve_annuity_payment(
                AnnuityParameters(target_value=1000, annual_rate=5, years=1, compounding="hourly")
            )

    def test_short_term_no_result(self):
        assert solve_annuity_payment(
            AnnuityParameters(target_value=1000, annual_rate=5, years=0.25)
        ) is None


class TestScenarios:
    """Test scenario NPV analysis."""

    def test_annual_cash_flow(self):
        scenario = Scenario(name="Base", units=1000, price=50, variable_cost=20, fixed_cost=5000)
        assert annual_cash_flow(scenario) == 25000

    def test_incomplete_cash_flow(self):
        assert annual_cash_flow(Scenario(name="Base", units=1000, price=50)) is None

    def test_zero_is_not_missing(self):
        """Explicit zeros are valid inputs, not gaps."""
        scenario = Scenario(name="Idle", units=0, price=50, variable_cost=20, fixed_cost=0)
        assert annual_cash_flow(scenario) == 0

    def test_npv(self):
        npv = calculate_npv(30000, 0.10, 100000, 5)
        assert npv == pytest.approx(13723.60, abs=0.01)

    def test_npv_zero_rate(self):
        assert calculate_npv(30000, 0, 100000, 5) == 50000

    def test_npv_rate_at_or_below_minus_100_percent(self):
        assert calculate_npv(30000, -1, 100000, 5) is None
        assert calculate_npv(30000, -2, 100000, 5) is None

    def test_viability_label(self):
        assert viability_label(-0.01) == "Not Viable"
        assert viability_label(0) == "Viable"
        assert viability_label(1) == "Viable"

    def test_run_scenarios(self):
        analysis = run_scenarios(
            ScenarioParameters(
                initial_investment=100000,
                discount_rate=10,
                periods=5,
                scenarios=[
                    Scenario(name="Worst Case", units=500, price=50, variable_cost=30, fixed_cost=5000),
                    Scenario(name="Base Case", units=1000, price=50, variable_cost=20, fixed_cost=0),
                    Scenario(name="Best Case", units=1500, price=55, variable_cost=20, fixed_cost=0),
                ],
            )
        )
        names = [r.name for r in analysis.results]
        assert names == ["Worst Case", "Base Case", "Best Case"]
        assert analysis.results[0].label == "Not Viable"
        assert analysis.results[1].npv == pytest.approx(13723.60, abs=0.01)
        assert analysis.results[1].label == "Viable"
        assert analysis.skipped == []
        assert not analysis.all_not_viable

    def test_incomplete_scenario_skipped(self):
        """A scenario with missing fields is skipped, never reported as NPV 0."""
        analysis = run_scenarios(
            ScenarioParameters(
                initial_investment=100000,
                discount_rate=10,
                periods=5,
                scenarios=[
                    Scenario(name="Worst Case", units=100, price=10, variable_cost=5, fixed_cost=0),
                    Scenario(name="Base Case", units=1000, price=50),
                ],
            )
        )
        assert [r.name for r in analysis.results] == ["Worst Case"]
        assert analysis.skipped == ["Base Case"]
        assert analysis.all_not_viable

    def test_discount_rate_at_minus_100_percent_skips_all(self):
        analysis = run_scenarios(
            ScenarioParameters(
                initial_investment=100000,
                discount_rate=-100,
                periods=5,
                scenarios=[
                    Scenario(name="Base Case", units=1000, price=50, variable_cost=20, fixed_cost=0),
                ],
            )
        )
        assert analysis.results == []
        assert analysis.skipped == ["Base Case"]
        assert not analysis.all_not_viable

    def test_no_scenarios(self):
        analysis = run_scenarios(
            ScenarioParameters(initial_investment=1000, discount_rate=5, periods=3)
        )
        assert analysis.results == []
        assert not analysis.all_not_viable
