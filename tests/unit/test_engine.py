"""Unit tests for the full rate calculation pipeline.

Covers the reference scenarios:
A. Typical employee (Single plan, 1592 billable hours)
B. Non-billable time meets or exceeds 2080 hours
C. Manual health insurance entry
plus the invariants that must hold for any input set.
"""

import pytest

from ratecalc.sdk import (
    OVER_ALLOCATED_WARNING,
    RateInputs,
    build_inputs,
    calculate,
    calculate_cached,
    clear_cache,
    select_plan,
)


SCENARIO_A = {
    "annual_salary": 100000,
    "annual_vacation_bonus": 2000,
    "health_insurance_plan": "single",
    "k401_contribution_percent": 10,
    "employer_tax_percent": 8.5,
    "pto_hours": 240,
    "training_hours": 40,
    "holiday_hours": 0,
    "overhead_time_percent": 10,
    "company_overhead_percent": 10,
    "reserve_contribution_per_hour": 15,
}


PROPERTY_CASES = [
    SCENARIO_A,
    {},
    {"annual_salary": 55000, "health_insurance_plan": "family", "pto_hours": 80},
    {"annual_salary": 250000, "health_insurance_plan": "other",
     "health_insurance_manual_amount": 12345.67, "overhead_time_percent": 37.5,
     "reserve_contribution_per_hour": 42.1, "employer_tax_percent": 7.65},
    {"annual_salary": 80000, "pto_hours": 1500, "training_hours": 600},
    {"annual_salary": "", "pto_hours": "abc", "reserve_contribution_per_hour": None},
    {"annual_salary": 90000, "overhead_time_percent": 100},
]


class TestScenarioA:
    """Typical employee on the Single plan."""

    @pytest.fixture
    def result(self):
        return calculate(SCENARIO_A)

    def test_billable_hours(self, result):
        """2080 - (240 + 40 + 0 + 208) = 1592."""
        assert result.capacity.overhead_hours == pytest.approx(208)
        assert result.billable_hours == pytest.approx(1592)

    def test_cost_breakdown(self, result):
        """Six cost components total $137,500."""
        costs = result.costs
        assert costs.salary == 100000
        assert costs.vacation_bonus == 2000
        assert costs.health_insurance == 7000
        assert costs.k401_cost == pytest.approx(10000)
        assert costs.tax_cost == pytest.approx(8500)
        assert costs.overhead_cost == pytest.approx(10000)
        assert costs.total == pytest.approx(137500)

    def test_rates(self, result):
        """Break-even ~$86.37, target adds the $15/hr reserve."""
        assert result.rates.break_even == pytest.approx(137500 / 1592)
        assert round(result.rates.break_even, 2) == 86.37
        assert round(result.rates.target, 2) == 101.37

    def test_summary(self, result):
        """Revenue ~$161,380 leaves a ~$23,880 reserve (~14.8%)."""
        assert result.summary.revenue == pytest.approx(161380)
        assert result.summary.reserve_contribution == pytest.approx(23880)
        assert round(result.summary.reserve_margin_percent, 1) == 14.8

    def test_no_warnings(self, result):
        """A normal scenario carries no advisory warnings."""
        assert result.warnings == ()
        assert result.over_allocated is False

    def test_reconciliation_balances(self, result):
        """Revenue less each cost line equals the reserve."""
        assert result.reconciliation.balances is True
        assert result.reconciliation.line("revenue").amount == pytest.approx(161380)
        assert result.reconciliation.line("reserve_contribution").amount == pytest.approx(23880)


class TestScenarioB:
    """Non-billable time consumes every standard hour."""

    @pytest.mark.parametrize("overrides", [
        {"pto_hours": 2080, "overhead_time_percent": 0},
        {"pto_hours": 1000, "training_hours": 1000, "holiday_hours": 80, "overhead_time_percent": 0},
        {"pto_hours": 1500, "overhead_time_percent": 50},
        {"overhead_time_percent": 150},
    ])
    def test_zero_billable_hours(self, overrides):
        """Billable hours floor at zero; rates, revenue and margin are zero."""
        result = calculate({**SCENARIO_A, **overrides})

        assert result.billable_hours == 0
        assert result.rates.break_even == 0
        assert result.rates.target == 0
        assert result.summary.revenue == 0
        assert result.summary.reserve_contribution == pytest.approx(-result.costs.total)
        assert result.summary.reserve_margin_percent == 0

    def test_warning_flag_set(self):
        """Over-allocation is reported as a warning, not an error."""
        result = calculate({**SCENARIO_A, "pto_hours": 3000})

        assert result.over_allocated is True
        assert OVER_ALLOCATED_WARNING in result.warnings
        assert result.to_dict()["capacity"]["over_allocated"] is True

    def test_reconciliation_still_balances(self):
        """Zero revenue less all costs equals the (negative) reserve."""
        result = calculate({**SCENARIO_A, "pto_hours": 3000})
        assert result.reconciliation.balances is True


class TestScenarioC:
    """Manual health insurance entry."""

    def test_manual_amount_used(self):
        """Selecting 'other' uses the manual amount."""
        result = calculate({
            **SCENARIO_A,
            "health_insurance_plan": "other",
            "health_insurance_manual_amount": 5000,
        })
        assert result.health_insurance_cost == 5000
        assert result.costs.health_insurance == 5000
        assert result.costs.total == pytest.approx(135500)

    def test_manual_amount_ignores_prior_catalog_selection(self):
        """A manual selection replaces any catalog plan regardless of history."""
        family = build_inputs({**SCENARIO_A, "health_insurance_plan": "family"})
        manual = family.model_copy(update={"health_insurance": select_plan("other", 5000)})

        assert calculate(family).costs.health_insurance == 18000
        assert calculate(manual).costs.health_insurance == 5000

    def test_catalog_plan_ignores_manual_amount(self):
        """A catalog plan ignores whatever manual amount is supplied."""
        with_manual = calculate({**SCENARIO_A, "health_insurance_manual_amount": 99999})
        without_manual = calculate(SCENARIO_A)

        assert with_manual.costs.health_insurance == 7000
        assert with_manual.costs == without_manual.costs


class TestInvariants:
    """Properties that hold for every input set."""

    @pytest.mark.parametrize("values", PROPERTY_CASES)
    def test_total_is_sum_of_components(self, values):
        costs = calculate(values).costs
        assert costs.total == pytest.approx(
            costs.salary + costs.vacation_bonus + costs.health_insurance
            + costs.k401_cost + costs.tax_cost + costs.overhead_cost
        )

    @pytest.mark.parametrize("values", PROPERTY_CASES)
    def test_billable_hours_never_negative(self, values):
        assert calculate(values).billable_hours >= 0

    @pytest.mark.parametrize("values", PROPERTY_CASES)
    def test_revenue_is_target_times_hours(self, values):
        result = calculate(values)
        assert result.summary.revenue == pytest.approx(result.rates.target * result.billable_hours)

    @pytest.mark.parametrize("values", PROPERTY_CASES)
    def test_reserve_is_revenue_less_costs(self, values):
        result = calculate(values)
        assert result.summary.reserve_contribution == pytest.approx(
            result.summary.revenue - result.costs.total
        )

    @pytest.mark.parametrize("values", PROPERTY_CASES)
    def test_margin_definition(self, values):
        summary = calculate(values).summary
        if summary.revenue > 0:
            expected = summary.reserve_contribution / summary.revenue * 100
        else:
            expected = 0
        assert summary.reserve_margin_percent == pytest.approx(expected)

    @pytest.mark.parametrize("values", PROPERTY_CASES)
    def test_zero_hours_means_zero_rates(self, values):
        result = calculate(values)
        if result.billable_hours == 0:
            assert result.rates.break_even == 0
            assert result.rates.target == 0


class TestPipeline:
    """Pipeline entry points and input handling."""

    def test_accepts_rate_inputs(self):
        """calculate() takes a RateInputs as well as a mapping."""
        inputs = build_inputs(SCENARIO_A)
        assert calculate(inputs) == calculate(SCENARIO_A)

    def test_no_inputs_yields_zeros(self):
        """An empty Input Set produces a zero result, not an error."""
        result = calculate()
        assert result.costs.total == 0
        assert result.billable_hours == 2080
        assert result.rates.target == 0
        assert result.summary.reserve_margin_percent == 0

    def test_idempotent(self):
        """Identical inputs give bit-identical outputs."""
        first = calculate(SCENARIO_A)
        second = calculate(SCENARIO_A)

        assert first == second
        assert first.to_dict() == second.to_dict()
        assert first.rates.target.hex() == second.rates.target.hex()

    def test_unknown_plan_costs_zero_with_warning(self):
        """An unknown plan id does not raise; it costs 0 and warns."""
        result = calculate({**SCENARIO_A, "health_insurance_plan": "platinum"})

        assert result.costs.health_insurance == 0
        assert any("platinum" in w for w in result.warnings)

    def test_huge_integer_input_does_not_raise(self):
        """An integer beyond float range saturates to infinity."""
        result = calculate({**SCENARIO_A, "annual_salary": 10 ** 400})

        assert result.costs.salary == float("inf")
        assert result.billable_hours == pytest.approx(1592)

    def test_plan_cost_overrides(self):
        """Profile overrides replace the catalog cost."""
        result = calculate(SCENARIO_A, plan_costs={"single": 7500})
        assert result.costs.health_insurance == 7500

    def test_reserve_is_additive_per_hour(self):
        """Doubling the reserve adds $15/hr, it does not scale the rate."""
        base = calculate({**SCENARIO_A, "reserve_contribution_per_hour": 15})
        double = calculate({**SCENARIO_A, "reserve_contribution_per_hour": 30})

        assert double.rates.break_even == base.rates.break_even
        assert double.rates.target - base.rates.target == pytest.approx(15)


class TestCalculateCached:
    """Memoized pipeline."""

    def setup_method(self):
        clear_cache()

    def test_returns_same_object_for_same_inputs(self):
        """Repeated identical inputs hit the cache."""
        first = calculate_cached(SCENARIO_A)
        second = calculate_cached(dict(SCENARIO_A))
        assert first is second

    def test_matches_uncached_result(self):
        assert calculate_cached(SCENARIO_A) == calculate(SCENARIO_A)

    def test_different_inputs_recompute(self):
        first = calculate_cached(SCENARIO_A)
        second = calculate_cached({**SCENARIO_A, "annual_salary": 110000})
        assert first is not second
        assert second.costs.salary == 110000

    def test_plan_costs_are_part_of_key(self):
        """Overrides change the cache key."""
        default = calculate_cached(SCENARIO_A)
        overridden = calculate_cached(SCENARIO_A, plan_costs={"single": 7500})

        assert default.costs.health_insurance == 7000
        assert overridden.costs.health_insurance == 7500

    def test_rate_inputs_are_hashable(self):
        """Frozen inputs work as a cache key."""
        inputs = RateInputs(annual_salary=1, health_insurance=select_plan("single"))
        assert hash(inputs) == hash(RateInputs(annual_salary=1, health_insurance=select_plan("single")))

    def test_cached_result_cannot_be_mutated(self):
        """Shared cached results expose immutable warnings and ladder lines."""
        first = calculate_cached({"pto_hours": 3000})

        with pytest.raises(AttributeError):
            first.warnings.clear()
        with pytest.raises(AttributeError):
            first.reconciliation.lines.append(first.reconciliation.lines[0])

        second = calculate_cached({"pto_hours": 3000})
        assert second.over_allocated is True
        assert second.warnings == (OVER_ALLOCATED_WARNING,)
        assert len(second.reconciliation.lines) == 9
