"""Rate calculation pipeline.

Runs every stage over one Input Set:

    inputs -> health insurance cost -> costs  \\
    inputs -> billable hours ------------------> rates -> summary -> reconciliation

Each stage is a pure function, so the whole pipeline is recomputed on every
input change. calculate_cached() memoizes on the full Input Set for callers
that recompute on every keystroke.
"""

import logging
import os
from functools import lru_cache
from typing import Any, Mapping, Optional, Tuple, Union

from .capacity import calc_billable_hours
from .costs import calc_cost_breakdown
from .health_plans import UnknownHealthPlanError, resolve_health_insurance_cost
from .inputs import build_inputs
from .rates import calc_rates
from .reconciliation import build_reconciliation, calc_summary
from .schemas import RateInputs, RateResult

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

OVER_ALLOCATED_WARNING = (
    "Non-billable hours exceed total available hours. Billable hours are zero."
)


def calculate(
    inputs: Union[RateInputs, Mapping[str, Any], None] = None,
    plan_costs: Optional[Mapping[str, float]] = None,
) -> RateResult:
    """Run the full rate pipeline.

    Never raises for bad numbers: blanks coerce to 0, zero billable hours
    yields zero rates, and advisory conditions are reported in
    RateResult.warnings.

    Args:
        inputs: RateInputs, or a flat mapping of raw values (see build_inputs)
        plan_costs: Optional health plan cost overrides {plan_id: annual_cost}

    Returns:
        RateResult with costs, capacity, rates, summary and reconciliation
    """
    if not isinstance(inputs, RateInputs):
        inputs = build_inputs(inputs)

    warnings = []

    try:
        health_insurance = resolve_health_insurance_cost(inputs.health_insurance, plan_costs)
    except UnknownHealthPlanError as e:
        logger.warning(f"Unknown health insurance plan {e}, using 0")
        warnings.append(f"Unknown health insurance plan {e}; health insurance cost set to 0.")
        health_insurance = 0.0

    costs = calc_cost_breakdown(
        inputs.annual_salary,
        inputs.annual_vacation_bonus,
        health_insurance,
        inputs.k401_contribution_percent,
        inputs.employer_tax_percent,
        inputs.company_overhead_percent,
    )
    logger.debug(f"costs: total {costs.total:.2f} (health insurance {health_insurance:.2f})")

    capacity = calc_billable_hours(
        inputs.pto_hours,
        inputs.training_hours,
        inputs.holiday_hours,
        inputs.overhead_time_percent,
    )
    logger.debug(
        f"capacity: {capacity.billable_hours:.2f} billable of {capacity.standard_hours:.0f} "
        f"({capacity.non_billable_hours:.2f} non-billable)"
    )
    if capacity.over_allocated:
        logger.warning(
            f"Non-billable time {capacity.non_billable_hours:.2f}h meets or exceeds "
            f"{capacity.standard_hours:.0f}h; billable hours are zero"
        )
        warnings.append(OVER_ALLOCATED_WARNING)

    rates = calc_rates(costs.total, capacity.billable_hours, inputs.reserve_contribution_per_hour)
    logger.debug(f"rates: break-even {rates.break_even:.4f}, target {rates.target:.4f}")

    summary = calc_summary(rates.target, capacity.billable_hours, costs)
    reconciliation = build_reconciliation(summary, costs)
    if not reconciliation.balances:
        logger.warning("Reconciliation does not balance: revenue less costs != reserve")

    return RateResult(
        inputs=inputs,
        health_insurance_cost=health_insurance,
        costs=costs,
        capacity=capacity,
        rates=rates,
        summary=summary,
        reconciliation=reconciliation,
        warnings=warnings,
    )


@lru_cache(maxsize=128)
def _calculate_memoized(
    inputs: RateInputs,
    plan_costs: Optional[Tuple[Tuple[str, float], ...]],
) -> RateResult:
    return calculate(inputs, dict(plan_costs) if plan_costs else None)


def calculate_cached(
    inputs: Union[RateInputs, Mapping[str, Any], None] = None,
    plan_costs: Optional[Mapping[str, float]] = None,
) -> RateResult:
    """Memoized calculate(), keyed on the full Input Set and plan overrides.

    Returns the same RateResult object for repeated identical inputs.
    """
    if not isinstance(inputs, RateInputs):
        inputs = build_inputs(inputs)
    key = tuple(sorted(plan_costs.items())) if plan_costs else None
    return _calculate_memoized(inputs, key)


def clear_cache() -> None:
    """Drop memoized results."""
    _calculate_memoized.cache_clear()
