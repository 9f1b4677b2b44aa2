"""Health insurance plan catalog and cost resolution.

The catalog holds the average annual employer cost for each plan tier.
A profile may override a tier's cost or register extra tiers; overrides are
passed in as a plain {plan_id: annual_cost} mapping so this module stays
free of config access.

Resolution:
1. ManualEntry -> the entered amount
2. CatalogPlan -> override cost if present, else the catalog cost
3. No selection -> 0
"""

from typing import List, Mapping, Optional

from .schemas import (
    MANUAL_ENTRY_PLAN_ID,
    CatalogPlan,
    HealthInsuranceSelection,
    HealthPlan,
    ManualEntry,
    coerce_number,
)


class UnknownHealthPlanError(KeyError):
    """Raised when a plan id is not in the catalog."""
    pass


HEALTH_PLANS = (
    HealthPlan(
        plan_id="single",
        label="Single (Employee-Only)",
        annual_cost=7000,
        details="$8.5k-$9k Total",
    ),
    HealthPlan(
        plan_id="employee_spouse",
        label="Employee + Spouse",
        annual_cost=13000,
        details="$17k-$18k Total",
    ),
    HealthPlan(
        plan_id="family",
        label="Family (Employee + Dependents)",
        annual_cost=18000,
        details="$23k-$25k Total",
    ),
    HealthPlan(
        plan_id=MANUAL_ENTRY_PLAN_ID,
        label="Other (Manual Entry)",
    ),
)

DEFAULT_PLAN_ID = "single"


def list_health_plans(overrides: Optional[Mapping[str, float]] = None) -> List[HealthPlan]:
    """List catalog plans with any cost overrides applied.

    Args:
        overrides: Optional {plan_id: annual_cost}. Ids not in the catalog
            are added as extra plans ahead of the manual entry option.

    Returns:
        Plans in display order, manual entry last
    """
    overrides = dict(overrides or {})
    plans = []
    for plan in HEALTH_PLANS:
        if plan.is_manual:
            continue
        if plan.plan_id in overrides:
            plan = plan.model_copy(update={"annual_cost": float(overrides.pop(plan.plan_id))})
        plans.append(plan)

    for plan_id, cost in overrides.items():
        if plan_id == MANUAL_ENTRY_PLAN_ID:
            continue
        plans.append(HealthPlan(
            plan_id=plan_id,
            label=plan_id.replace("_", " ").title(),
            annual_cost=float(cost),
        ))

    plans.append(get_manual_plan())
    return plans


def get_manual_plan() -> HealthPlan:
    """Get the manual entry pseudo-plan."""
    return HEALTH_PLANS[-1]


def get_health_plan(plan_id: str, overrides: Optional[Mapping[str, float]] = None) -> HealthPlan:
    """Look up one plan by id (case-insensitive).

    Raises:
        UnknownHealthPlanError: If the id is neither in the catalog nor the overrides
    """
    wanted = str(plan_id).strip().lower()
    for plan in list_health_plans(overrides):
        if plan.plan_id == wanted:
            return plan
    raise UnknownHealthPlanError(plan_id)


def resolve_health_insurance_cost(
    selection: Optional[HealthInsuranceSelection],
    overrides: Optional[Mapping[str, float]] = None,
) -> float:
    """Resolve a plan selection to one annual employer cost.

    A catalog selection ignores any manual amount; a manual selection
    ignores the catalog.

    Raises:
        UnknownHealthPlanError: If a catalog selection names an unknown plan
    """
    if selection is None:
        return 0.0
    if isinstance(selection, ManualEntry):
        return selection.amount
    plan = get_health_plan(selection.plan_id, overrides)
    if plan.is_manual:
        # CatalogPlan('other') built by hand, with no amount attached
        return 0.0
    return coerce_number(plan.annual_cost)


def select_plan(plan_id: str, manual_amount=None) -> HealthInsuranceSelection:
    """Build a selection from a plan id, using manual_amount only for 'other'."""
    if str(plan_id).strip().lower() == MANUAL_ENTRY_PLAN_ID:
        return ManualEntry(amount=manual_amount)
    return CatalogPlan(plan_id=plan_id)
