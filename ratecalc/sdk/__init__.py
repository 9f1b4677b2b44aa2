"""Rate Calc SDK - Core functionality for hourly rate recommendations.

Scope:
- Input Set construction with permissive numeric coercion (inputs.py)
- Health insurance plan catalog (health_plans.py)
- Cost aggregation, billable capacity, rates, reconciliation (one module each)
- Full pipeline with optional memoization (engine.py)
- settings.json / profile.yaml configuration (config.py)

Constraints:
- Calculation modules are pure - no config access, no I/O
- Nothing in the calculation path raises for bad numbers

Usage:
    from ratecalc.sdk import calculate

    result = calculate({"annual_salary": 100000, "health_insurance_plan": "single"})
    result.rates.target
"""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    get_default_output_format,
    get_profile_path,
    load_profile,
    save_profile,
    get_profile_value,
    set_profile_value,
    default_profile,
    load_default_values,
    load_default_inputs,
    load_health_plan_overrides,
    validate_profile,
    ProfileValidationResult,
    ProfileNotFoundError,
    ProfileValidationError,
    OUTPUT_FORMATS,
)

from .schemas import (
    STANDARD_ANNUAL_HOURS,
    MANUAL_ENTRY_PLAN_ID,
    coerce_number,
    CatalogPlan,
    ManualEntry,
    RateInputs,
    HealthPlan,
    CostBreakdown,
    CapacityResult,
    Rates,
    Summary,
    ReconciliationLine,
    Reconciliation,
    RateResult,
)

from .inputs import (
    DEFAULT_INPUT_VALUES,
    build_inputs,
    canonical_input_key,
    merge_input_values,
)

from .health_plans import (
    HEALTH_PLANS,
    UnknownHealthPlanError,
    list_health_plans,
    get_health_plan,
    resolve_health_insurance_cost,
    select_plan,
)

from .costs import calc_cost_breakdown, calc_percent_of_salary
from .capacity import calc_billable_hours
from .rates import calc_rates
from .reconciliation import calc_summary, build_reconciliation

from .engine import (
    calculate,
    calculate_cached,
    clear_cache,
    OVER_ALLOCATED_WARNING,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "get_default_output_format",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "get_profile_value",
    "set_profile_value",
    "default_profile",
    "load_default_values",
    "load_default_inputs",
    "load_health_plan_overrides",
    "validate_profile",
    "ProfileValidationResult",
    "ProfileNotFoundError",
    "ProfileValidationError",
    "OUTPUT_FORMATS",
    # Schemas
    "STANDARD_ANNUAL_HOURS",
    "MANUAL_ENTRY_PLAN_ID",
    "coerce_number",
    "CatalogPlan",
    "ManualEntry",
    "RateInputs",
    "HealthPlan",
    "CostBreakdown",
    "CapacityResult",
    "Rates",
    "Summary",
    "ReconciliationLine",
    "Reconciliation",
    "RateResult",
    # Inputs
    "DEFAULT_INPUT_VALUES",
    "build_inputs",
    "canonical_input_key",
    "merge_input_values",
    # Health plans
    "HEALTH_PLANS",
    "UnknownHealthPlanError",
    "list_health_plans",
    "get_health_plan",
    "resolve_health_insurance_cost",
    "select_plan",
    # Stages
    "calc_cost_breakdown",
    "calc_percent_of_salary",
    "calc_billable_hours",
    "calc_rates",
    "calc_summary",
    "build_reconciliation",
    # Pipeline
    "calculate",
    "calculate_cached",
    "clear_cache",
    "OVER_ALLOCATED_WARNING",
]
