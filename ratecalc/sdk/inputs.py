"""Input Set construction.

Callers hand in raw form values (possibly blank or half-typed) as a flat
mapping; build_inputs() turns that into a RateInputs. Keys may be snake_case
or camelCase, and health insurance uses the flat plan + manual amount pair.
"""

from typing import Any, Dict, Mapping, Optional

from .health_plans import DEFAULT_PLAN_ID
from .schemas import RateInputs


# Starting values of the calculator form
DEFAULT_INPUT_VALUES: Dict[str, Any] = {
    "annual_salary": 100000,
    "annual_vacation_bonus": 2000,
    "k401_contribution_percent": 10,
    "health_insurance_plan": DEFAULT_PLAN_ID,
    "health_insurance_manual_amount": 8000,
    "employer_tax_percent": 8.5,
    "pto_hours": 240,
    "training_hours": 40,
    "holiday_hours": 0,
    "overhead_time_percent": 10,
    "company_overhead_percent": 10,
    "reserve_contribution_per_hour": 15,
}

INPUT_KEYS = tuple(DEFAULT_INPUT_VALUES)


def _camel_case(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


# camelCase form names -> snake_case input keys
INPUT_KEY_ALIASES: Dict[str, str] = {_camel_case(key): key for key in INPUT_KEYS}


def canonical_input_key(key: str) -> str:
    """snake_case name for an input key given in either naming style."""
    return INPUT_KEY_ALIASES.get(key, key)


def build_inputs(values: Optional[Mapping[str, Any]] = None) -> RateInputs:
    """Build an Input Set from raw values.

    Missing and non-numeric values become 0; nothing here raises for bad
    numbers.

    Args:
        values: Flat mapping of raw input values

    Returns:
        RateInputs ready for calculate()
    """
    return RateInputs.model_validate(dict(values or {}))


def merge_input_values(*layers: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """Merge flat input mappings left to right, skipping None values.

    camelCase keys are stored under their snake_case name, so a later layer
    overrides an earlier one whichever style either uses.

    Example:
        merge_input_values(DEFAULT_INPUT_VALUES, profile_defaults, cli_options)
    """
    merged: Dict[str, Any] = {}
    for layer in layers:
        if not layer:
            continue
        for key, value in layer.items():
            if value is not None:
                merged[canonical_input_key(key)] = value
    return merged

