"""Pydantic schemas for rate-calc inputs and results.

Input models coerce every numeric field with coerce_number(), so a blank or
non-numeric value arriving from a form or a profile becomes 0 instead of a
validation error. Result models are frozen plain data with no formatting
applied; display formatting belongs to the caller.
"""

import math
from typing import Annotated, Any, Literal, Optional, Tuple, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)


# 40 hours/week * 52 weeks
STANDARD_ANNUAL_HOURS = 2080

# Plan id that selects manual entry of the health insurance cost
MANUAL_ENTRY_PLAN_ID = "other"


def coerce_number(value: Any) -> float:
    """Coerce a raw input value to a float, falling back to 0.

    Mirrors the permissive handling of a form field being edited:
    None, empty strings, non-numeric strings and NaN all become 0.

    Example:
        coerce_number("1500")  # -> 1500.0
        coerce_number("")      # -> 0.0
        coerce_number("abc")   # -> 0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        try:
            number = float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return 0.0
    if math.isnan(number):
        return 0.0
    return number


# =============================================================================
# Input Set
# =============================================================================


class CatalogPlan(BaseModel):
    """Health insurance selected from the plan catalog."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["catalog"] = "catalog"
    plan_id: str = Field(..., description="Catalog plan id (e.g., 'single')")

    @field_validator("plan_id", mode="before")
    @classmethod
    def normalize_plan_id(cls, v: Any) -> str:
        return str(v).strip().lower()


class ManualEntry(BaseModel):
    """Health insurance cost entered by hand."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    kind: Literal["manual"] = "manual"
    amount: float = Field(default=0, description="Annual employer cost")

    @field_validator("amount", mode="before")
    @classmethod
    def coerce_amount(cls, v: Any) -> float:
        return coerce_number(v)


HealthInsuranceSelection = Annotated[
    Union[CatalogPlan, ManualEntry],
    Field(discriminator="kind"),
]


_NUMERIC_INPUTS = (
    "annual_salary",
    "annual_vacation_bonus",
    "k401_contribution_percent",
    "employer_tax_percent",
    "pto_hours",
    "training_hours",
    "holiday_hours",
    "overhead_time_percent",
    "company_overhead_percent",
    "reserve_contribution_per_hour",
)


class RateInputs(BaseModel):
    """The Input Set for one rate calculation.

    Accepts snake_case names or the camelCase names used by form
    front-ends (annualSalary, ptoHours, ...). Health insurance can be given
    either as a tagged `health_insurance` selection or as the flat pair
    `health_insurance_plan` + `health_insurance_manual_amount`, where the
    plan 'other' selects manual entry.

    Frozen and hashable, so a full Input Set can key a memoization cache.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    annual_salary: float = Field(
        default=0, validation_alias=AliasChoices("annual_salary", "annualSalary"),
    )
    annual_vacation_bonus: float = Field(
        default=0,
        validation_alias=AliasChoices("annual_vacation_bonus", "annualVacationBonus"),
    )
    k401_contribution_percent: float = Field(
        default=0,
        validation_alias=AliasChoices("k401_contribution_percent", "k401ContributionPercent"),
        description="Employer 401k contribution as % of salary",
    )
    health_insurance: Optional[HealthInsuranceSelection] = Field(
        default=None, description="Catalog plan or manual entry (None costs 0)",
    )
    employer_tax_percent: float = Field(
        default=0,
        validation_alias=AliasChoices("employer_tax_percent", "employerTaxPercent"),
        description="Employer taxes (FICA, SUI, etc.) as % of salary",
    )
    pto_hours: float = Field(default=0, validation_alias=AliasChoices("pto_hours", "ptoHours"))
    training_hours: float = Field(
        default=0, validation_alias=AliasChoices("training_hours", "trainingHours"),
    )
    holiday_hours: float = Field(
        default=0, validation_alias=AliasChoices("holiday_hours", "holidayHours"),
    )
    overhead_time_percent: float = Field(
        default=0,
        validation_alias=AliasChoices("overhead_time_percent", "overheadTimePercent"),
        description="Non-billable overhead time as % of standard annual hours",
    )
    company_overhead_percent: float = Field(
        default=0,
        validation_alias=AliasChoices("company_overhead_percent", "companyOverheadPercent"),
        description="Company overhead (rent, software, utilities) as % of salary",
    )
    reserve_contribution_per_hour: float = Field(
        default=0,
        validation_alias=AliasChoices(
            "reserve_contribution_per_hour", "reserveContributionPerHour",
        ),
        description="Reserve fund contribution added to every billable hour",
    )

    @model_validator(mode="before")
    @classmethod
    def fold_flat_health_insurance(cls, data: Any) -> Any:
        """Turn the flat plan + manual amount pair into a tagged selection."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        plan = _pop_first(data, "health_insurance_plan", "healthInsurancePlan")
        manual = _pop_first(data, "health_insurance_manual_amount", "healthInsuranceManualAmount")
        if data.get("health_insurance") is not None or plan is None or plan == "":
            return data
        if str(plan).strip().lower() == MANUAL_ENTRY_PLAN_ID:
            data["health_insurance"] = {"kind": "manual", "amount": manual}
        else:
            data["health_insurance"] = {"kind": "catalog", "plan_id": plan}
        return data

    @field_validator(*_NUMERIC_INPUTS, mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> float:
        return coerce_number(v)


def _pop_first(data: dict, *keys: str) -> Any:
    """Pop every alias of a key from data, returning the first value found."""
    found = None
    for key in keys:
        if key in data:
            value = data.pop(key)
            if found is None:
                found = value
    return found


# =============================================================================
# Health plan catalog
# =============================================================================


class HealthPlan(BaseModel):
    """One entry in the health insurance plan catalog."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    plan_id: str
    label: str
    annual_cost: Optional[float] = Field(
        default=None, ge=0, description="Annual employer cost (None for manual entry)",
    )
    details: str = Field(default="", description="Typical total premium range")

    @property
    def is_manual(self) -> bool:
        return self.plan_id == MANUAL_ENTRY_PLAN_ID


# =============================================================================
# Derived values
# =============================================================================


class CostBreakdown(BaseModel):
    """Total annual employer cost and its six components."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    salary: float
    vacation_bonus: float
    health_insurance: float
    k401_cost: float
    tax_cost: float
    overhead_cost: float
    total: float


class CapacityResult(BaseModel):
    """Billable hours left after non-billable time is taken out."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    standard_hours: float = Field(..., description="Standard annual hours (2080)")
    overhead_hours: float = Field(..., description="Overhead time converted to hours")
    non_billable_hours: float = Field(..., description="PTO + training + holiday + overhead")
    billable_hours: float = Field(..., ge=0, description="Billable hours, floored at 0")

    @property
    def over_allocated(self) -> bool:
        """True when non-billable time leaves no billable hours."""
        return self.billable_hours <= 0


class Rates(BaseModel):
    """Hourly rates derived from cost and capacity."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    break_even: float = Field(..., description="Cost per billable hour")
    target: float = Field(..., description="Break-even plus reserve contribution per hour")


class Summary(BaseModel):
    """Annual revenue at the target rate and what is left for reserves."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    revenue: float
    reserve_contribution: float
    reserve_margin_percent: float


class ReconciliationLine(BaseModel):
    """One line of the revenue-to-reserve ladder."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    key: str
    label: str
    amount: float
    kind: Literal["revenue", "cost", "total_cost", "reserve"]


class Reconciliation(BaseModel):
    """Ladder showing revenue less each cost line equals the reserve."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    lines: Tuple[ReconciliationLine, ...]
    balances: bool = Field(..., description="Revenue minus costs equals reserve")

    def line(self, key: str) -> ReconciliationLine:
        for item in self.lines:
            if item.key == key:
                return item
        raise KeyError(key)


class RateResult(BaseModel):
    """Everything one pass of the pipeline produces."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    inputs: RateInputs
    health_insurance_cost: float
    costs: CostBreakdown
    capacity: CapacityResult
    rates: Rates
    summary: Summary
    reconciliation: Reconciliation
    warnings: Tuple[str, ...] = ()

    @property
    def billable_hours(self) -> float:
        return self.capacity.billable_hours

    @property
    def over_allocated(self) -> bool:
        return self.capacity.over_allocated

    def to_dict(self) -> dict:
        """JSON-ready dict, including the over-allocation flag."""
        data = self.model_dump(mode="json")
        data["capacity"]["over_allocated"] = self.over_allocated
        return data
