"""Billable capacity - hours left to bill after non-billable time."""

from typing import Any

from .schemas import STANDARD_ANNUAL_HOURS, CapacityResult, coerce_number


def calc_billable_hours(
    pto_hours: Any,
    training_hours: Any,
    holiday_hours: Any,
    overhead_time_percent: Any,
    standard_hours: float = STANDARD_ANNUAL_HOURS,
) -> CapacityResult:
    """Calculate billable hours for the year.

    Overhead time (admin, meetings) is a percentage of the standard hours,
    not of the hours left after PTO. Billable hours never go below 0;
    over-allocated time shows up as CapacityResult.over_allocated.

    Example:
        calc_billable_hours(240, 40, 0, 10).billable_hours  # -> 1592.0
    """
    overhead_hours = standard_hours * (coerce_number(overhead_time_percent) / 100)
    non_billable = (
        coerce_number(pto_hours)
        + coerce_number(training_hours)
        + coerce_number(holiday_hours)
        + overhead_hours
    )

    return CapacityResult(
        standard_hours=standard_hours,
        overhead_hours=overhead_hours,
        non_billable_hours=non_billable,
        billable_hours=max(0.0, standard_hours - non_billable),
    )
