"""Hourly rate calculation."""

from typing import Any

from .schemas import Rates, coerce_number


def calc_rates(total_cost: Any, billable_hours: Any, reserve_contribution_per_hour: Any) -> Rates:
    """Calculate break-even and target hourly rates.

    The reserve contribution is a flat dollar amount added to every billable
    hour, not a margin percentage applied to the break-even rate.

    Args:
        total_cost: Total annual employer cost
        billable_hours: Billable hours for the year
        reserve_contribution_per_hour: Dollars per hour set aside for reserves

    Returns:
        Rates; both 0 when there are no billable hours
    """
    hours = coerce_number(billable_hours)
    if hours <= 0:
        return Rates(break_even=0.0, target=0.0)

    break_even = coerce_number(total_cost) / hours
    return Rates(
        break_even=break_even,
        target=break_even + coerce_number(reserve_contribution_per_hour),
    )
