"""Revenue/cost reconciliation.

Revenue at the target rate is broken back down into every cost line plus
the reserve contribution, so each dollar of the rate can be traced:

    Total Annual Revenue
      Less: Base Salary
      Less: 401k Contribution
      Less: Vacation Bonus
      Less: Health Insurance
      Less: Employer Taxes
      Less: Company Overhead
    = Total Annual Costs
    = Total Annual Reserve Contribution
"""

import math
from typing import Any

from .schemas import (
    CostBreakdown,
    Reconciliation,
    ReconciliationLine,
    Summary,
    coerce_number,
)


# (CostBreakdown field, ladder label) in display order
COST_LINES = (
    ("salary", "Base Salary"),
    ("k401_cost", "401k Contribution"),
    ("vacation_bonus", "Vacation Bonus"),
    ("health_insurance", "Health Insurance"),
    ("tax_cost", "Employer Taxes"),
    ("overhead_cost", "Company Overhead"),
)

BALANCE_TOLERANCE = 1e-6


def calc_summary(target: Any, billable_hours: Any, costs: CostBreakdown) -> Summary:
    """Calculate revenue, reserve contribution and reserve margin.

    Args:
        target: Target hourly rate
        billable_hours: Billable hours for the year
        costs: Cost breakdown the rate was derived from

    Returns:
        Summary; margin is 0 when there is no revenue
    """
    revenue = coerce_number(target) * coerce_number(billable_hours)
    reserve = revenue - costs.total
    margin = (reserve / revenue) * 100 if revenue > 0 else 0.0

    return Summary(
        revenue=revenue,
        reserve_contribution=reserve,
        reserve_margin_percent=margin,
    )


def build_reconciliation(summary: Summary, costs: CostBreakdown) -> Reconciliation:
    """Build the revenue-to-reserve ladder.

    Returns:
        Reconciliation with one line per cost component; `balances` is True
        when revenue less every cost line equals the reserve contribution.
    """
    lines = [
        ReconciliationLine(
            key="revenue",
            label="Total Annual Revenue",
            amount=summary.revenue,
            kind="revenue",
        )
    ]
    remaining = summary.revenue
    for field, label in COST_LINES:
        amount = getattr(costs, field)
        remaining -= amount
        lines.append(ReconciliationLine(
            key=field,
            label=f"Less: {label}",
            amount=amount,
            kind="cost",
        ))

    lines.append(ReconciliationLine(
        key="total_cost",
        label="Total Annual Costs",
        amount=costs.total,
        kind="total_cost",
    ))
    lines.append(ReconciliationLine(
        key="reserve_contribution",
        label="Total Annual Reserve Contribution",
        amount=summary.reserve_contribution,
        kind="reserve",
    ))

    balances = math.isclose(
        remaining,
        summary.reserve_contribution,
        rel_tol=1e-9,
        abs_tol=BALANCE_TOLERANCE,
    )
    return Reconciliation(lines=lines, balances=balances)
