"""Cost aggregation - total annual employer cost of one employee.

Percent-based costs (401k match, employer taxes, company overhead) are all
taken as a percentage of base salary. Inputs are coerced, so a blank field
costs 0 rather than raising.
"""

from typing import Any

from .schemas import CostBreakdown, coerce_number


def calc_percent_of_salary(salary: Any, percent: Any) -> float:
    """Cost of a percentage-of-salary item.

    Example:
        calc_percent_of_salary(100000, 8.5)  # -> 8500.0
    """
    return coerce_number(salary) * (coerce_number(percent) / 100)


def calc_cost_breakdown(
    salary: Any,
    vacation_bonus: Any,
    health_insurance: Any,
    k401_percent: Any,
    employer_tax_percent: Any,
    company_overhead_percent: Any,
) -> CostBreakdown:
    """Calculate total annual cost and its components.

    Args:
        salary: Annual base salary
        vacation_bonus: Annual vacation bonus
        health_insurance: Effective annual employer health insurance cost
        k401_percent: Employer 401k contribution, % of salary
        employer_tax_percent: Employer taxes (FICA, SUI, etc.), % of salary
        company_overhead_percent: Company overhead, % of salary

    Returns:
        CostBreakdown whose total is the sum of the six components
    """
    s = coerce_number(salary)
    vb = coerce_number(vacation_bonus)
    hi = coerce_number(health_insurance)
    k401_cost = calc_percent_of_salary(s, k401_percent)
    tax_cost = calc_percent_of_salary(s, employer_tax_percent)
    overhead_cost = calc_percent_of_salary(s, company_overhead_percent)

    return CostBreakdown(
        salary=s,
        vacation_bonus=vb,
        health_insurance=hi,
        k401_cost=k401_cost,
        tax_cost=tax_cost,
        overhead_cost=overhead_cost,
        total=s + vb + hi + k401_cost + tax_cost + overhead_cost,
    )
