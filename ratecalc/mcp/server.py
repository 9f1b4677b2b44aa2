"""Rate Calc MCP Server - FastMCP implementation for rate calculation tools."""

import json
import logging
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from ratecalc import sdk

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("rate-calc")


def _plan_costs() -> dict:
    return sdk.load_health_plan_overrides()


# --- Tools ---

@mcp.tool()
async def calculate_rate(
    annual_salary: float | None = Field(default=None, description="Expected annual salary ($)"),
    annual_vacation_bonus: float | None = Field(default=None, description="Annual vacation bonus ($)"),
    k401_contribution_percent: float | None = Field(default=None, description="Employer 401k contribution (% of salary)"),
    health_insurance_plan: str | None = Field(default=None, description="Plan id from list_health_plans, or 'other' for manual entry"),
    health_insurance_manual_amount: float | None = Field(default=None, description="Annual employer health cost ($) when plan is 'other'"),
    employer_tax_percent: float | None = Field(default=None, description="Employer taxes - FICA, SUI, etc. (% of salary)"),
    pto_hours: float | None = Field(default=None, description="Paid time off hours per year"),
    training_hours: float | None = Field(default=None, description="Training hours per year"),
    holiday_hours: float | None = Field(default=None, description="Holiday hours per year"),
    overhead_time_percent: float | None = Field(default=None, description="Non-billable overhead time (% of 2080 hours)"),
    company_overhead_percent: float | None = Field(default=None, description="Company overhead (% of salary)"),
    reserve_contribution_per_hour: float | None = Field(default=None, description="Reserve contribution per billable hour ($)"),
) -> dict[str, Any]:
    """Calculate the recommended hourly rate. Unset inputs use the profile defaults. Returns costs, billable hours, break-even and target rates, revenue summary and the reconciliation ladder."""
    try:
        values = sdk.merge_input_values(sdk.load_default_values(), {
            "annual_salary": annual_salary,
            "annual_vacation_bonus": annual_vacation_bonus,
            "k401_contribution_percent": k401_contribution_percent,
            "health_insurance_plan": health_insurance_plan,
            "health_insurance_manual_amount": health_insurance_manual_amount,
            "employer_tax_percent": employer_tax_percent,
            "pto_hours": pto_hours,
            "training_hours": training_hours,
            "holiday_hours": holiday_hours,
            "overhead_time_percent": overhead_time_percent,
            "company_overhead_percent": company_overhead_percent,
            "reserve_contribution_per_hour": reserve_contribution_per_hour,
        })
        result = sdk.calculate(values, plan_costs=_plan_costs())
        return result.to_dict()

    except sdk.ProfileValidationError as e:
        logger.error(f"Error loading profile: {e}")
        return {"error": str(e)}


@mcp.tool()
async def list_health_plans() -> dict[str, Any]:
    """List health insurance plans with their annual employer cost (profile overrides applied)."""
    try:
        plans = sdk.list_health_plans(_plan_costs())
        return {
            "plans": [p.model_dump() for p in plans],
            "count": len(plans),
        }
    except sdk.ProfileValidationError as e:
        logger.error(f"Error listing health plans: {e}")
        return {"error": str(e), "plans": [], "count": 0}


# --- Resources ---

@mcp.resource("ratecalc://health-plans")
async def health_plans_resource() -> str:
    """Health plan catalog as JSON."""
    try:
        plans = sdk.list_health_plans(_plan_costs())
        return json.dumps({"plans": [p.model_dump() for p in plans]}, indent=2)
    except sdk.ProfileValidationError as e:
        return json.dumps({"error": str(e)})


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
