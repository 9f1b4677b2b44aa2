"""Rate Calc CLI - Command-line interface for hourly rate recommendations."""

import json

import click
from rich.console import Console

from ratecalc import __version__
from ratecalc.sdk import (
    OUTPUT_FORMATS,
    ProfileNotFoundError,
    ProfileValidationError,
    UnknownHealthPlanError,
    calculate,
    get_default_output_format,
    get_health_plan,
    list_health_plans,
    load_default_values,
    load_health_plan_overrides,
    load_profile,
    merge_input_values,
)

from .profile_commands import profile as profile_group
from .settings_commands import settings as settings_group
from .renderers.rate_renderer import render_health_plans, render_rate_result


@click.group()
@click.version_option(version=__version__, prog_name="rate-calc")
def cli():
    """Rate Calc - Hourly billing rate recommendations.

    Works out the hourly rate that covers an employee's full annual cost
    (salary, benefits, employer taxes, overhead) over their billable hours,
    plus a per-hour reserve contribution.

    Defaults for every input are loaded from (in order):

    \b
    1. Built-in calculator defaults
    2. 'defaults' section of profile.yaml
    3. Command-line options

    Run 'rate-calc profile show' to see the active profile.
    """
    pass


# Add subcommand groups
cli.add_command(profile_group)
cli.add_command(settings_group)


def _load_profile_for_cli() -> dict:
    try:
        return load_profile(require_exists=False)
    except (ProfileNotFoundError, ProfileValidationError) as e:
        raise click.ClickException(str(e))


@cli.command("calc")
@click.option("--salary", type=float, help="Expected annual salary ($)")
@click.option("--vacation-bonus", type=float, help="Annual vacation bonus ($)")
@click.option("--k401", type=float, help="Employer 401k contribution (% of salary)")
@click.option("--plan", help="Health insurance plan id (see 'rate-calc plans'); 'other' for manual entry")
@click.option("--health-manual", type=float, help="Manual annual health insurance cost ($), used with --plan other")
@click.option("--employer-tax", type=float, help="Employer taxes - FICA, SUI, etc. (% of salary)")
@click.option("--pto", type=float, help="Paid time off hours")
@click.option("--training", type=float, help="Training hours")
@click.option("--holiday", type=float, help="Holiday hours")
@click.option("--overhead-time", type=float, help="Non-billable overhead time (% of 2080 hours)")
@click.option("--company-overhead", type=float, help="Company overhead - rent, software, utilities (% of salary)")
@click.option("--reserve", type=float, help="Reserve fund contribution per billable hour ($)")
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default=None,
              help="Output format (default: settings default_output_format, else text)")
def calc(salary, vacation_bonus, k401, plan, health_manual, employer_tax, pto, training,
         holiday, overhead_time, company_overhead, reserve, output_format):
    """Calculate the recommended hourly rate.

    Options not given fall back to the profile defaults, then to the
    built-in defaults.

    Examples:
        rate-calc calc --salary 120000 --plan family
        rate-calc calc --plan other --health-manual 5000 --format json
    """
    profile = _load_profile_for_cli()
    try:
        plan_costs = load_health_plan_overrides(profile)
        defaults = load_default_values(profile)
    except ProfileValidationError as e:
        raise click.ClickException(str(e))

    if plan is not None:
        try:
            plan = get_health_plan(plan, plan_costs).plan_id
        except UnknownHealthPlanError:
            choices = ", ".join(p.plan_id for p in list_health_plans(plan_costs))
            raise click.BadParameter(f"Unknown plan '{plan}'. Choose from: {choices}", param_hint="--plan")

    values = merge_input_values(defaults, {
        "annual_salary": salary,
        "annual_vacation_bonus": vacation_bonus,
        "k401_contribution_percent": k401,
        "health_insurance_plan": plan,
        "health_insurance_manual_amount": health_manual,
        "employer_tax_percent": employer_tax,
        "pto_hours": pto,
        "training_hours": training,
        "holiday_hours": holiday,
        "overhead_time_percent": overhead_time,
        "company_overhead_percent": company_overhead,
        "reserve_contribution_per_hour": reserve,
    })

    result = calculate(values, plan_costs=plan_costs)

    if output_format is None:
        output_format = get_default_output_format()

    if output_format == "json":
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        render_rate_result(Console(), result)


@cli.command("plans")
@click.option("--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default="text",
              help="Output format (default: text)")
def plans(output_format):
    """List health insurance plans and their annual employer cost.

    Costs from the profile's health_plans section replace the built-in
    averages.
    """
    profile = _load_profile_for_cli()
    try:
        plan_costs = load_health_plan_overrides(profile)
    except ProfileValidationError as e:
        raise click.ClickException(str(e))

    catalog = list_health_plans(plan_costs)
    if output_format == "json":
        click.echo(json.dumps([p.model_dump() for p in catalog], indent=2))
    else:
        render_health_plans(Console(), catalog)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
