"""Rich renderer for rate calculations.

Transforms SDK results into formatted Rich panels and tables. All currency
and percent formatting lives here; the SDK returns raw numbers.
"""

from typing import Iterable

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ratecalc.sdk import HealthPlan, RateResult


def render_rate_result(console: Console, result: RateResult) -> None:
    """Render a rate calculation.

    Args:
        console: Rich Console instance
        result: Output of calculate()
    """
    for warning in result.warnings:
        console.print(Panel(
            f"[red]Warning: {warning}[/red]",
            title="Warning",
            border_style="red",
        ))

    _render_rate_panel(console, result)
    _render_projections(console, result)
    _render_breakdown(console, result)


def _render_rate_panel(console: Console, result: RateResult) -> None:
    """Render the recommended rate headline."""
    rates = result.rates
    body = (
        f"[bold blue]{_fmt(rates.target)}[/bold blue] / hour\n"
        f"[dim]Break-Even Rate (Costs Only): {_fmt(rates.break_even)} / hour[/dim]"
    )
    console.print(Panel(body, title="Recommended Hourly Rate", border_style="blue"))


def _render_projections(console: Console, result: RateResult) -> None:
    """Render the annual projections table."""
    table = Table(title="Annual Projections", box=box.ROUNDED, show_header=False)
    table.add_column("", style="bold", min_width=34)
    table.add_column("", justify="right", min_width=14)

    summary = result.summary
    table.add_row("Total Billable Hours", f"{result.billable_hours:,.0f}")
    table.add_row("Total Annual Revenue", f"[green]{_fmt(summary.revenue)}[/green]")
    table.add_row("Total Annual Costs", f"[red]{_fmt(result.costs.total)}[/red]")
    table.add_section()
    table.add_row(
        "[bold]Total Annual Reserve Contribution[/bold]",
        _signed(summary.reserve_contribution, bold=True),
    )
    table.add_row(
        "[bold]Reserve % of Revenue[/bold]",
        f"[bold]{summary.reserve_margin_percent:.2f}%[/bold]",
    )

    console.print(table)


def _render_breakdown(console: Console, result: RateResult) -> None:
    """Render the balancing ladder from revenue down to reserve."""
    table = Table(title="Annual 'Balancing' Breakdown", box=box.ROUNDED, show_header=False)
    table.add_column("", min_width=34)
    table.add_column("", justify="right", min_width=14)

    for line in result.reconciliation.lines:
        if line.kind == "revenue":
            table.add_row(f"[bold]{line.label}[/bold]", f"[bold green]{_fmt(line.amount)}[/bold green]")
        elif line.kind == "cost":
            table.add_row(f"  {line.label}", f"[red]{_fmt(line.amount)}[/red]")
        elif line.kind == "total_cost":
            table.add_section()
            table.add_row(f"[bold]= {line.label}[/bold]", f"[bold red]{_fmt(line.amount)}[/bold red]")
        else:
            table.add_row(f"[bold]= {line.label}[/bold]", _signed(line.amount, bold=True))

    console.print(table)


def render_health_plans(console: Console, plans: Iterable[HealthPlan]) -> None:
    """Render the health plan catalog."""
    table = Table(title="Employer Health Insurance Plans", box=box.ROUNDED)
    table.add_column("Plan", style="bold", no_wrap=True)
    table.add_column("Label")
    table.add_column("Employer Cost", justify="right", no_wrap=True)
    table.add_column("Typical Premium", style="dim")

    for plan in plans:
        cost = "manual entry" if plan.is_manual else _fmt(plan.annual_cost)
        table.add_row(plan.plan_id, plan.label, cost, plan.details or "")

    console.print(table)


def _signed(amount: float, bold: bool = False) -> str:
    """Green for a surplus, red for a shortfall."""
    color = "green" if amount >= 0 else "red"
    style = f"bold {color}" if bold else color
    return f"[{style}]{_fmt(amount)}[/{style}]"


def _fmt(amount: float | None) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"
