"""Rich renderers for calculated pay stubs and pay runs.

Transforms SDK result models into formatted Rich tables.
"""

from rich import box
from rich.console import Console
from rich.table import Table

from payrollcalc.sdk import BatchPayrollResponse, PayStubCalculation


def render_pay_stub(console: Console, stub: PayStubCalculation, pay_date: str = "") -> None:
    """Render one pay stub calculation as a Rich table.

    Args:
        console: Rich Console instance
        stub: Result of calculate_pay_stub()
        pay_date: Pay date shown in the title (optional)
    """
    title = f"Pay Stub: {stub.employee_id}"
    if pay_date:
        title += f" ({pay_date})"

    table = Table(title=title, box=box.ROUNDED)
    table.add_column("", style="bold", min_width=25)
    table.add_column("Hours", justify="right", min_width=8)
    table.add_column("Amount", justify="right", min_width=12)

    table.add_row("[bold]EARNINGS[/bold]", "", "")
    table.add_row("  Regular", _hours(stub.regular_hours), _fmt(stub.regular_pay))
    table.add_row("  Overtime", _hours(stub.overtime_hours), _fmt(stub.overtime_pay))
    if stub.other_earnings:
        table.add_row("  Other Earnings", "", _fmt(stub.other_earnings))
    table.add_row("  [dim]Gross Pay[/dim]", "", f"[dim]{_fmt(stub.gross_pay)}[/dim]")
    table.add_row("", "", "")

    table.add_row("[bold]DEDUCTIONS[/bold]", "", "")
    table.add_row("  Federal Income Tax", "", _fmt(stub.federal_withholding))
    if stub.state_withholding_breakdown:
        for part in stub.state_withholding_breakdown:
            label = f"  State ({part.state_code} {part.percentage:g}%)"
            if part.reciprocity_applied:
                label += f" -> {part.reciprocity_state_code}"
            table.add_row(label, "", _fmt(part.state_withholding))
    else:
        table.add_row("  State Income Tax", "", _fmt(stub.state_withholding))
    table.add_row("  Social Security", "", _fmt(stub.social_security))
    table.add_row("  Medicare", "", _fmt(stub.medicare))
    if stub.other_deductions:
        table.add_row("  Other Deductions", "", _fmt(stub.other_deductions))
    table.add_row("  [dim]Total Deductions[/dim]", "", f"[dim]{_fmt(stub.total_deductions)}[/dim]")
    table.add_row("", "", "")

    table.add_row(
        "[bold green]NET PAY[/bold green]",
        "",
        f"[bold green]{_fmt(stub.net_pay)}[/bold green]",
    )

    console.print(table)


def render_pay_run(console: Console, response: BatchPayrollResponse) -> None:
    """Render a pay run: one row per employee plus the summary totals."""
    summary = response.summary
    table = Table(
        title=f"Pay Run {response.pay_run_id} ({response.pay_date.isoformat()})",
        box=box.ROUNDED,
    )
    table.add_column("Employee", style="bold")
    table.add_column("Gross", justify="right")
    table.add_column("Federal", justify="right")
    table.add_column("State", justify="right")
    table.add_column("SS", justify="right")
    table.add_column("Medicare", justify="right")
    table.add_column("Deductions", justify="right")
    table.add_column("Net", justify="right")

    for stub in response.results:
        table.add_row(
            stub.employee_id,
            _fmt(stub.gross_pay),
            _fmt(stub.federal_withholding),
            _fmt(stub.state_withholding),
            _fmt(stub.social_security),
            _fmt(stub.medicare),
            _fmt(stub.total_deductions),
            _fmt(stub.net_pay),
        )

    table.add_section()
    table.add_row(
        f"[bold]{summary.employee_count} employees[/bold]",
        f"[bold]{_fmt(summary.total_gross_pay)}[/bold]",
        "", "", "", "",
        f"[bold]{_fmt(summary.total_deductions)}[/bold]",
        f"[bold green]{_fmt(summary.total_net_pay)}[/bold green]",
    )

    console.print(table)
    source_style = "green" if response.source == "remote" else "cyan"
    console.print(
        f"Calculated [{source_style}]{response.source or 'unknown'}[/{source_style}] "
        f"in {summary.processing_time_ms}ms",
        style="dim",
    )


def _hours(hours: float) -> str:
    return f"{hours:g}" if hours else "-"


def _fmt(amount: float | None) -> str:
    """Format currency amount."""
    if amount is None:
        return "-"
    return f"${amount:,.2f}"
