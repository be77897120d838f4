"""Tax table CLI commands for Payroll Calc."""

import json
from datetime import date

import click
from rich import box
from rich.console import Console
from rich.table import Table

from payrollcalc.sdk import SettingsError
from payrollcalc.sdk.taxes import TaxTableError, get_tax_tables


@click.group()
def tables():
    """Inspect the tax tables used for withholding.

    Tables come from the tax_tables_dir setting, or the tables bundled with
    the package when it is unset.
    """
    pass


@tables.command("show")
@click.argument("year", type=int, required=False)
@click.option("--filing-status", help="Show only one filing status")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def tables_show(year, filing_status, output_format):
    """Show federal brackets for YEAR (default: current year).

    Years without a table use the nearest earlier year, which is noted in
    the output.
    """
    year = year or date.today().year
    try:
        table = get_tax_tables().get_federal_table(year)
    except (TaxTableError, SettingsError) as e:
        raise click.ClickException(str(e))

    statuses = table.filing_statuses
    if filing_status:
        if filing_status not in statuses:
            known = ", ".join(statuses)
            raise click.ClickException(f"Unknown filing status '{filing_status}'. Known: {known}")
        statuses = {filing_status: statuses[filing_status]}

    if output_format == "json":
        data = {
            "year": year,
            "table_year": table.year,
            "filing_statuses": {
                status: [b.model_dump() for b in brackets] for status, brackets in statuses.items()
            },
        }
        click.echo(json.dumps(data, indent=2))
        return

    console = Console()
    if table.year != year:
        console.print(f"[yellow]No table for {year}; using {table.year}[/yellow]")

    for status, brackets in statuses.items():
        rich_table = Table(title=f"Federal {table.year}: {status}", box=box.ROUNDED)
        rich_table.add_column("Annual Income", justify="right")
        rich_table.add_column("Rate", justify="right")
        rich_table.add_column("Tax Below Bracket", justify="right")
        for b in brackets:
            upper = f"${b.max:,.0f}" if b.max is not None else "and up"
            rich_table.add_row(
                f"${b.min:,.0f} - {upper}",
                f"{b.rate * 100:g}%",
                f"${b.flat_amount:,.2f}",
            )
        console.print(rich_table)


@tables.command("state")
@click.argument("code")
def tables_state(code):
    """Show the withholding rate for state CODE (e.g., CA)."""
    try:
        info = get_tax_tables().get_state_info(code)
    except (TaxTableError, SettingsError) as e:
        raise click.ClickException(str(e))

    if info is None:
        click.echo(f"{code.upper()}: not in state tables (no state withholding)")
        return

    kind = "progressive (approximated by flat rate)" if info.has_progressive_tax else "flat"
    if info.rate == 0:
        kind = "no income tax"
    name = f" ({info.name})" if info.name else ""
    click.echo(f"{code.upper()}{name}: {info.rate * 100:g}% - {kind}")
