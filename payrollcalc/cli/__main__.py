"""Payroll Calc CLI - Command-line interface for payroll withholding and pay runs."""

import json
import logging

import click
from pydantic import ValidationError
from rich.console import Console

from payrollcalc import __version__
from payrollcalc.sdk import (
    BatchOrchestrator,
    BatchPayrollRequest,
    Employee,
    EmployeePayInput,
    SettingsError,
    YTDTotals,
    calculate_batch_locally,
    calculate_pay_period_dates,
    calculate_single_pay_stub,
    generate_pay_run_number,
    parse_pay_date,
)
from payrollcalc.sdk.taxes import TaxTableError

from .renderers.stub_renderer import render_pay_run, render_pay_stub
from .settings_commands import settings as settings_group
from .tables_commands import tables as tables_group


@click.group()
@click.version_option(version=__version__, prog_name="payroll-calc")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
def cli(verbose):
    """Payroll Calc - Payroll withholding and pay run calculation.

    Calculates gross pay, federal and state withholding, Social Security
    and Medicare for single pay stubs or whole pay runs.

    Settings are loaded from (in order):

    \b
    1. PAYROLL_CALC_* environment variables
    2. settings.json in PAYROLL_CALC_CONFIG_PATH
    3. ~/.config/payroll-calc/settings.json (XDG default)

    Run 'payroll-calc settings show' to see effective settings.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


cli.add_command(settings_group)
cli.add_command(tables_group)


def _load_json_file(path: str) -> dict:
    try:
        with open(path) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in {path}: {e}")


def _validation_message(e: ValidationError) -> str:
    lines = ["Invalid input:"]
    for error in e.errors():
        location = ".".join(str(part) for part in error["loc"])
        lines.append(f"  {location}: {error['msg']}")
    return "\n".join(lines)


@cli.command("stub")
@click.option("--input", "input_file", type=click.Path(exists=True, dir_okay=False),
              help="JSON file with one employee pay input (same shape as a pay run entry).")
@click.option("--employee-id", default="cli", show_default=True, help="Employee ID for the stub.")
@click.option("--pay-type", type=click.Choice(["Hourly", "Salary"]), default="Hourly", show_default=True)
@click.option("--rate", type=float, help="Hourly rate, or annual salary for --pay-type Salary.")
@click.option("--frequency", type=click.Choice(["Weekly", "Biweekly", "Semimonthly", "Monthly"]),
              default="Biweekly", show_default=True, help="Pay frequency.")
@click.option("--filing-status", default="Single", show_default=True,
              help="Federal filing status (Single, MarriedFilingJointly, ...).")
@click.option("--allowances", type=int, default=0, show_default=True, help="Federal allowances.")
@click.option("--state", "state_code", help="Work state code (e.g., CA). Omit for no state tax.")
@click.option("--state-allowances", type=int, default=0, show_default=True)
@click.option("--hours", "regular_hours", type=float, default=0, show_default=True, help="Regular hours.")
@click.option("--overtime", "overtime_hours", type=float, default=0, show_default=True, help="Overtime hours.")
@click.option("--other-earnings", type=float, default=0, show_default=True)
@click.option("--other-deductions", type=float, default=0, show_default=True)
@click.option("--ytd-gross", type=float, default=0, show_default=True,
              help="Gross pay earlier this year (for SS wage base and Additional Medicare).")
@click.option("--pay-date", help="Pay date YYYY-MM-DD (default: today).")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def stub_cmd(input_file, employee_id, pay_type, rate, frequency, filing_status, allowances,
             state_code, state_allowances, regular_hours, overtime_hours, other_earnings,
             other_deductions, ytd_gross, pay_date, output_format):
    """Calculate a single pay stub.

    Either pass --input with an employee pay input JSON file, or describe
    the employee and period with options.

    \b
    Examples:
      payroll-calc stub --rate 25 --hours 80 --overtime 5 --state CA
      payroll-calc stub --pay-type Salary --rate 75000 --ytd-gross 180000
      payroll-calc stub --input alice.json --pay-date 2025-01-15 --format json
    """
    try:
        date_value = parse_pay_date(pay_date) if pay_date else None
    except ValueError:
        raise click.BadParameter(f"Invalid pay date '{pay_date}'. Use YYYY-MM-DD.")

    try:
        if input_file:
            pay_input = EmployeePayInput.model_validate(_load_json_file(input_file))
        else:
            if rate is None:
                raise click.UsageError("Provide --rate (or --input).")
            pay_input = EmployeePayInput(
                employee=Employee(
                    id=employee_id,
                    pay_type=pay_type,
                    pay_rate=rate,
                    pay_frequency=frequency,
                    federal_filing_status=filing_status,
                    federal_allowances=allowances,
                    state_code=state_code,
                    state_allowances=state_allowances,
                ),
                regular_hours=regular_hours,
                overtime_hours=overtime_hours,
                other_earnings=other_earnings,
                other_deductions=other_deductions,
                ytd_totals=YTDTotals(gross_pay=ytd_gross),
            )
    except ValidationError as e:
        raise click.ClickException(_validation_message(e))

    try:
        result = calculate_single_pay_stub(pay_input, date_value)
    except (TaxTableError, SettingsError) as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(result.to_wire(), indent=2))
    else:
        render_pay_stub(Console(), result, date_value.isoformat() if date_value else "")


@cli.command("batch")
@click.argument("request_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--local", "force_local", is_flag=True,
              help="Calculate in-process even when a remote service is configured.")
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default="text",
              help="Output format (default: text)")
def batch_cmd(request_file, force_local, output_format):
    """Calculate a pay run from a JSON request file.

    REQUEST_FILE holds {"payRunId", "payDate", "employees": [...]}. Pay runs
    at or above the batch threshold go to the remote calculation service
    when one is configured, falling back to local calculation on failure.
    """
    try:
        request = BatchPayrollRequest.model_validate(_load_json_file(request_file))
    except ValidationError as e:
        raise click.ClickException(_validation_message(e))

    try:
        if force_local:
            response = calculate_batch_locally(request)
        else:
            response = BatchOrchestrator.from_settings().calculate_batch(request)
    except (TaxTableError, SettingsError) as e:
        raise click.ClickException(str(e))

    if output_format == "json":
        click.echo(json.dumps(response.to_wire(), indent=2))
    else:
        render_pay_run(Console(), response)


@cli.command("period-dates")
@click.argument("pay_date")
@click.argument("frequency", type=click.Choice(["Weekly", "Biweekly", "Semimonthly", "Monthly"]))
def period_dates_cmd(pay_date, frequency):
    """Show the pay period covered by PAY_DATE at FREQUENCY."""
    try:
        date_value = parse_pay_date(pay_date)
    except ValueError:
        raise click.BadParameter(f"Invalid pay date '{pay_date}'. Use YYYY-MM-DD.")

    start, end = calculate_pay_period_dates(date_value, frequency)
    click.echo(f"{start.isoformat()} to {end.isoformat()}")


@cli.command("pay-run-number")
@click.option("--pay-date", help="Pay date YYYY-MM-DD (default: today).")
def pay_run_number_cmd(pay_date):
    """Generate a new pay run number."""
    try:
        date_value = parse_pay_date(pay_date) if pay_date else None
    except ValueError:
        raise click.BadParameter(f"Invalid pay date '{pay_date}'. Use YYYY-MM-DD.")
    click.echo(generate_pay_run_number(date_value))


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
