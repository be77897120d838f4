"""Pay stub calculation for one employee and for a whole pay run.

calculate_pay_stub combines gross pay, federal and state withholding, and
FICA into a single PayStubCalculation. Every call is a pure function of its
inputs; callers own YTD totals and must pass the totals as of the start of
the period being calculated.
"""

import logging
import time
from datetime import date
from typing import Iterable, Optional, Sequence

from .gross_pay import calc_gross_pay
from .money import round_cents
from .schemas import (
    BatchPayrollRequest,
    BatchPayrollResponse,
    BatchSummary,
    Employee,
    EmployeePayInput,
    PayStubCalculation,
    ReciprocityAgreement,
    WorkStateAllocation,
    YTDTotals,
)
from .taxes import (
    TaxTableProvider,
    calc_federal_withholding,
    calc_medicare,
    calc_multi_state_withholding,
    calc_social_security,
    calc_state_withholding,
    get_tax_tables,
)

logger = logging.getLogger(__name__)


def calculate_pay_stub(
    employee: Employee,
    regular_hours: float,
    overtime_hours: float,
    other_earnings: float,
    other_deductions: float,
    ytd_totals: Optional[YTDTotals] = None,
    pay_date: Optional[date] = None,
    work_states: Optional[Sequence[WorkStateAllocation]] = None,
    reciprocity_agreements: Optional[Sequence[ReciprocityAgreement]] = None,
    tables: Optional[TaxTableProvider] = None,
) -> PayStubCalculation:
    """Calculate a complete pay stub for one employee and period.

    Args:
        employee: Employee pay and withholding settings
        regular_hours: Regular hours worked
        overtime_hours: Overtime hours worked
        other_earnings: Additional earnings for the period
        other_deductions: Non-tax deductions for the period
        ytd_totals: Totals before this period (default all zero)
        pay_date: Pay date (default today)
        work_states: Wage allocation across work states; when given, state
            withholding is split across them
        reciprocity_agreements: Agreements applied to the work state split
        tables: Tax tables (default: configured tables)

    Returns:
        PayStubCalculation with every amount rounded to cents
    """
    tables = tables or get_tax_tables()
    ytd = ytd_totals or YTDTotals()
    pay_date = pay_date or date.today()

    gross = calc_gross_pay(employee, regular_hours, overtime_hours, other_earnings)

    federal = calc_federal_withholding(
        gross.gross_pay,
        employee.pay_frequency,
        employee.federal_filing_status,
        employee.federal_allowances,
        pay_date,
        tables=tables,
    )

    state_filing_status = employee.state_filing_status or employee.federal_filing_status
    breakdown = None
    if work_states:
        resident_state = employee.resident_state or employee.state_code or ""
        multi = calc_multi_state_withholding(
            gross.gross_pay,
            employee.pay_frequency,
            work_states,
            resident_state,
            state_filing_status,
            employee.state_allowances,
            reciprocity_agreements,
            tables=tables,
        )
        state = multi.total_withholding
        breakdown = multi.breakdown
    else:
        state = calc_state_withholding(
            gross.gross_pay,
            employee.pay_frequency,
            employee.state_code,
            state_filing_status,
            employee.state_allowances,
            tables=tables,
        )

    social_security = calc_social_security(gross.gross_pay, ytd.gross_pay, pay_date, tables=tables)
    medicare = calc_medicare(gross.gross_pay, ytd.gross_pay, tables=tables)

    other_deductions = round_cents(other_deductions)
    total_deductions = round_cents(federal + state + social_security + medicare + other_deductions)
    net_pay = round_cents(gross.gross_pay - total_deductions)

    return PayStubCalculation(
        employee_id=employee.id,
        regular_hours=regular_hours,
        overtime_hours=overtime_hours,
        regular_pay=gross.regular_pay,
        overtime_pay=gross.overtime_pay,
        other_earnings=round_cents(other_earnings),
        gross_pay=gross.gross_pay,
        federal_withholding=federal,
        state_withholding=state,
        state_withholding_breakdown=breakdown,
        social_security=social_security,
        medicare=medicare,
        other_deductions=other_deductions,
        total_deductions=total_deductions,
        net_pay=net_pay,
    )


def calculate_single_pay_stub(
    pay_input: EmployeePayInput,
    pay_date: Optional[date] = None,
    tables: Optional[TaxTableProvider] = None,
) -> PayStubCalculation:
    """Calculate a pay stub from a batch-style EmployeePayInput."""
    return calculate_pay_stub(
        pay_input.employee,
        pay_input.regular_hours,
        pay_input.overtime_hours,
        pay_input.other_earnings,
        pay_input.other_deductions,
        ytd_totals=pay_input.ytd_totals,
        pay_date=pay_date,
        work_states=pay_input.work_states,
        reciprocity_agreements=pay_input.reciprocity_agreements,
        tables=tables,
    )


def summarize_results(
    results: Iterable[PayStubCalculation],
    processing_time_ms: int = 0,
) -> BatchSummary:
    """Sum pay stub results into a pay run summary (totals rounded to cents)."""
    results = list(results)
    return BatchSummary(
        employee_count=len(results),
        total_gross_pay=round_cents(sum(r.gross_pay for r in results)),
        total_deductions=round_cents(sum(r.total_deductions for r in results)),
        total_net_pay=round_cents(sum(r.net_pay for r in results)),
        processing_time_ms=processing_time_ms,
    )


def elapsed_ms(started_at: float) -> int:
    """Milliseconds since a time.perf_counter() reading."""
    return int(round((time.perf_counter() - started_at) * 1000))


def calculate_batch_locally(
    request: BatchPayrollRequest,
    started_at: Optional[float] = None,
    tables: Optional[TaxTableProvider] = None,
) -> BatchPayrollResponse:
    """Calculate every pay stub in a pay run in-process.

    Args:
        request: Pay run to calculate
        started_at: time.perf_counter() reading when the pay run call began,
            so processing time covers any failed remote attempt too
        tables: Tax tables (default: configured tables)

    Returns:
        BatchPayrollResponse with source="local"
    """
    if started_at is None:
        started_at = time.perf_counter()
    tables = tables or get_tax_tables()

    results = [
        calculate_single_pay_stub(pay_input, request.pay_date, tables=tables)
        for pay_input in request.employees
    ]
    summary = summarize_results(results, elapsed_ms(started_at))
    logger.debug(
        f"pay run {request.pay_run_id}: {summary.employee_count} employees "
        f"calculated locally in {summary.processing_time_ms}ms"
    )

    return BatchPayrollResponse(
        pay_run_id=request.pay_run_id,
        pay_date=request.pay_date,
        results=results,
        summary=summary,
        source="local",
    )
