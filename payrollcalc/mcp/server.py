"""Payroll Calc MCP Server - FastMCP implementation for payroll calculation tools."""

import logging
from datetime import date
from typing import Any

from mcp.server.fastmcp import FastMCP
from pydantic import Field

from payrollcalc.sdk import (
    BatchOrchestrator,
    BatchPayrollRequest,
    EmployeePayInput,
    calculate_single_pay_stub,
    parse_pay_date,
)
from payrollcalc.sdk.taxes import get_tax_tables

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("payroll-calc")

# One orchestrator per server process so remote availability carries across calls
_orchestrator: BatchOrchestrator | None = None


def get_orchestrator() -> BatchOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = BatchOrchestrator.from_settings()
    return _orchestrator


# --- Tools ---

@mcp.tool()
async def calculate_pay_stub(
    pay_input: dict[str, Any] = Field(
        description=(
            "Employee pay input: {employee: {Id, PayType, PayRate, PayFrequency, "
            "FederalFilingStatus, FederalAllowances, StateCode, ...}, regularHours, "
            "overtimeHours, otherEarnings, otherDeductions, ytdTotals?, workStates?, "
            "reciprocityAgreements?}"
        ),
    ),
    pay_date: str | None = Field(default=None, description="Pay date YYYY-MM-DD (default: today)"),
) -> dict[str, Any]:
    """Calculate one employee's pay stub: gross pay, withholding, FICA and net pay."""
    try:
        parsed = EmployeePayInput.model_validate(pay_input)
        date_value = parse_pay_date(pay_date) if pay_date else None
        return calculate_single_pay_stub(parsed, date_value).to_wire()
    except Exception as e:
        logger.error(f"Error calculating pay stub: {e}")
        return {"error": str(e)}


@mcp.tool()
async def calculate_batch_payroll(
    request: dict[str, Any] = Field(
        description="Pay run: {payRunId, payDate (YYYY-MM-DD), employees: [pay input, ...]}",
    ),
) -> dict[str, Any]:
    """Calculate a whole pay run.

    Large pay runs use the remote calculation service when configured, with
    local fallback. The response's source field says which path was used.
    """
    try:
        parsed = BatchPayrollRequest.model_validate(request)
        return get_orchestrator().calculate_batch(parsed).to_wire()
    except Exception as e:
        logger.error(f"Error calculating pay run: {e}")
        return {"error": str(e)}


@mcp.tool()
async def get_tax_table(
    year: int | None = Field(default=None, description="Tax year (default: current year)"),
    filing_status: str | None = Field(
        default=None, description="Only this filing status (e.g., 'Single')"
    ),
    state_code: str | None = Field(default=None, description="Also include this state's rate"),
) -> dict[str, Any]:
    """Get the federal brackets (and optionally a state rate) used for withholding."""
    try:
        provider = get_tax_tables()
        year = year or date.today().year
        table = provider.get_federal_table(year)

        statuses = table.filing_statuses
        if filing_status:
            statuses = {filing_status: provider.get_brackets(year, filing_status)}

        result: dict[str, Any] = {
            "year": year,
            "table_year": table.year,
            "filing_statuses": {
                status: [b.model_dump() for b in brackets] for status, brackets in statuses.items()
            },
        }
        if state_code:
            info = provider.get_state_info(state_code)
            result["state"] = {
                "state_code": state_code.upper(),
                "rate": info.rate if info else 0.0,
                "has_progressive_tax": info.has_progressive_tax if info else False,
                "known": info is not None,
            }
        return result
    except Exception as e:
        logger.error(f"Error getting tax table: {e}")
        return {"error": str(e)}


def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
