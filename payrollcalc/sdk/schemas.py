"""Pydantic schemas for payroll calculation requests and results.

Field names are snake_case in Python. On the wire (remote calculation
service, JSON input files) employee fields use the data API's PascalCase
column names and everything else uses camelCase; aliases map between the
two and either form is accepted on input.

Input schemas use extra='forbid' so typos in request files fail loudly.
Employee rows and remote responses use extra='ignore' since they carry
columns this package has no use for.
"""

from datetime import date
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_pascal


PayType = Literal["Hourly", "Salary"]
ResultSource = Literal["remote", "local"]


class WireModel(BaseModel):
    """Base for camelCase wire models."""

    model_config = ConfigDict(
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Serialize with wire aliases for JSON transport."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Inputs
# =============================================================================


class Employee(BaseModel):
    """Employee payroll settings as stored by the data API."""

    model_config = ConfigDict(
        extra="ignore",
        alias_generator=to_pascal,
        populate_by_name=True,
    )

    id: str = Field(..., description="Employee record ID")
    employee_number: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    pay_type: PayType = Field(..., description="Determines how pay_rate is interpreted")
    pay_rate: float = Field(..., ge=0, description="Hourly rate, or annual salary for Salary")
    pay_frequency: str = Field(
        default="Biweekly",
        description="Weekly, Biweekly, Semimonthly or Monthly (unknown values use 26 periods)",
    )
    federal_filing_status: str = Field(default="Single")
    federal_allowances: int = Field(default=0, ge=0)
    state_code: Optional[str] = None
    state_filing_status: Optional[str] = Field(
        default=None, description="Falls back to federal_filing_status when unset"
    )
    state_allowances: int = Field(default=0, ge=0)
    resident_state: Optional[str] = Field(
        default=None, description="Home state for reciprocity (defaults to state_code)"
    )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class YTDTotals(WireModel):
    """Year-to-date totals as of the start of the period being calculated."""

    gross_pay: float = Field(default=0, ge=0)
    federal_withholding: float = Field(default=0, ge=0)
    state_withholding: float = Field(default=0, ge=0)
    social_security: float = Field(default=0, ge=0)
    medicare: float = Field(default=0, ge=0)
    net_pay: float = 0


class WorkStateAllocation(WireModel):
    """Share of an employee's wages earned in one work state."""

    state_code: str
    percentage: float = Field(..., ge=0, le=100)
    is_primary: bool = False


class ReciprocityAgreement(WireModel):
    """Agreement letting residents of one state skip another state's withholding."""

    resident_state: str
    work_state: str
    reciprocity_type: Literal["Full", "Partial", "Conditional"]


class EmployeePayInput(WireModel):
    """One employee's inputs for a pay period."""

    employee: Employee
    regular_hours: float = Field(..., ge=0)
    overtime_hours: float = Field(..., ge=0)
    other_earnings: float = Field(..., ge=0)
    other_deductions: float = Field(..., ge=0)
    ytd_totals: Optional[YTDTotals] = None
    work_states: Optional[List[WorkStateAllocation]] = None
    reciprocity_agreements: Optional[List[ReciprocityAgreement]] = None


class BatchPayrollRequest(WireModel):
    """A pay run: every employee paid on one pay date."""

    pay_run_id: str = Field(..., min_length=1)
    pay_date: date
    employees: List[EmployeePayInput]


# =============================================================================
# Results
# =============================================================================


class StateWithholdingBreakdown(WireModel):
    """State withholding for one work state of a multi-state employee."""

    model_config = ConfigDict(extra="ignore")

    state_code: str
    gross_wages: float
    percentage: float
    state_withholding: float
    reciprocity_applied: bool = False
    reciprocity_state_code: Optional[str] = None


class PayStubCalculation(WireModel):
    """Computed pay stub for one employee and period.

    Every amount is rounded to cents; net_pay = gross_pay - total_deductions.
    """

    model_config = ConfigDict(extra="ignore")

    employee_id: str
    regular_hours: float
    overtime_hours: float
    regular_pay: float
    overtime_pay: float
    other_earnings: float
    gross_pay: float
    federal_withholding: float
    state_withholding: float
    state_withholding_breakdown: Optional[List[StateWithholdingBreakdown]] = None
    social_security: float
    medicare: float
    other_deductions: float
    total_deductions: float
    net_pay: float


class BatchSummary(WireModel):
    model_config = ConfigDict(extra="ignore")

    employee_count: int
    total_gross_pay: float
    total_deductions: float
    total_net_pay: float
    processing_time_ms: int


class BatchPayrollResponse(WireModel):
    """Results of a pay run and where they were computed.

    source is "remote" when the calculation service produced the results and
    "local" when they were computed in-process. The remote service does not
    send it; the orchestrator sets it.
    """

    model_config = ConfigDict(extra="ignore")

    pay_run_id: str
    pay_date: date
    results: List[PayStubCalculation]
    summary: BatchSummary
    source: Optional[ResultSource] = None
