"""Federal and state income tax withholding per pay period.

Both use the annualization method: the period's gross pay is scaled to a
year, reduced by allowances, taxed, and the annual tax divided back down to
one period.

Federal tax runs the annual figure through the progressive brackets for the
employee's filing status. State tax applies one effective rate per state;
states with graduated brackets are approximated by their table rate.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence

from ..money import round_cents, round_whole
from ..schemas import ReciprocityAgreement, StateWithholdingBreakdown, WorkStateAllocation
from .brackets import calculate_progressive_tax
from .tables import TaxTableProvider, get_pay_periods, get_tax_tables

# Annual income excluded per allowance claimed
FEDERAL_ALLOWANCE_AMOUNT = 4300
STATE_ALLOWANCE_AMOUNT = 2000


def calc_federal_withholding(
    gross_pay: float,
    pay_frequency: str,
    filing_status: str,
    allowances: int,
    pay_date: Optional[date] = None,
    tables: Optional[TaxTableProvider] = None,
) -> float:
    """Calculate federal income tax withholding for a period.

    Args:
        gross_pay: Gross pay for the period
        pay_frequency: Weekly, Biweekly, Semimonthly or Monthly
        filing_status: Federal filing status (unknown statuses use Single)
        allowances: Federal allowances claimed
        pay_date: Pay date (selects the tax year, default today)
        tables: Tax tables (default: configured tables)

    Returns:
        Federal withholding, rounded to cents
    """
    tables = tables or get_tax_tables()
    pay_date = pay_date or date.today()
    brackets = tables.get_brackets(pay_date.year, filing_status)

    periods = get_pay_periods(pay_frequency)
    annual_gross = gross_pay * periods
    taxable_income = max(0, annual_gross - allowances * FEDERAL_ALLOWANCE_AMOUNT)

    annual_tax = calculate_progressive_tax(taxable_income, brackets)
    return round_cents(annual_tax / periods)


def calc_state_withholding(
    gross_pay: float,
    pay_frequency: str,
    state_code: Optional[str] = None,
    filing_status: Optional[str] = None,
    allowances: int = 0,
    tables: Optional[TaxTableProvider] = None,
) -> float:
    """Calculate state income tax withholding for a period.

    filing_status is accepted for parity with federal withholding; the
    single-rate state model does not vary by status.

    Returns:
        State withholding rounded to cents (0 for missing, unknown or no-tax states)
    """
    tables = tables or get_tax_tables()
    rate = tables.get_state_rate(state_code)
    if rate == 0:
        return 0.0

    periods = get_pay_periods(pay_frequency)
    annual_gross = gross_pay * periods
    taxable_income = max(0, annual_gross - allowances * STATE_ALLOWANCE_AMOUNT)

    annual_tax = taxable_income * rate
    return round_cents(annual_tax / periods)


@dataclass
class MultiStateWithholding:
    """State withholding split across work states."""

    total_withholding: float
    breakdown: List[StateWithholdingBreakdown] = field(default_factory=list)


def find_reciprocity(
    resident_state: str,
    work_state: str,
    agreements: Sequence[ReciprocityAgreement],
) -> Optional[ReciprocityAgreement]:
    """Find the agreement covering a resident of one state working in another.

    State codes match case-insensitively.
    """
    resident_state = resident_state.upper()
    work_state = work_state.upper()
    for agreement in agreements:
        if (agreement.resident_state.upper() == resident_state
                and agreement.work_state.upper() == work_state):
            return agreement
    return None


def calc_multi_state_withholding(
    gross_pay: float,
    pay_frequency: str,
    work_states: Sequence[WorkStateAllocation],
    resident_state: str,
    filing_status: Optional[str] = None,
    allowances: int = 0,
    reciprocity_agreements: Optional[Sequence[ReciprocityAgreement]] = None,
    tables: Optional[TaxTableProvider] = None,
) -> MultiStateWithholding:
    """Calculate state withholding for an employee working in several states.

    Wages and allowances are allocated to each work state by percentage.
    Where a Full reciprocity agreement exists between the resident state and
    a work state, that share is withheld for the resident state instead.
    Partial and Conditional agreements do not change withholding.

    Returns:
        MultiStateWithholding with the rounded total and a per-state breakdown
    """
    tables = tables or get_tax_tables()
    agreements = reciprocity_agreements or []

    breakdown = []
    total = 0.0
    for allocation in work_states:
        allocated_wages = gross_pay * allocation.percentage / 100
        allocated_allowances = round_whole(allowances * allocation.percentage / 100)

        agreement = find_reciprocity(resident_state, allocation.state_code, agreements)
        reciprocity_applied = agreement is not None and agreement.reciprocity_type == "Full"
        withholding_state = resident_state if reciprocity_applied else allocation.state_code

        withholding = calc_state_withholding(
            allocated_wages,
            pay_frequency,
            withholding_state,
            filing_status,
            allocated_allowances,
            tables=tables,
        )

        breakdown.append(StateWithholdingBreakdown(
            state_code=allocation.state_code,
            gross_wages=round_cents(allocated_wages),
            percentage=allocation.percentage,
            state_withholding=withholding,
            reciprocity_applied=reciprocity_applied,
            reciprocity_state_code=resident_state if reciprocity_applied else None,
        ))
        total += withholding

    return MultiStateWithholding(total_withholding=round_cents(total), breakdown=breakdown)
