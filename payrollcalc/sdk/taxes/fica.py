"""Social Security and Medicare withholding with year-to-date thresholds.

Both taxes depend on wages already paid this year:
- Social Security stops once YTD wages reach the annual wage base. A period
  that straddles the base is taxed only on the part below it.
- Medicare adds the Additional Medicare rate on wages above the withholding
  threshold. A period that crosses the threshold pays the additional rate
  only on the part above it.
"""

from datetime import date
from typing import Optional

from ..money import round_cents
from .tables import TaxTableProvider, get_tax_tables


def calc_social_security(
    gross_pay: float,
    ytd_gross_pay: float = 0,
    pay_date: Optional[date] = None,
    tables: Optional[TaxTableProvider] = None,
) -> float:
    """Calculate Social Security withholding for a period.

    Args:
        gross_pay: Gross pay for the period
        ytd_gross_pay: Gross pay earlier this year, before this period
        pay_date: Pay date (selects the wage base year, default today)
        tables: Tax tables (default: configured tables)

    Returns:
        Social Security withheld, rounded to cents
    """
    tables = tables or get_tax_tables()
    pay_date = pay_date or date.today()

    rules = tables.get_fica_rules().social_security
    wage_base = tables.get_ss_wage_base(pay_date.year)

    if ytd_gross_pay >= wage_base:
        return 0.0

    taxable = min(gross_pay, wage_base - ytd_gross_pay)
    return round_cents(taxable * rules.rate)


def calc_medicare(
    gross_pay: float,
    ytd_gross_pay: float = 0,
    tables: Optional[TaxTableProvider] = None,
) -> float:
    """Calculate Medicare withholding for a period, including Additional Medicare.

    Args:
        gross_pay: Gross pay for the period
        ytd_gross_pay: Gross pay earlier this year, before this period
        tables: Tax tables (default: configured tables)

    Returns:
        Medicare withheld (base + additional), rounded to cents
    """
    tables = tables or get_tax_tables()
    rules = tables.get_fica_rules().medicare

    medicare_tax = gross_pay * rules.rate

    new_ytd = ytd_gross_pay + gross_pay
    if new_ytd > rules.additional_threshold:
        additional_wages = min(gross_pay, new_ytd - rules.additional_threshold)
        medicare_tax += additional_wages * rules.additional_rate

    return round_cents(medicare_tax)
