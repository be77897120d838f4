"""taxes - Tax tables and withholding logic.

Scope:
- Federal bracket tables, state rates and FICA parameters (tax_tables/*.yaml)
- Progressive bracket computation
- Per-period withholding calculations (federal, state, multi-state, SS, Medicare)

Constraints:
- Pure calculation - no employee storage, no network access
- Receives period inputs and YTD totals, returns rounded amounts
- Missing tables, states or filing statuses resolve to documented defaults

Modules:
- tables: Tax table loading and year/state resolution
- brackets: Progressive bracket math and table invariants
- withholding: Federal and state income tax withholding
- fica: Social Security and Medicare with YTD thresholds

Usage:
    from payrollcalc.sdk.taxes import calc_federal_withholding, get_tax_tables

    fit = calc_federal_withholding(2000, "Biweekly", "Single", 1, date(2025, 1, 15))
    table = get_tax_tables().get_federal_table(2025)
"""

from .tables import (
    TaxTableProvider,
    TaxTableError,
    get_tax_tables,
    get_pay_periods,
    clear_table_cache,
    PAY_PERIODS,
)

from .schemas import (
    TaxBracket,
    FederalTaxTable,
    StateTaxInfo,
    FicaRules,
)

from .brackets import (
    calculate_progressive_tax,
    compute_flat_amounts,
)

from .withholding import (
    calc_federal_withholding,
    calc_state_withholding,
    calc_multi_state_withholding,
    find_reciprocity,
    MultiStateWithholding,
    FEDERAL_ALLOWANCE_AMOUNT,
    STATE_ALLOWANCE_AMOUNT,
)

from .fica import (
    calc_social_security,
    calc_medicare,
)

__all__ = [
    # Tables
    "TaxTableProvider",
    "TaxTableError",
    "get_tax_tables",
    "get_pay_periods",
    "clear_table_cache",
    "PAY_PERIODS",
    "TaxBracket",
    "FederalTaxTable",
    "StateTaxInfo",
    "FicaRules",
    # Brackets
    "calculate_progressive_tax",
    "compute_flat_amounts",
    # Withholding
    "calc_federal_withholding",
    "calc_state_withholding",
    "calc_multi_state_withholding",
    "find_reciprocity",
    "MultiStateWithholding",
    "FEDERAL_ALLOWANCE_AMOUNT",
    "STATE_ALLOWANCE_AMOUNT",
    # FICA
    "calc_social_security",
    "calc_medicare",
]
