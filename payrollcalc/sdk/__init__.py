"""Payroll Calc SDK - Core functionality for payroll withholding and pay runs."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    get_effective_settings,
    get_tax_tables_dir,
    SettingsError,
    DEFAULT_SETTINGS,
)

from .money import round_cents

from .schemas import (
    Employee,
    YTDTotals,
    WorkStateAllocation,
    ReciprocityAgreement,
    EmployeePayInput,
    BatchPayrollRequest,
    StateWithholdingBreakdown,
    PayStubCalculation,
    BatchSummary,
    BatchPayrollResponse,
)

from .gross_pay import (
    GrossPay,
    calc_gross_pay,
    get_default_hours,
)

from .pay_stub import (
    calculate_pay_stub,
    calculate_single_pay_stub,
    calculate_batch_locally,
    summarize_results,
)

from .remote import (
    RemotePayrollClient,
    RemoteCalculationError,
)

from .batch import (
    Availability,
    AvailabilityTracker,
    BatchOrchestrator,
)

from .periods import (
    parse_pay_date,
    calculate_pay_period_dates,
    generate_pay_run_number,
)

from . import taxes

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "unset_setting",
    "get_effective_settings",
    "get_tax_tables_dir",
    "SettingsError",
    "DEFAULT_SETTINGS",
    "round_cents",
    # Schemas
    "Employee",
    "YTDTotals",
    "WorkStateAllocation",
    "ReciprocityAgreement",
    "EmployeePayInput",
    "BatchPayrollRequest",
    "StateWithholdingBreakdown",
    "PayStubCalculation",
    "BatchSummary",
    "BatchPayrollResponse",
    # Gross pay
    "GrossPay",
    "calc_gross_pay",
    "get_default_hours",
    # Pay stubs
    "calculate_pay_stub",
    "calculate_single_pay_stub",
    "calculate_batch_locally",
    "summarize_results",
    # Pay runs
    "RemotePayrollClient",
    "RemoteCalculationError",
    "Availability",
    "AvailabilityTracker",
    "BatchOrchestrator",
    # Periods
    "parse_pay_date",
    "calculate_pay_period_dates",
    "generate_pay_run_number",
    # Taxes module
    "taxes",
]
