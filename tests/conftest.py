"""Shared fixtures and builders for payroll-calc tests."""

import pytest

from payrollcalc.sdk import Employee, EmployeePayInput, YTDTotals
from payrollcalc.sdk.taxes import TaxTableProvider, clear_table_cache


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the SDK at an empty config directory and clear env overrides."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("PAYROLL_CALC_CONFIG_PATH", str(config_dir))
    for var in ("PAYROLL_CALC_REMOTE_URL", "PAYROLL_CALC_REMOTE_TOKEN", "PAYROLL_CALC_TAX_TABLES"):
        monkeypatch.delenv(var, raising=False)
    clear_table_cache()
    return config_dir


@pytest.fixture
def tables():
    """Provider for the bundled tax tables."""
    return TaxTableProvider()


def _make_employee(**overrides) -> Employee:
    """Create an hourly biweekly Single employee with no state tax."""
    fields = {
        "id": "emp-1",
        "pay_type": "Hourly",
        "pay_rate": 25.0,
        "pay_frequency": "Biweekly",
        "federal_filing_status": "Single",
        "federal_allowances": 1,
        "state_code": "TX",
    }
    fields.update(overrides)
    return Employee(**fields)


def _make_pay_input(employee: Employee = None, **overrides) -> EmployeePayInput:
    """Create a pay input for 80 regular hours with nothing else."""
    fields = {
        "employee": employee or _make_employee(),
        "regular_hours": 80,
        "overtime_hours": 0,
        "other_earnings": 0,
        "other_deductions": 0,
        "ytd_totals": YTDTotals(),
    }
    fields.update(overrides)
    return EmployeePayInput(**fields)


@pytest.fixture
def make_employee():
    return _make_employee


@pytest.fixture
def make_pay_input():
    return _make_pay_input
