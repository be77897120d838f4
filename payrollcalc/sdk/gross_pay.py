"""Gross pay for a pay period.

Hourly employees are paid for hours worked with overtime at time and a
half. Salaried employees are paid their annual salary divided evenly across
the year's pay periods and are treated as overtime-exempt.
"""

from dataclasses import dataclass

from .money import round_cents
from .schemas import Employee
from .taxes.tables import get_pay_periods

OVERTIME_MULTIPLIER = 1.5

# Standard hours per period for a 2080-hour work year
STANDARD_HOURS = {
    "Weekly": 40,
    "Biweekly": 80,
    "Semimonthly": 86.67,
    "Monthly": 173.33,
}


@dataclass
class GrossPay:
    """Gross pay components for one period, each rounded to cents."""

    regular_pay: float
    overtime_pay: float
    gross_pay: float


def calc_gross_pay(
    employee: Employee,
    regular_hours: float,
    overtime_hours: float = 0,
    other_earnings: float = 0,
) -> GrossPay:
    """Calculate regular, overtime and total gross pay.

    Args:
        employee: Employee pay settings
        regular_hours: Regular hours worked (ignored for salaried employees)
        overtime_hours: Overtime hours worked (ignored for salaried employees)
        other_earnings: Bonuses, commissions and other earnings for the period

    Returns:
        GrossPay with each component rounded independently
    """
    if employee.pay_type == "Hourly":
        regular_pay = regular_hours * employee.pay_rate
        overtime_pay = overtime_hours * employee.pay_rate * OVERTIME_MULTIPLIER
    else:
        regular_pay = employee.pay_rate / get_pay_periods(employee.pay_frequency)
        overtime_pay = 0.0

    gross_pay = regular_pay + overtime_pay + other_earnings

    return GrossPay(
        regular_pay=round_cents(regular_pay),
        overtime_pay=round_cents(overtime_pay),
        gross_pay=round_cents(gross_pay),
    )


def get_default_hours(employee: Employee) -> float:
    """Get the default regular hours to pre-fill for an employee's period.

    Unknown frequencies default to a biweekly 80 hours for salaried employees
    and to 0 for hourly employees, who must enter their actual hours.
    """
    if employee.pay_frequency in STANDARD_HOURS:
        return STANDARD_HOURS[employee.pay_frequency]
    return 80 if employee.pay_type == "Salary" else 0
