"""Pay period and pay run helpers."""

import calendar
import random
from datetime import date, datetime, timedelta
from typing import Optional, Tuple, Union


def parse_pay_date(value: Union[str, date]) -> date:
    """Parse a pay date in YYYY-MM-DD format (dates pass through)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value, "%Y-%m-%d").date()


def _month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def calculate_pay_period_dates(pay_date: date, pay_frequency: str) -> Tuple[date, date]:
    """Get the start and end dates of the period paid on pay_date.

    Weekly and biweekly periods end on the pay date. Semimonthly periods run
    1st-15th or 16th-month end; monthly periods cover the calendar month.
    Unknown frequencies are treated as biweekly.

    Returns:
        (start, end) tuple
    """
    if pay_frequency == "Weekly":
        return pay_date - timedelta(days=6), pay_date
    if pay_frequency == "Semimonthly":
        if pay_date.day <= 15:
            return pay_date.replace(day=1), pay_date.replace(day=15)
        return pay_date.replace(day=16), _month_end(pay_date)
    if pay_frequency == "Monthly":
        return pay_date.replace(day=1), _month_end(pay_date)
    return pay_date - timedelta(days=13), pay_date


def generate_pay_run_number(pay_date: Optional[date] = None) -> str:
    """Generate a pay run number like PR20250115-042."""
    pay_date = pay_date or date.today()
    return f"PR{pay_date:%Y%m%d}-{random.randint(0, 999):03d}"
