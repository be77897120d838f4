"""Payroll Calc - payroll tax withholding and pay run calculation."""

__version__ = "0.3.0"
