"""Payroll Calc CLI."""
