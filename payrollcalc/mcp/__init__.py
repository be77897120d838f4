"""Payroll Calc MCP server."""
