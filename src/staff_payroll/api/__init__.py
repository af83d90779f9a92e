"""HTTP API for staff payroll."""
