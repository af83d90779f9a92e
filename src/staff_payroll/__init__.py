"""Staff attendance and payroll administration for small multi-location shops."""

__version__ = "0.1.0"
