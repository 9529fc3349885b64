"""Farm payroll processing, ledger posting and task tracking."""

__version__ = "0.1.0"
