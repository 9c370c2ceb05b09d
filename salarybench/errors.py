"""
Exception types raised by SalaryBench.

Data-shape edge cases (missing region, zero-width experience ranges,
empty matches) are handled inline and never raise.
"""


class SalaryBenchError(Exception):
    """Base class for all SalaryBench errors."""
    pass


class ConfigError(SalaryBenchError):
    """Raised when an environment variable holds an invalid value."""
    pass


class ReportNotFoundError(SalaryBenchError):
    """Raised when a report id does not exist."""

    def __init__(self, report_id: int):
        super().__init__(f"Report not found: {report_id}")
        self.report_id = report_id
