from .base import (
    JobPostingRepository,
    PayslipRecord,
    PayslipRepository,
    PostingRecord,
    ReportRepository,
    ScoredPosting,
)
from .memory import (
    InMemoryJobPostingRepository,
    InMemoryPayslipRepository,
    InMemoryReportRepository,
)
from .sql import SqlJobPostingRepository, SqlPayslipRepository, SqlReportRepository

__all__ = [
    "JobPostingRepository",
    "PayslipRecord",
    "PayslipRepository",
    "PostingRecord",
    "ReportRepository",
    "ScoredPosting",
    "InMemoryJobPostingRepository",
    "InMemoryPayslipRepository",
    "InMemoryReportRepository",
    "SqlJobPostingRepository",
    "SqlPayslipRepository",
    "SqlReportRepository",
]
