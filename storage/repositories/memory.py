"""
In-memory Repositories.

Responsibilities:
- Serve the read contracts from plain lists of records.
- Record report associations in dictionaries.

Non-Responsibilities:
- No business logic.
- No persistence.

Invariant:
Filtering semantics must match the SQL repositories exactly.
"""

from typing import Dict, Iterable, List, Optional

from .base import (
    JobPostingRepository,
    PayslipRecord,
    PayslipRepository,
    PostingRecord,
    ReportRepository,
    ScoredPosting,
)


class InMemoryPayslipRepository(PayslipRepository):

    def __init__(self, records: Iterable[PayslipRecord]):
        self.records = list(records)
        self.calls: List[dict] = []

    def list_eligible(
        self,
        job_title_id: int,
        exclude_payslip_id: Optional[int] = None,
        statistical_group: Optional[str] = None,
        experience_min: Optional[int] = None,
        experience_max: Optional[int] = None,
    ) -> List[PayslipRecord]:
        self.calls.append({
            "job_title_id": job_title_id,
            "statistical_group": statistical_group,
            "experience_min": experience_min,
            "experience_max": experience_max,
        })

        matches = []
        for record in self.records:
            if record.job_title_id != job_title_id or record.total_salary is None:
                continue
            if exclude_payslip_id is not None and record.id == exclude_payslip_id:
                continue
            if statistical_group is not None and record.statistical_group != statistical_group:
                continue
            if experience_min is not None and record.experience < experience_min:
                continue
            if experience_max is not None and record.experience > experience_max:
                continue
            matches.append(record)
        return sorted(matches, key=lambda r: r.id)


class InMemoryJobPostingRepository(JobPostingRepository):

    def __init__(self, records: Iterable[PostingRecord]):
        self.records = list(records)

    def list_scorable(self, job_title_id: int) -> List[PostingRecord]:
        return sorted(
            (
                r for r in self.records
                if r.job_title_id == job_title_id and r.salary_from is not None
            ),
            key=lambda r: r.id,
        )

    def count_from_source(self, job_title_id: int, source: str) -> int:
        return sum(
            1 for r in self.records
            if r.job_title_id == job_title_id and r.source == source
        )


class InMemoryReportRepository(ReportRepository):
    """Holds report-like objects keyed by their ``id`` attribute."""

    def __init__(self, reports: Iterable = ()):
        self.reports = {report.id: report for report in reports}
        self.payslips: Dict[int, List[int]] = {}
        self.job_postings: Dict[int, List[ScoredPosting]] = {}

    def get(self, report_id: int):
        return self.reports.get(report_id)

    def list_by_status(self, status: str) -> list:
        return [
            report for _, report in sorted(self.reports.items())
            if report.status == status
        ]

    def replace_payslips(self, report, payslip_ids: Iterable[int]) -> None:
        self.payslips[report.id] = sorted(set(payslip_ids))

    def replace_job_postings(self, report, scored: Iterable[ScoredPosting]) -> None:
        self.job_postings[report.id] = list(scored)
