"""
Report Finalization Orchestrator.

Responsibilities:
- Resolve the matched payslip set for a report.
- Compute percentiles and persist statistics, tier and metadata.
- Score and attach job postings.
- Render the conclusion and set the completion status.

Non-Responsibilities:
- No matching, scoring or rendering logic of its own.
- No input validation or cleaning.

Invariant:
Re-running finalization against unchanged data is idempotent: it
reproduces identical percentiles, tier, metadata and conclusion.
"""

import threading
from contextlib import contextmanager
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from salarybench.config import Settings, get_settings
from salarybench.database import Report, ReportStatus
from salarybench.errors import ReportNotFoundError
from salarybench.logger import get_logger
from storage.repositories.base import (
    JobPostingRepository,
    PayslipRepository,
    ReportRepository,
)
from storage.repositories.sql import (
    SqlJobPostingRepository,
    SqlPayslipRepository,
    SqlReportRepository,
)

from .conclusion import Conclusion, ConclusionGenerator
from .models import MatchOutcome, Profile
from .percentiles import calculate_percentiles
from .posting_scorer import JobPostingScorer
from .tier_resolver import MatchTierResolver

logger = get_logger()


class _ReportLock:
    """A lock plus the number of callers holding or waiting on it."""

    def __init__(self):
        self.lock = threading.Lock()
        self.users = 0


_locks_guard = threading.Lock()
_report_locks: Dict[int, _ReportLock] = {}


@contextmanager
def report_lock(report_id: int):
    """Serialize finalization of one report within this process.

    The entry is dropped once its last user releases it.
    """
    with _locks_guard:
        entry = _report_locks.get(report_id)
        if entry is None:
            entry = _report_locks[report_id] = _ReportLock()
        entry.users += 1
    try:
        with entry.lock:
            yield
    finally:
        with _locks_guard:
            entry.users -= 1
            if entry.users == 0:
                del _report_locks[report_id]


class ReportFinalizer:
    """Runs the full benchmark pipeline for a single report."""

    def __init__(
        self,
        session: Optional[Session] = None,
        settings: Optional[Settings] = None,
        payslips: Optional[PayslipRepository] = None,
        postings: Optional[JobPostingRepository] = None,
        reports: Optional[ReportRepository] = None,
    ):
        if session is None and None in (payslips, postings, reports):
            raise ValueError("ReportFinalizer needs a session or all three repositories")

        self.session = session
        self.settings = settings or get_settings()
        self.payslips = payslips or SqlPayslipRepository(session)
        self.postings = postings or SqlJobPostingRepository(session)
        self.reports = reports or SqlReportRepository(session)

        self.resolver = MatchTierResolver(self.payslips, self.settings)
        self.scorer = JobPostingScorer(self.postings, self.reports)
        self.conclusions = ConclusionGenerator(self.settings)

    def finalize(self, report_id: int) -> Report:
        """
        Finalize a report and commit the result.

        Args:
            report_id: Report to finalize

        Returns:
            The updated report

        Raises:
            ReportNotFoundError: If the report does not exist
        """
        with report_lock(report_id):
            report = self.reports.get(report_id)
            if report is None:
                raise ReportNotFoundError(report_id)

            self.finalize_report(report)

            if self.session is not None:
                self.session.commit()

        return report

    def finalize_report(self, report) -> Conclusion:
        """Apply the pipeline to a loaded report without committing."""
        profile = Profile.from_report(report)
        outcome = self.resolver.resolve(profile)

        scored = self.scorer.find_and_attach(report, profile)

        self._store_outcome(report, outcome)
        conclusion = self.conclusions.generate(report, profile)

        if profile.job_title_id is not None:
            report.active_job_postings_count = self.postings.count_from_source(
                profile.job_title_id, self.settings.postings_source
            )
        else:
            report.active_job_postings_count = 0

        awaiting = report.status == ReportStatus.AWAITING_DATA.value
        logger.record_finalization(outcome.tier.value, awaiting)
        logger.record_postings_scored(len(scored))
        logger.info(
            "Report finalized",
            report_id=report.id,
            match_tier=outcome.tier.value,
            payslip_count=outcome.count,
            status=report.status,
        )
        return conclusion

    def _store_outcome(self, report, outcome: MatchOutcome) -> None:
        self.reports.replace_payslips(report, [p.id for p in outcome.payslips])

        if outcome.count > 0:
            percentiles = calculate_percentiles(outcome.salaries)
            report.lower_percentile = percentiles.lower
            report.median = percentiles.median
            report.upper_percentile = percentiles.upper
            report.status = ReportStatus.COMPLETED.value
        else:
            report.lower_percentile = None
            report.median = None
            report.upper_percentile = None
            report.status = ReportStatus.AWAITING_DATA.value

        report.payslip_match = outcome.tier.value
        report.match_metadata = outcome.metadata.to_dict()
        report.description = outcome.description

    def finalize_pending(self) -> List[Report]:
        """Finalize every report still in draft, in id order."""
        pending = self.reports.list_by_status(ReportStatus.DRAFT.value)
        finalized = [self.finalize(report.id) for report in pending]
        logger.log_metrics_summary()
        return finalized
