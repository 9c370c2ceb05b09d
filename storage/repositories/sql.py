"""
SQLAlchemy Repositories.

Responsibilities:
- Translate repository calls into filtered queries.
- Map ORM rows to plain records.
- Replace report associations in the current session.

Non-Responsibilities:
- No business logic.
- No commits. The caller owns the transaction.

Invariant:
Repositories must not encode domain decisions.
"""

from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from salarybench.database import (
    JobPosting,
    Payslip,
    Region,
    Report,
    ReportJobPosting,
)

from .base import (
    JobPostingRepository,
    PayslipRecord,
    PayslipRepository,
    PostingRecord,
    ReportRepository,
    ScoredPosting,
)


class SqlPayslipRepository(PayslipRepository):

    def __init__(self, session: Session):
        self.session = session

    def list_eligible(
        self,
        job_title_id: int,
        exclude_payslip_id: Optional[int] = None,
        statistical_group: Optional[str] = None,
        experience_min: Optional[int] = None,
        experience_max: Optional[int] = None,
    ) -> List[PayslipRecord]:
        query = (
            self.session.query(Payslip, Region.statistical_group)
            .outerjoin(Region, Payslip.region_id == Region.id)
            .filter(Payslip.job_title_id == job_title_id)
            .filter(Payslip.verified_at.isnot(None))
            .filter(Payslip.salary.isnot(None))
        )
        if exclude_payslip_id is not None:
            query = query.filter(Payslip.id != exclude_payslip_id)
        if statistical_group is not None:
            query = query.filter(Region.statistical_group == statistical_group)
        if experience_min is not None:
            query = query.filter(Payslip.experience >= experience_min)
        if experience_max is not None:
            query = query.filter(Payslip.experience <= experience_max)

        return [
            PayslipRecord(
                id=payslip.id,
                region_id=payslip.region_id,
                experience=payslip.experience,
                total_salary=payslip.total_salary,
                job_title_id=payslip.job_title_id,
                statistical_group=group,
            )
            for payslip, group in query.order_by(Payslip.id).all()
        ]


class SqlJobPostingRepository(JobPostingRepository):

    def __init__(self, session: Session):
        self.session = session

    def list_scorable(self, job_title_id: int) -> List[PostingRecord]:
        postings = (
            self.session.query(JobPosting)
            .options(selectinload(JobPosting.skills))
            .filter(JobPosting.job_title_id == job_title_id)
            .filter(JobPosting.salary_from.isnot(None))
            .order_by(JobPosting.id)
            .all()
        )
        return [
            PostingRecord(
                id=posting.id,
                region_id=posting.region_id,
                minimum_experience=posting.minimum_experience,
                salary_from=posting.salary_from,
                skill_ids=frozenset(skill.id for skill in posting.skills),
                job_title_id=posting.job_title_id,
                source=posting.source,
            )
            for posting in postings
        ]

    def count_from_source(self, job_title_id: int, source: str) -> int:
        return (
            self.session.query(func.count(JobPosting.id))
            .filter(JobPosting.job_title_id == job_title_id)
            .filter(JobPosting.source == source)
            .scalar()
        )


class SqlReportRepository(ReportRepository):

    def __init__(self, session: Session):
        self.session = session

    def get(self, report_id: int) -> Optional[Report]:
        return self.session.get(Report, report_id)

    def list_by_status(self, status: str) -> List[Report]:
        return (
            self.session.query(Report)
            .filter(Report.status == status)
            .order_by(Report.id)
            .all()
        )

    def replace_payslips(self, report: Report, payslip_ids: Iterable[int]) -> None:
        ids = sorted(set(payslip_ids))
        if ids:
            payslips = (
                self.session.query(Payslip)
                .filter(Payslip.id.in_(ids))
                .order_by(Payslip.id)
                .all()
            )
        else:
            payslips = []
        report.payslips = payslips

    def replace_job_postings(self, report: Report, scored: Iterable[ScoredPosting]) -> None:
        # Flush deletes before inserts so re-attached postings do not collide.
        report.job_postings.clear()
        self.session.flush()
        report.job_postings.extend(
            ReportJobPosting(job_posting_id=item.posting_id, match_score=item.score)
            for item in scored
        )
