"""
Repository interfaces.

Responsibilities:
- Define the read contracts the benchmark pipeline depends on.
- Define the write contract for report associations.
- Define the plain records handed to the pipeline.

Non-Responsibilities:
- No business logic.
- No tier selection.
- No scoring.

Invariant:
Repositories must not encode domain decisions. A filter given as None
means "do not filter on that dimension".
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional


@dataclass(frozen=True)
class PayslipRecord:
    """Eligible payslip as seen by the matching pipeline."""

    id: int
    region_id: Optional[int]
    experience: int
    total_salary: int
    job_title_id: Optional[int] = None
    statistical_group: Optional[str] = None


@dataclass(frozen=True)
class PostingRecord:
    """Job posting with a known salary floor."""

    id: int
    region_id: Optional[int]
    minimum_experience: Optional[int]
    salary_from: int
    skill_ids: FrozenSet[int] = field(default_factory=frozenset)
    job_title_id: Optional[int] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class ScoredPosting:
    posting_id: int
    score: int


class PayslipRepository(ABC):

    @abstractmethod
    def list_eligible(
        self,
        job_title_id: int,
        exclude_payslip_id: Optional[int] = None,
        statistical_group: Optional[str] = None,
        experience_min: Optional[int] = None,
        experience_max: Optional[int] = None,
    ) -> List[PayslipRecord]:
        """
        List verified payslips for a job title that carry a salary.

        Args:
            job_title_id: Job title to match
            exclude_payslip_id: Payslip to leave out (the requester's own)
            statistical_group: Only payslips whose region is in this group
            experience_min: Inclusive lower experience bound
            experience_max: Inclusive upper experience bound

        Returns:
            Matching records ordered by id
        """


class JobPostingRepository(ABC):

    @abstractmethod
    def list_scorable(self, job_title_id: int) -> List[PostingRecord]:
        """List postings for a job title with a known salary floor, ordered by id."""

    @abstractmethod
    def count_from_source(self, job_title_id: int, source: str) -> int:
        """Count postings for a job title published by one feed."""


class ReportRepository(ABC):

    @abstractmethod
    def get(self, report_id: int):
        """Return the report or None."""

    @abstractmethod
    def list_by_status(self, status: str) -> list:
        """Return reports in a given status, ordered by id."""

    @abstractmethod
    def replace_payslips(self, report, payslip_ids: Iterable[int]) -> None:
        """Replace the matched payslips attached to a report."""

    @abstractmethod
    def replace_job_postings(self, report, scored: Iterable[ScoredPosting]) -> None:
        """Replace the scored job postings attached to a report."""
