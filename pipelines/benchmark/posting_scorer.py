"""
Job Posting Scorer.

Responsibilities:
- Select open postings sharing the profile's job title and carrying a salary floor.
- Assign each a discrete relevance score from region, experience and skill overlap.
- Replace any prior scored associations for the report.

Non-Responsibilities:
- No filtering by score. Every candidate is kept, score 0 included.
- No salary statistics.

Invariant:
Given identical inputs, this module must always return the same scores
in the same order.
"""

from typing import FrozenSet, Iterable, List, Optional

from salarybench.logger import get_logger
from storage.repositories.base import (
    JobPostingRepository,
    PostingRecord,
    ReportRepository,
    ScoredPosting,
)

from .models import Profile

logger = get_logger()


def score_posting(
    experience: int,
    region_id: Optional[int],
    skill_ids: Iterable[int],
    posting: PostingRecord,
) -> int:
    """
    Score one posting against a profile (0-10).

    Rules are evaluated in priority order; the first that applies wins.
    """
    region_match = (
        region_id is not None
        and posting.region_id is not None
        and region_id == posting.region_id
    )
    experience_match = experience >= (posting.minimum_experience or 0)
    overlap = len(frozenset(skill_ids) & posting.skill_ids)

    if region_match and experience_match and overlap >= 3:
        return 10
    if region_match and experience_match and 1 <= overlap <= 2:
        return 8
    if region_match and experience_match:
        return 6
    if region_match:
        return 5
    if experience_match and overlap >= 2:
        return 4
    if experience_match or overlap >= 1:
        return 3
    return 0


class JobPostingScorer:
    """Ranks job postings for a profile and stores the ranking on a report."""

    def __init__(
        self,
        postings: JobPostingRepository,
        reports: Optional[ReportRepository] = None,
    ):
        self.postings = postings
        self.reports = reports

    def score(self, profile: Profile) -> List[ScoredPosting]:
        if profile.job_title_id is None:
            logger.warning("Profile has no job title, no postings to score")
            return []

        skill_ids: FrozenSet[int] = frozenset(profile.skill_ids)
        return [
            ScoredPosting(
                posting_id=posting.id,
                score=score_posting(profile.experience, profile.region_id, skill_ids, posting),
            )
            for posting in self.postings.list_scorable(profile.job_title_id)
        ]

    def find_and_attach(self, report, profile: Profile) -> List[ScoredPosting]:
        """
        Score postings for a profile and replace the report's associations.

        Args:
            report: Report the ranking belongs to
            profile: Matching key taken from the report

        Returns:
            Scored postings in posting id order
        """
        if self.reports is None:
            raise RuntimeError("JobPostingScorer needs a ReportRepository to attach scores")

        scored = self.score(profile)
        self.reports.replace_job_postings(report, scored)

        distribution = {}
        for item in scored:
            distribution[item.score] = distribution.get(item.score, 0) + 1
        logger.info(
            "Job postings scored",
            report_id=report.id,
            job_title_id=profile.job_title_id,
            count=len(scored),
            scores_distribution={str(k): v for k, v in sorted(distribution.items())},
        )
        return scored
