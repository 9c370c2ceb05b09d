"""
Value types shared by the benchmark pipeline.

Responsibilities:
- Describe the requester profile used as the matching key.
- Describe the outcome of tier resolution (tier + metadata payload).
- Map experience to its fixed bucket.

Non-Responsibilities:
- No database access.
- No rendering.

Invariant:
MatchMetadata.sample_count always equals the size of the matched set.
"""

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from storage.repositories.base import PayslipRecord


class MatchTier(str, enum.Enum):
    """Fallback levels, ordered from strongest to weakest evidence."""

    FULL_MATCH = "full_match"
    EXPERIENCE_MATCH = "experience_match"
    REGION_MATCH = "region_match"
    TITLE_MATCH = "title_match"
    LIMITED_DATA = "limited_data"
    INSUFFICIENT_DATA = "insufficient_data"

    @property
    def label(self) -> str:
        return _TIER_LABELS[self]


_TIER_LABELS = {
    MatchTier.FULL_MATCH: "Full match",
    MatchTier.EXPERIENCE_MATCH: "Experience match",
    MatchTier.REGION_MATCH: "Region match",
    MatchTier.TITLE_MATCH: "Title match",
    MatchTier.LIMITED_DATA: "Limited data",
    MatchTier.INSUFFICIENT_DATA: "Insufficient data",
}


@dataclass(frozen=True)
class ExperienceBucket:
    """Inclusive experience range. maximum is None for the open 10+ bucket."""

    minimum: int
    maximum: Optional[int]

    @property
    def label(self) -> str:
        if self.maximum is None:
            return f"{self.minimum}+ years"
        return f"{self.minimum}-{self.maximum} years"

    def as_list(self) -> List[Optional[int]]:
        return [self.minimum, self.maximum]


EXPERIENCE_BUCKETS: Tuple[ExperienceBucket, ...] = (
    ExperienceBucket(0, 3),
    ExperienceBucket(4, 9),
    ExperienceBucket(10, None),
)


def experience_bucket(years: int) -> ExperienceBucket:
    """Return the fixed bucket containing years (negative values fall in the first)."""
    for bucket in EXPERIENCE_BUCKETS:
        if bucket.maximum is None or years <= bucket.maximum:
            return bucket
    return EXPERIENCE_BUCKETS[-1]


@dataclass(frozen=True)
class Profile:
    """Matching key taken from a report."""

    job_title_id: Optional[int]
    experience: int
    region_id: Optional[int] = None
    statistical_group: Optional[str] = None
    region_name: Optional[str] = None
    job_title_name: Optional[str] = None
    skill_ids: FrozenSet[int] = field(default_factory=frozenset)
    exclude_payslip_id: Optional[int] = None

    @classmethod
    def from_report(cls, report) -> "Profile":
        region = report.region
        job_title = report.job_title
        return cls(
            job_title_id=report.job_title_id,
            experience=report.experience or 0,
            region_id=report.region_id,
            statistical_group=region.statistical_group if region is not None else None,
            region_name=region.name if region is not None else None,
            job_title_name=(job_title.name_en or job_title.name) if job_title is not None else None,
            skill_ids=frozenset(report.skill_ids),
            exclude_payslip_id=report.uploaded_payslip_id,
        )


@dataclass(frozen=True)
class MatchMetadata:
    """Descriptive payload attached to a resolved tier."""

    experience_bucket: ExperienceBucket
    user_experience: int
    sample_count: int
    statistical_group: Optional[str] = None
    data_experience_min: Optional[int] = None
    data_experience_max: Optional[int] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None

    @classmethod
    def from_payslips(
        cls,
        payslips: List[PayslipRecord],
        bucket: ExperienceBucket,
        user_experience: int,
        statistical_group: Optional[str] = None,
    ) -> "MatchMetadata":
        experiences = [p.experience for p in payslips]
        salaries = [p.total_salary for p in payslips]
        return cls(
            experience_bucket=bucket,
            user_experience=user_experience,
            sample_count=len(payslips),
            statistical_group=statistical_group,
            data_experience_min=min(experiences) if experiences else None,
            data_experience_max=max(experiences) if experiences else None,
            salary_min=min(salaries) if salaries else None,
            salary_max=max(salaries) if salaries else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "experience_range": self.experience_bucket.as_list(),
            "user_experience": self.user_experience,
            "payslip_count": self.sample_count,
            "statistical_group": self.statistical_group,
            "data_experience_min": self.data_experience_min,
            "data_experience_max": self.data_experience_max,
            "salary_min": self.salary_min,
            "salary_max": self.salary_max,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MatchMetadata":
        low, high = data.get("experience_range") or [0, None]
        return cls(
            experience_bucket=ExperienceBucket(low, high),
            user_experience=data.get("user_experience", 0),
            sample_count=data.get("payslip_count", 0),
            statistical_group=data.get("statistical_group"),
            data_experience_min=data.get("data_experience_min"),
            data_experience_max=data.get("data_experience_max"),
            salary_min=data.get("salary_min"),
            salary_max=data.get("salary_max"),
        )


@dataclass(frozen=True)
class MatchOutcome:
    """Matched payslips together with the tier they were resolved at."""

    payslips: List[PayslipRecord]
    tier: MatchTier
    metadata: MatchMetadata
    description: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.payslips)

    @property
    def salaries(self) -> List[int]:
        return sorted(p.total_salary for p in self.payslips)


@dataclass(frozen=True)
class Percentiles:
    lower: int
    median: int
    upper: int
