"""Salary benchmark pipeline: tier resolution, percentiles, scoring, conclusions."""

from .conclusion import Conclusion, ConclusionGenerator, RecommendedRange, recommended_range
from .finalize import ReportFinalizer
from .models import (
    ExperienceBucket,
    MatchMetadata,
    MatchOutcome,
    MatchTier,
    Percentiles,
    Profile,
    experience_bucket,
)
from .percentiles import calculate_percentile, calculate_percentiles
from .posting_scorer import JobPostingScorer, score_posting
from .tier_resolver import MatchTierResolver

__all__ = [
    "Conclusion",
    "ConclusionGenerator",
    "RecommendedRange",
    "recommended_range",
    "ReportFinalizer",
    "ExperienceBucket",
    "MatchMetadata",
    "MatchOutcome",
    "MatchTier",
    "Percentiles",
    "Profile",
    "experience_bucket",
    "calculate_percentile",
    "calculate_percentiles",
    "JobPostingScorer",
    "score_posting",
    "MatchTierResolver",
]
