"""
Match Tier Resolver.

Responsibilities:
- Query the payslip dataset through successively broader filters.
- Stop at the first tier that reaches the minimum sample size.
- Attach tier, metadata and a human description to the result.

Non-Responsibilities:
- No percentile computation.
- No persistence. The caller stores the outcome.

Invariant:
A broader tier is never queried once an earlier tier has reached the
minimum sample size, and results are never merged across tiers.
"""

from dataclasses import dataclass
from typing import List, Optional

from salarybench.config import Settings, get_settings
from salarybench.logger import get_logger
from storage.repositories.base import PayslipRecord, PayslipRepository

from .models import (
    ExperienceBucket,
    MatchMetadata,
    MatchOutcome,
    MatchTier,
    Profile,
    experience_bucket,
)

logger = get_logger()

# Phrasing floor for the "only N data points" description.
MIN_DISPLAY_COUNT = 3


@dataclass(frozen=True)
class _TierQuery:
    tier: MatchTier
    by_region: bool
    by_experience: bool


TIER_ORDER = (
    _TierQuery(MatchTier.FULL_MATCH, by_region=True, by_experience=True),
    _TierQuery(MatchTier.EXPERIENCE_MATCH, by_region=False, by_experience=True),
    _TierQuery(MatchTier.REGION_MATCH, by_region=True, by_experience=False),
    _TierQuery(MatchTier.TITLE_MATCH, by_region=False, by_experience=False),
)


def display_count(count: int) -> int:
    """Count used in phrasing: 0 stays 0, small non-zero counts read as at least 3."""
    if count == 0:
        return 0
    return max(count, MIN_DISPLAY_COUNT)


def describe(tier: MatchTier, profile: Profile, count: int) -> Optional[str]:
    """Human description of how far the match was relaxed."""
    region = profile.region_name or "your region"
    group = profile.statistical_group or "your region"

    if tier is MatchTier.FULL_MATCH:
        return None
    if tier is MatchTier.EXPERIENCE_MATCH:
        return (
            f"Due to limited data in {region} for your profile, the report is based on "
            "national figures for your experience level. Use the figures as a general "
            "market benchmark."
        )
    if tier is MatchTier.REGION_MATCH:
        return (
            "We do not yet have enough profiles at your experience level "
            f"({profile.experience} years), so the report is based on figures from "
            f"{group} across all experience levels. The salary range may therefore be "
            "wider than usual."
        )
    if tier is MatchTier.TITLE_MATCH:
        return (
            "The report shows the general salary level nationwide across all experience "
            "levels, as we need more data for your profile. The figures are indicative only."
        )
    if tier is MatchTier.LIMITED_DATA:
        return (
            f"The report is based on only {count} data points, so the figures are "
            "indicative only."
        )
    return f"Unfortunately we only found {display_count(count)} data points matching your profile."


class MatchTierResolver:
    """Finds the strongest available comparison set for a profile."""

    def __init__(self, payslips: PayslipRepository, settings: Optional[Settings] = None):
        self.payslips = payslips
        self.settings = settings or get_settings()

    def resolve(self, profile: Profile) -> MatchOutcome:
        bucket = experience_bucket(profile.experience)

        if profile.job_title_id is None:
            logger.warning("Profile has no job title, nothing to match")
            return self._outcome([], MatchTier.INSUFFICIENT_DATA, profile, bucket)

        matched: List[PayslipRecord] = []
        tier = MatchTier.TITLE_MATCH
        for step in TIER_ORDER:
            matched = self._query(profile, bucket, step)
            tier = step.tier
            logger.debug(
                "Tier queried",
                tier=tier.value,
                count=len(matched),
                job_title_id=profile.job_title_id,
            )
            if len(matched) >= self.settings.min_sample_size:
                break

        count = len(matched)
        if count < self.settings.min_sample_size:
            tier = MatchTier.INSUFFICIENT_DATA
        elif (
            tier in (MatchTier.REGION_MATCH, MatchTier.TITLE_MATCH)
            and count < self.settings.limited_data_ceiling
        ):
            tier = MatchTier.LIMITED_DATA

        return self._outcome(matched, tier, profile, bucket)

    def _query(
        self, profile: Profile, bucket: ExperienceBucket, step: _TierQuery
    ) -> List[PayslipRecord]:
        # Without a region there is nothing to match on that dimension.
        if step.by_region and profile.statistical_group is None:
            return []

        return self.payslips.list_eligible(
            profile.job_title_id,
            exclude_payslip_id=profile.exclude_payslip_id,
            statistical_group=profile.statistical_group if step.by_region else None,
            experience_min=bucket.minimum if step.by_experience else None,
            experience_max=bucket.maximum if step.by_experience else None,
        )

    def _outcome(
        self,
        matched: List[PayslipRecord],
        tier: MatchTier,
        profile: Profile,
        bucket: ExperienceBucket,
    ) -> MatchOutcome:
        metadata = MatchMetadata.from_payslips(
            matched,
            bucket=bucket,
            user_experience=profile.experience,
            statistical_group=profile.statistical_group,
        )
        return MatchOutcome(
            payslips=matched,
            tier=tier,
            metadata=metadata,
            description=describe(tier, profile, len(matched)),
        )
