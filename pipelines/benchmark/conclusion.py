"""
Conclusion Generator.

Responsibilities:
- Compute a recommended salary sub-range with the weighted estimate
  ("median gravity").
- Render the narrative template for the resolved tier.
- Write the rendered text to the report's conclusion field.

Non-Responsibilities:
- No tier resolution.
- No percentile computation.
- No commits.

Invariant:
lower <= recommended.low <= recommended.high <= upper, and the same
inputs always render the same text.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, Dict, Optional, Union

from salarybench.config import Settings, get_settings

from .models import MatchMetadata, MatchTier, Percentiles, Profile

Number = Union[int, float, Decimal]

NO_DATA_TEXT = (
    "**Insufficient data**\n\n"
    "Unfortunately we do not yet have enough data to give you a salary estimate "
    "for your profile. Please try again later, once we have collected more payslips."
)


@dataclass(frozen=True)
class RecommendedRange:
    low: float
    high: float


@dataclass(frozen=True)
class Conclusion:
    text: str
    recommended: Optional[RecommendedRange] = None


def position_in_range(experience: int, range_min: int, range_max: int) -> float:
    """Relative position of experience inside [range_min, range_max], clamped to [0, 1]."""
    span = max(range_max - range_min, 1)
    return max(0.0, min(1.0, (experience - range_min) / span))


def recommended_range(
    position: float,
    percentiles: Percentiles,
    sample_count: int,
    settings: Settings,
) -> RecommendedRange:
    """
    Weighted estimate around the median.

    A linear target is placed between the lower and upper percentile by
    position, then pulled toward the median. Small samples pull harder.
    The interval of half-width 15% of the spread is clamped to the
    percentile bounds.
    """
    lower = float(percentiles.lower)
    median = float(percentiles.median)
    upper = float(percentiles.upper)

    span = upper - lower
    position = max(0.0, min(1.0, position))
    linear_target = lower + span * position

    if sample_count < settings.small_sample_ceiling:
        gravity = settings.gravity_small_sample
    else:
        gravity = settings.gravity_large_sample
    weighted_target = median * gravity + linear_target * (1.0 - gravity)

    half_width = span * settings.recommendation_half_width
    low = max(weighted_target - half_width, lower)
    high = min(weighted_target + half_width, upper)
    return RecommendedRange(low=low, high=high)


class ConclusionGenerator:
    """Renders the recommendation and narrative for a finalized report."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._handlers: Dict[MatchTier, Callable[..., Conclusion]] = {
            MatchTier.FULL_MATCH: self._full_match,
            MatchTier.EXPERIENCE_MATCH: self._experience_match,
            MatchTier.REGION_MATCH: self._broad_match,
            MatchTier.TITLE_MATCH: self._broad_match,
            MatchTier.LIMITED_DATA: self._limited_data,
            MatchTier.INSUFFICIENT_DATA: self._insufficient_data,
        }

    def generate(self, report, profile: Optional[Profile] = None) -> Conclusion:
        """
        Render the conclusion from a report's persisted results and store it.

        Args:
            report: Report with payslip_match, match_metadata and percentiles set
            profile: Matching key; derived from the report when omitted

        Returns:
            The rendered Conclusion
        """
        profile = profile or Profile.from_report(report)
        tier = MatchTier(report.payslip_match)
        metadata = MatchMetadata.from_dict(report.match_metadata or {})

        percentiles = None
        if report.median is not None:
            percentiles = Percentiles(
                lower=report.lower_percentile,
                median=report.median,
                upper=report.upper_percentile,
            )

        conclusion = self.render(tier, metadata, percentiles, profile)
        report.conclusion = conclusion.text
        return conclusion

    def render(
        self,
        tier: MatchTier,
        metadata: MatchMetadata,
        percentiles: Optional[Percentiles],
        profile: Profile,
    ) -> Conclusion:
        if percentiles is None or metadata.sample_count == 0:
            return Conclusion(text=NO_DATA_TEXT)
        return self._handlers[tier](tier, metadata, percentiles, profile)

    # Formatting

    def format_salary(self, amount: Number) -> str:
        """Round to the display granularity, e.g. 44650 -> '45.000 kr.'."""
        granularity = Decimal(self.settings.rounding_granularity)
        rounded = (Decimal(str(amount)) / granularity).quantize(
            Decimal("1"), rounding=ROUND_HALF_UP
        ) * granularity
        digits = f"{int(rounded):,}".replace(",", self.settings.thousands_separator)
        return f"{digits} {self.settings.currency_suffix}"

    def _band(self, position: float) -> str:
        if position <= self.settings.position_band_low:
            return "low"
        if position >= self.settings.position_band_high:
            return "high"
        return "middle"

    # Templates

    def _bucket_position(self, metadata, percentiles, profile):
        bucket = metadata.experience_bucket
        range_max = bucket.maximum
        if range_max is None:
            range_max = self.settings.open_bucket_ceiling
        position = position_in_range(profile.experience, bucket.minimum, range_max)
        recommended = recommended_range(
            position, percentiles, metadata.sample_count, self.settings
        )
        return position, recommended

    def _bucket_position_text(self, position, metadata, percentiles, profile) -> str:
        experience = profile.experience
        label = metadata.experience_bucket.label
        lower = self.format_salary(percentiles.lower)
        upper = self.format_salary(percentiles.upper)
        band = self._band(position)

        if band == "low":
            return (
                f"With {experience} years of experience you are relatively new in this "
                f"category ({label}). It is natural to sit closer to {lower} than {upper} "
                "right now.\n\nIt also means you have strong growth potential in the coming years."
            )
        if band == "high":
            return (
                f"With {experience} years of experience you are in the experienced part of "
                f"this category ({label}). You should expect to be in the upper part of the "
                f"range, closer to {upper}."
            )
        return (
            f"With {experience} years of experience you sit around the middle of this "
            f"category ({label}). You should expect to be around the median, with potential "
            "to reach the upper part as you build more experience."
        )

    def _recommendation_line(self, recommended: RecommendedRange) -> str:
        return (
            f"🎯 **Recommended salary ask:** {self.format_salary(recommended.low)} "
            f"to {self.format_salary(recommended.high)}"
        )

    def _full_match(self, tier, metadata, percentiles, profile) -> Conclusion:
        job_title = profile.job_title_name or "your role"
        region = profile.statistical_group or "your region"
        position, recommended = self._bucket_position(metadata, percentiles, profile)

        text = (
            f"**Your market value:** Our data shows that a {job_title} in {region} with "
            f"{metadata.experience_bucket.label} of experience typically earns around "
            f"{self.format_salary(percentiles.median)} (median).\n\n"
            f"**Our analysis of your profile:** "
            f"{self._bucket_position_text(position, metadata, percentiles, profile)}\n\n"
            f"{self._recommendation_line(recommended)}"
        )
        return Conclusion(text=text, recommended=recommended)

    def _experience_match(self, tier, metadata, percentiles, profile) -> Conclusion:
        job_title = profile.job_title_name or "your role"
        position, recommended = self._bucket_position(metadata, percentiles, profile)

        text = (
            f"**Your market value:** Nationwide, our data shows that a {job_title} with "
            f"{metadata.experience_bucket.label} of experience typically earns around "
            f"{self.format_salary(percentiles.median)} (median).\n\n"
            f"**Our analysis of your profile:** "
            f"{self._bucket_position_text(position, metadata, percentiles, profile)}\n\n"
            f"{self._recommendation_line(recommended)}"
        )
        return Conclusion(text=text, recommended=recommended)

    def _broad_match(self, tier, metadata, percentiles, profile) -> Conclusion:
        data_min = metadata.data_experience_min
        data_max = metadata.data_experience_max
        if data_min is None:
            data_min = 0
        if data_max is None:
            data_max = self.settings.open_bucket_ceiling

        if profile.experience > data_max:
            return self._above_span(data_min, data_max, metadata, percentiles, profile)
        if profile.experience < data_min:
            return self._below_span(data_min, data_max, metadata, percentiles, profile)

        experience = profile.experience
        position = position_in_range(experience, data_min, data_max)
        recommended = recommended_range(
            position, percentiles, metadata.sample_count, self.settings
        )

        if tier is MatchTier.REGION_MATCH:
            context = f"in {profile.statistical_group or 'your region'}"
        else:
            context = "nationwide"

        band = self._band(position)
        if band == "high":
            placement = (
                "at the experienced end of this data set. Given the spread in the figures we "
                "have calculated a level above average that still accounts for the variation "
                "in the market"
            )
        elif band == "low":
            placement = (
                "in the less experienced part of this data set, which typically indicates "
                "that your market value is in the lower part of the range"
            )
        else:
            placement = "in the middle of this data set in terms of experience"

        text = (
            f"**Data basis:** We compared broadly on experience ({data_min}-{data_max} years) "
            f"{context}.\n\n"
            f"**Your position:** With your {experience} years of experience you are "
            f"{placement}.\n\n"
            f"{self._recommendation_line(recommended)}"
        )
        return Conclusion(text=text, recommended=recommended)

    def _above_span(self, data_min, data_max, metadata, percentiles, profile) -> Conclusion:
        top = metadata.salary_max if metadata.salary_max is not None else percentiles.upper
        text = (
            "**Data basis:** We currently have most data on profiles with less seniority "
            f"than you. This data set covers {data_min}-{data_max} years of experience.\n\n"
            "**Your profile:** As you have considerably more experience than the average "
            "in our database, we cannot yet give you a precise market estimate.\n\n"
            f"📊 **For comparison:** The top for profiles with {data_max} years of "
            f"experience is {self.format_salary(top)}.\n\n"
            f"💡 As a senior profile with {profile.experience} years of experience you "
            "should be around or above this level."
        )
        return Conclusion(text=text)

    def _below_span(self, data_min, data_max, metadata, percentiles, profile) -> Conclusion:
        bottom = metadata.salary_min if metadata.salary_min is not None else percentiles.lower
        text = (
            "**Data basis:** We currently have most data on profiles with more experience "
            f"than you. This data set covers {data_min}-{data_max} years of experience.\n\n"
            "**Your profile:** As you have less experience than most in our database for "
            "this role, we can only give you an indicative estimate.\n\n"
            f"📊 **For comparison:** The bottom for profiles with {data_min} years of "
            f"experience is {self.format_salary(bottom)}.\n\n"
            f"💡 As new in the field with {profile.experience} years of experience it is "
            "natural to start around or below this level, but you have strong growth potential."
        )
        return Conclusion(text=text)

    def _limited_data(self, tier, metadata, percentiles, profile) -> Conclusion:
        job_title = profile.job_title_name or "your role"
        text = (
            f"**Your market value:** Based on {metadata.sample_count} data points for "
            f"{job_title}, salaries typically fall around "
            f"**{self.format_salary(percentiles.lower)} to "
            f"{self.format_salary(percentiles.upper)}**.\n\n"
            "*This range is based on a limited data set and should only be used as a rough "
            "guide. As we collect more data we will be able to give you a more precise "
            "estimate.*"
        )
        return Conclusion(text=text)

    def _insufficient_data(self, tier, metadata, percentiles, profile) -> Conclusion:
        text = (
            f"**Very limited data ({metadata.sample_count} data points)**\n\n"
            f"📊 **Indicative range:** {self.format_salary(percentiles.lower)} to "
            f"{self.format_salary(percentiles.upper)}\n\n"
            "**Disclaimer:** This estimate is based on a very limited data set and should be "
            "taken with caution. We recommend supplementing it with other sources when "
            "assessing your market value."
        )
        return Conclusion(text=text)
