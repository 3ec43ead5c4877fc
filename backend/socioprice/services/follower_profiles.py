# backend/socioprice/services/follower_profiles.py

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from socioprice.services.demographics import DemographicDistribution, normalize
from socioprice.services.multipliers import determine_seniority, estimate_income_range

# (exclusive lower bound in USD, label), checked top to bottom
INCOME_TIERS = (
    (150_000, "Very High"),
    (100_000, "High"),
    (70_000, "Medium-High"),
    (50_000, "Medium"),
    (30_000, "Medium-Low"),
)
LOWEST_TIER = "Low"


@dataclass(frozen=True)
class FollowerRecord:
    location: Optional[str] = None
    industry: Optional[str] = None
    position: Optional[str] = None


def income_tier(annual_income: float) -> str:
    for threshold, label in INCOME_TIERS:
        if annual_income > threshold:
            return label
    return LOWEST_TIER


def _count(counts: Dict[str, float], label: Optional[str]) -> None:
    label = (label or "").strip()
    if label:
        counts[label] = counts.get(label, 0) + 1


def profile_followers(records: Iterable[FollowerRecord]) -> DemographicDistribution:
    """
    Builds location / interest / income distributions from individual
    follower records. Income uses the low end of the estimated salary
    band for the record's industry and inferred seniority; records
    without an industry or position carry no income signal.
    """
    locations: Dict[str, float] = {}
    industries: Dict[str, float] = {}
    incomes: Dict[str, float] = {}

    for record in records:
        _count(locations, record.location)
        _count(industries, record.industry)

        if record.industry or record.position:
            low, _ = estimate_income_range(record.industry or "", determine_seniority(record.position or ""))
            _count(incomes, income_tier(low))

    return DemographicDistribution(
        location=normalize(locations),
        interest=normalize(industries),
        income=normalize(incomes),
    )
