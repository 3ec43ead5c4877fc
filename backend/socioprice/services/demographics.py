# backend/socioprice/services/demographics.py

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional

from socioprice.errors import InvalidInput

logger = logging.getLogger("socioprice-backend.demographics")

# ---------------------------------------------
# DIMENSIONS: fixed order used everywhere
# ---------------------------------------------
DIMENSIONS = ("age", "gender", "location", "interest", "income")


class Platform(str, Enum):
    INSTAGRAM = "instagram"
    FACEBOOK = "facebook"
    LINKEDIN = "linkedin"
    TIKTOK = "tiktok"
    PINTEREST = "pinterest"
    THREADS = "threads"


@dataclass
class DemographicDistribution:
    """
    Bucket label -> weight (0..1) for each of the five dimensions.
    Engine outputs keep every non-empty dimension summing to 1.0.
    """
    age: Dict[str, float] = field(default_factory=dict)
    gender: Dict[str, float] = field(default_factory=dict)
    location: Dict[str, float] = field(default_factory=dict)
    interest: Dict[str, float] = field(default_factory=dict)
    income: Dict[str, float] = field(default_factory=dict)

    def get(self, dimension: str) -> Dict[str, float]:
        if dimension not in DIMENSIONS:
            raise KeyError(dimension)
        return getattr(self, dimension)

    def is_empty(self) -> bool:
        return not any(self.get(dim) for dim in DIMENSIONS)

    def filled_dimensions(self) -> int:
        return sum(1 for dim in DIMENSIONS if self.get(dim))

    def to_dict(self) -> Dict[str, Dict[str, float]]:
        return {dim: dict(self.get(dim)) for dim in DIMENSIONS}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Mapping[str, float]]]) -> "DemographicDistribution":
        data = data or {}
        return cls(**{dim: {str(k): float(v) for k, v in (data.get(dim) or {}).items()} for dim in DIMENSIONS})


@dataclass(frozen=True)
class SocialAccountSnapshot:
    platform: Platform
    follower_count: int
    demographics: DemographicDistribution = field(default_factory=DemographicDistribution)
    engagement_rate: Optional[float] = None
    last_updated: Optional[datetime] = None


@dataclass(frozen=True)
class AggregatedDemographics:
    total_followers: int
    demographics: DemographicDistribution
    engagement_rate: Optional[float] = None
    account_count: int = 0

    @classmethod
    def empty(cls) -> "AggregatedDemographics":
        return cls(total_followers=0, demographics=DemographicDistribution())


# ---------------------------------------------
# VALIDATION
# ---------------------------------------------
def validate_distribution(distribution: DemographicDistribution) -> None:
    for dim in DIMENSIONS:
        for label, weight in distribution.get(dim).items():
            if not isinstance(weight, (int, float)) or not math.isfinite(weight):
                raise InvalidInput(f"{dim} bucket {label!r} has a non-numeric weight")
            if weight < 0 or weight > 1:
                raise InvalidInput(f"{dim} bucket {label!r} weight {weight} is outside 0..1")


def validate_snapshot(account: SocialAccountSnapshot) -> None:
    if account.follower_count < 0:
        raise InvalidInput(f"{account.platform.value}: follower count cannot be negative")
    if account.engagement_rate is not None and not (0 <= account.engagement_rate <= 1):
        raise InvalidInput(f"{account.platform.value}: engagement rate must be between 0 and 1")
    validate_distribution(account.demographics)


# ---------------------------------------------
# BOUNDARY CONVERSIONS
# ---------------------------------------------
def to_fractions(percentages: Mapping[str, float]) -> Dict[str, float]:
    """0-100 percentages -> 0-1 fractions."""
    return {label: value / 100.0 for label, value in percentages.items()}


def engagement_rate_from_counts(likes: float, comments: float, followers: int) -> Optional[float]:
    """
    Likes-equivalent per follower, comments counting three times a like.
    """
    if likes < 0 or comments < 0:
        raise InvalidInput("likes and comments cannot be negative")
    if followers <= 0:
        return None
    return min((likes + comments * 3) / followers, 1.0)


# ---------------------------------------------
# AGGREGATION
# ---------------------------------------------
def normalize(buckets: Mapping[str, float]) -> Dict[str, float]:
    total = sum(buckets.values())
    if total <= 0:
        return {}
    return {label: value / total for label, value in buckets.items() if value > 0}


def _merged_engagement(accounts: List[SocialAccountSnapshot]) -> Optional[float]:
    rated = [a for a in accounts if a.engagement_rate is not None]
    if not rated:
        return None

    followers = sum(a.follower_count for a in rated)
    if followers == 0:
        return sum(a.engagement_rate for a in rated) / len(rated)
    return sum(a.engagement_rate * a.follower_count for a in rated) / followers


def aggregate_demographics(
    accounts: Iterable[SocialAccountSnapshot],
    weight_by_followers: bool = False,
) -> AggregatedDemographics:
    """
    Merges every account's distributions into one normalized distribution.

    By default each account's buckets are added as-is, so a 500 follower
    account moves the result as much as a 500k one. With
    weight_by_followers=True buckets are scaled by the account's follower
    count first; accounts with zero followers then contribute nothing.
    """
    accounts = list(accounts)
    if not accounts:
        return AggregatedDemographics.empty()

    totals: Dict[str, Dict[str, float]] = {dim: {} for dim in DIMENSIONS}
    total_followers = 0

    for account in accounts:
        validate_snapshot(account)
        total_followers += account.follower_count
        weight = account.follower_count if weight_by_followers else 1

        for dim in DIMENSIONS:
            bucket = totals[dim]
            for label, value in account.demographics.get(dim).items():
                bucket[label] = bucket.get(label, 0.0) + value * weight

    merged = DemographicDistribution(**{dim: normalize(totals[dim]) for dim in DIMENSIONS})

    logger.debug(
        "Aggregated %d accounts (%d followers, weighted=%s)",
        len(accounts), total_followers, weight_by_followers,
    )

    return AggregatedDemographics(
        total_followers=total_followers,
        demographics=merged,
        engagement_rate=_merged_engagement(accounts),
        account_count=len(accounts),
    )


# ---------------------------------------------
# FRESHNESS
# ---------------------------------------------
STALE_AFTER = timedelta(hours=24)


def is_stale(account: SocialAccountSnapshot, now: Optional[datetime] = None) -> bool:
    """
    True when the snapshot is older than STALE_AFTER or has no timestamp.
    Naive timestamps are read as UTC.
    """
    if account.last_updated is None:
        return True
    updated = account.last_updated
    if updated.tzinfo is None:
        updated = updated.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return now - updated > STALE_AFTER
