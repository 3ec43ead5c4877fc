from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from socioprice.services.demographics import (
    DIMENSIONS,
    DemographicDistribution,
    Platform,
    SocialAccountSnapshot,
    engagement_rate_from_counts,
    to_fractions,
)
from socioprice.services.follower_profiles import FollowerRecord


class DistributionPayload(BaseModel):
    """Bucket weights per dimension, sent either as 0-1 fractions or 0-100 percentages."""

    model_config = ConfigDict(allow_inf_nan=False)

    age: Dict[str, float] = Field(default_factory=dict)
    gender: Dict[str, float] = Field(default_factory=dict)
    location: Dict[str, float] = Field(default_factory=dict)
    interest: Dict[str, float] = Field(default_factory=dict)
    income: Dict[str, float] = Field(default_factory=dict)
    unit: Literal["fraction", "percent"] = "fraction"

    def to_distribution(self) -> DemographicDistribution:
        convert = to_fractions if self.unit == "percent" else dict
        return DemographicDistribution(**{dim: convert(getattr(self, dim)) for dim in DIMENSIONS})


class EngagementCounts(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    likes: float
    comments: float = 0


class AccountPayload(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    platform: Platform
    follower_count: int
    demographics: DistributionPayload = Field(default_factory=DistributionPayload)
    engagement_rate: Optional[float] = None
    engagement: Optional[EngagementCounts] = None
    last_updated: Optional[datetime] = None

    def to_snapshot(self) -> SocialAccountSnapshot:
        rate = self.engagement_rate
        if rate is None and self.engagement is not None:
            rate = engagement_rate_from_counts(
                self.engagement.likes, self.engagement.comments, self.follower_count
            )

        return SocialAccountSnapshot(
            platform=self.platform,
            follower_count=self.follower_count,
            demographics=self.demographics.to_distribution(),
            engagement_rate=rate,
            last_updated=self.last_updated,
        )


class ConnectAccountPayload(AccountPayload):
    user_id: str


class RemoveAccountPayload(BaseModel):
    user_id: str
    platform: Platform


class FollowerRecordPayload(BaseModel):
    location: Optional[str] = None
    industry: Optional[str] = None
    position: Optional[str] = None

    def to_record(self) -> FollowerRecord:
        return FollowerRecord(location=self.location, industry=self.industry, position=self.position)


class LinkedInFollowersPayload(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    user_id: str
    followers: List[FollowerRecordPayload]
    follower_count: Optional[int] = None  # defaults to len(followers)
    engagement_rate: Optional[float] = None
