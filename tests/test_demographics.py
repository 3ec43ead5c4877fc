import math
from datetime import datetime, timedelta, timezone

import pytest

from socioprice.errors import InvalidInput
from socioprice.services.demographics import (
    DIMENSIONS,
    DemographicDistribution,
    Platform,
    SocialAccountSnapshot,
    aggregate_demographics,
    engagement_rate_from_counts,
    is_stale,
    to_fractions,
)


def account(platform=Platform.INSTAGRAM, followers=1_000, rate=None, **dims):
    return SocialAccountSnapshot(
        platform=platform,
        follower_count=followers,
        engagement_rate=rate,
        demographics=DemographicDistribution(**dims),
    )


def test_no_accounts_gives_empty_aggregate():
    result = aggregate_demographics([])
    assert result.total_followers == 0
    assert result.engagement_rate is None
    assert result.demographics.is_empty()


def test_identical_accounts_merge_to_single_account_shape():
    result = aggregate_demographics([
        account(location={"United States": 1.0}),
        account(platform=Platform.TIKTOK, location={"United States": 1.0}),
    ])
    assert result.demographics.location == {"United States": 1.0}
    assert result.total_followers == 2_000
    assert result.account_count == 2


def test_accounts_count_equally_by_default():
    result = aggregate_demographics([
        account(followers=100, location={"United States": 0.6, "United Kingdom": 0.4}),
        account(followers=9_900, location={"United States": 0.2, "India": 0.8}),
    ])
    assert result.demographics.location == pytest.approx(
        {"United States": 0.4, "United Kingdom": 0.2, "India": 0.4}
    )


def test_weight_by_followers_option():
    accounts = [
        account(followers=100, location={"United States": 1.0}),
        account(followers=300, location={"India": 1.0}),
    ]
    unweighted = aggregate_demographics(accounts)
    weighted = aggregate_demographics(accounts, weight_by_followers=True)

    assert unweighted.demographics.location == pytest.approx({"United States": 0.5, "India": 0.5})
    assert weighted.demographics.location == pytest.approx({"United States": 0.25, "India": 0.75})


def test_weighting_drops_zero_follower_accounts():
    result = aggregate_demographics(
        [account(followers=0, age={"18-24": 1.0})], weight_by_followers=True
    )
    assert result.demographics.age == {}


def test_dimensions_are_normalized_independently(us_high_income, micro_influencer):
    result = aggregate_demographics([us_high_income, micro_influencer])
    for dim in DIMENSIONS:
        buckets = result.demographics.get(dim)
        if buckets:
            assert math.isclose(sum(buckets.values()), 1.0, abs_tol=1e-9)
    # neither account reports income
    assert result.demographics.income == {}


def test_unnormalized_input_is_renormalized():
    result = aggregate_demographics([account(gender={"Female": 0.3, "Male": 0.3})])
    assert result.demographics.gender == pytest.approx({"Female": 0.5, "Male": 0.5})


def test_engagement_is_follower_weighted():
    result = aggregate_demographics([
        account(followers=100, rate=0.1),
        account(followers=300, rate=0.02),
        account(followers=5_000),
    ])
    assert result.engagement_rate == pytest.approx(0.04)


@pytest.mark.parametrize("weight", [-0.1, 1.01, float("nan")])
def test_bad_bucket_weight_rejected(weight):
    with pytest.raises(InvalidInput):
        aggregate_demographics([account(location={"Canada": weight})])


def test_negative_followers_rejected():
    with pytest.raises(InvalidInput):
        aggregate_demographics([account(followers=-5)])


def test_percentages_convert_to_fractions():
    assert to_fractions({"Male": 45, "Female": 55}) == pytest.approx({"Male": 0.45, "Female": 0.55})


def test_engagement_rate_from_counts():
    assert engagement_rate_from_counts(150, 25, 5_000) == pytest.approx(0.045)
    assert engagement_rate_from_counts(10_000, 0, 10) == 1.0
    assert engagement_rate_from_counts(10, 1, 0) is None
    with pytest.raises(InvalidInput):
        engagement_rate_from_counts(-1, 0, 100)


def test_distribution_round_trips_through_dict():
    dist = DemographicDistribution(age={"25-34": 1.0}, interest={"Technology": 1.0})
    assert DemographicDistribution.from_dict(dist.to_dict()) == dist
    assert DemographicDistribution.from_dict(None).is_empty()


def test_staleness():
    now = datetime(2026, 6, 1, 12, 0, tzinfo=timezone.utc)
    fresh = SocialAccountSnapshot(Platform.TIKTOK, 10, last_updated=now - timedelta(hours=23))
    old = SocialAccountSnapshot(Platform.TIKTOK, 10, last_updated=now - timedelta(hours=25))
    naive = SocialAccountSnapshot(Platform.TIKTOK, 10, last_updated=datetime(2026, 6, 1, 11, 0))

    assert not is_stale(fresh, now)
    assert is_stale(old, now)
    assert not is_stale(naive, now)
    assert is_stale(account(), now)
