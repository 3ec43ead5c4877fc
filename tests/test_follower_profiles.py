import pytest

from socioprice.services.follower_profiles import FollowerRecord, income_tier, profile_followers


def test_profile_followers():
    records = [
        FollowerRecord("San Francisco", "Technology", "Senior Engineer"),
        FollowerRecord("San Francisco", "Technology", "Senior Engineer"),
        FollowerRecord("London", "Finance", "Analyst"),
        FollowerRecord(),
    ]
    dist = profile_followers(records)

    assert dist.location == pytest.approx({"San Francisco": 2 / 3, "London": 1 / 3})
    assert dist.interest == pytest.approx({"Technology": 2 / 3, "Finance": 1 / 3})
    assert dist.income == pytest.approx({"High": 2 / 3, "Medium-High": 1 / 3})
    assert dist.age == {}


def test_no_records_gives_empty_distribution():
    assert profile_followers([]).is_empty()


@pytest.mark.parametrize("income,tier", [
    (200_000, "Very High"),
    (150_000, "High"),
    (85_000, "Medium-High"),
    (55_000, "Medium"),
    (40_000, "Medium-Low"),
    (30_000, "Low"),
])
def test_income_tier(income, tier):
    assert income_tier(income) == tier
