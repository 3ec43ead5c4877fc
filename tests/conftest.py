import pytest

from socioprice.services.demographics import DemographicDistribution, Platform, SocialAccountSnapshot


@pytest.fixture(scope="session")
def client():
    from fastapi.testclient import TestClient
    from socioprice.main import app

    return TestClient(app)


@pytest.fixture
def us_high_income():
    return SocialAccountSnapshot(
        platform=Platform.INSTAGRAM,
        follower_count=25_000,
        engagement_rate=0.05,
        demographics=DemographicDistribution(
            age={"18-24": 0.15, "25-34": 0.35, "35-44": 0.30, "45-54": 0.15, "55+": 0.05},
            gender={"Male": 0.45, "Female": 0.53, "Other": 0.02},
            location={
                "United States": 0.65,
                "Canada": 0.15,
                "United Kingdom": 0.10,
                "European Union": 0.05,
                "Other": 0.05,
            },
            interest={"Technology": 0.5, "Business": 0.3, "Education": 0.2},
        ),
    )


@pytest.fixture
def micro_influencer():
    return SocialAccountSnapshot(
        platform=Platform.TIKTOK,
        follower_count=8_500,
        engagement_rate=0.09,
        demographics=DemographicDistribution(
            age={"25-34": 0.7, "35-44": 0.3},
            location={"United States": 0.4, "Australia": 0.6},
        ),
    )
