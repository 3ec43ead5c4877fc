import pytest

from socioprice.errors import InvalidInput
from socioprice.services.demographics import AggregatedDemographics, DemographicDistribution
from socioprice.services.segments import generate_segments, top_bucket


def aggregated(**dims):
    return AggregatedDemographics(total_followers=0, demographics=DemographicDistribution(**dims))


def test_core_only_without_age_data():
    segments = generate_segments(AggregatedDemographics.empty(), 59)
    assert [s.name for s in segments] == ["Core Audience"]

    core = segments[0]
    assert core.description == "Your core audience"
    assert core.demographic_target == {}
    point = core.recommended_prices[0]
    assert (point.amount, point.conversion_rate, point.confidence) == (59, 0.045, 0.9)


def test_all_three_segments(us_high_income):
    agg = aggregated(
        age=us_high_income.demographics.age,
        location=us_high_income.demographics.location,
        interest=us_high_income.demographics.interest,
    )
    segments = generate_segments(agg, 100)
    assert [s.name for s in segments] == ["Core Audience", "Premium Segment", "Value Segment"]

    core, premium, value = segments
    assert core.demographic_target == {
        "age": {"25-34": 1.0},
        "location": {"United States": 1.0},
        "interest": {"Technology": 1.0},
    }
    assert core.description == "Your core audience of 25-34 year olds with technology interests in United States"

    assert premium.demographic_target["age"] == {"35-44": 1.0}
    assert premium.demographic_target["interest"] == {"Technology": 0.5, "Business": 0.5}
    assert premium.recommended_prices[0].amount == 130
    assert premium.recommended_prices[0].conversion_rate == 0.025

    assert value.demographic_target == {
        "age": {"18-24": 1.0},
        "interest": {"Technology": 0.5, "Education": 0.5},
        "location": {"Global": 1.0},
    }
    assert value.recommended_prices[0].amount == 70
    assert value.recommended_prices[0].confidence == 0.75


def test_middle_age_band_yields_core_only():
    segments = generate_segments(aggregated(age={"25-34": 1.0}), 40)
    assert len(segments) == 1


def test_open_ended_age_band_counts_as_premium():
    segments = generate_segments(aggregated(age={"25-34": 0.9, "55+": 0.1}), 40)
    assert [s.name for s in segments] == ["Core Audience", "Premium Segment"]
    assert segments[1].demographic_target["age"] == {"55+": 1.0}
    assert segments[1].demographic_target["interest"] == {"Business": 1.0}


def test_unparseable_age_labels_are_ignored():
    segments = generate_segments(aggregated(age={"unknown": 0.5, "25-34": 0.5}), 40)
    assert len(segments) == 1


def test_ties_break_on_label():
    assert top_bucket({"Canada": 0.5, "Australia": 0.5}) == "Australia"
    assert top_bucket({"b": 0.2, "a": 0.2, "c": 0.6}) == "c"
    assert top_bucket({}) is None


def test_segment_prices_round_half_up():
    segments = generate_segments(aggregated(age={"35-44": 1.0}), 25)
    assert segments[1].recommended_prices[0].amount == 33


def test_negative_optimal_price_rejected():
    with pytest.raises(InvalidInput):
        generate_segments(AggregatedDemographics.empty(), -1)


def test_segment_serialization_shape():
    data = generate_segments(aggregated(age={"18-24": 1.0}), 50)[1].to_dict()
    assert set(data) == {"name", "description", "demographicTarget", "recommendedPrices"}
    assert data["recommendedPrices"] == [{"amount": 35, "conversionRate": 0.03, "confidence": 0.75}]
