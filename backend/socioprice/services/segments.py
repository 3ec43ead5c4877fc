# backend/socioprice/services/segments.py

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from socioprice.errors import InvalidInput
from socioprice.services.demographics import DIMENSIONS, AggregatedDemographics
from socioprice.utils.helpers import leading_int, round_half_up

# ---------------------------------------------
# SEGMENT RULES: (price factor, conversion, confidence)
# ---------------------------------------------
CORE_POINT = (1.0, 0.045, 0.9)
PREMIUM_POINT = (1.3, 0.025, 0.8)
VALUE_POINT = (0.7, 0.03, 0.75)

PREMIUM_MIN_AGE = 35
VALUE_MAX_AGE = 25  # exclusive


@dataclass(frozen=True)
class PricePoint:
    amount: int
    conversion_rate: float
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "amount": self.amount,
            "conversionRate": self.conversion_rate,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class Segment:
    name: str
    description: str
    demographic_target: Dict[str, Dict[str, float]]
    recommended_prices: Tuple[PricePoint, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "demographicTarget": {dim: dict(b) for dim, b in self.demographic_target.items()},
            "recommendedPrices": [p.to_dict() for p in self.recommended_prices],
        }


def top_bucket(buckets: Mapping[str, float]) -> Optional[str]:
    """
    Highest-weight label; equal weights resolve to the lexicographically smallest label.
    """
    if not buckets:
        return None
    return min(buckets.items(), key=lambda item: (-item[1], item[0]))[0]


def _age_buckets(age: Mapping[str, float], predicate) -> Dict[str, float]:
    selected = {}
    for label, weight in age.items():
        lower = leading_int(label)
        if lower is not None and predicate(lower):
            selected[label] = weight
    return selected


def _blend(interest: Optional[str], companion: str) -> Dict[str, float]:
    if not interest or interest == companion:
        return {companion: 1.0}
    return {interest: 0.5, companion: 0.5}


def _point(optimal_price: int, rule) -> PricePoint:
    factor, conversion, confidence = rule
    return PricePoint(round_half_up(optimal_price * factor), conversion, confidence)


def generate_segments(aggregated: AggregatedDemographics, optimal_price: int) -> List[Segment]:
    """
    Core audience always, then Premium (an age band starting at 35+) and
    Value (an age band starting under 25) when the age distribution has them.
    """
    if optimal_price < 0:
        raise InvalidInput("optimal price cannot be negative")

    dist = aggregated.demographics
    tops = {dim: top_bucket(dist.get(dim)) for dim in DIMENSIONS}
    top_age, top_location, top_interest = tops["age"], tops["location"], tops["interest"]

    description = "Your core audience"
    if top_age:
        description += f" of {top_age} year olds"
    if top_interest:
        description += f" with {top_interest.lower()} interests"
    if top_location:
        description += f" in {top_location}"

    segments = [
        Segment(
            name="Core Audience",
            description=description,
            demographic_target={dim: {label: 1.0} for dim, label in tops.items() if label},
            recommended_prices=(_point(optimal_price, CORE_POINT),),
        )
    ]

    premium_age = top_bucket(_age_buckets(dist.age, lambda lower: lower >= PREMIUM_MIN_AGE))
    if premium_age:
        target = {"age": {premium_age: 1.0}}
        if top_location:
            target["location"] = {top_location: 1.0}
        target["interest"] = _blend(top_interest, "Business")

        segments.append(Segment(
            name="Premium Segment",
            description=f"Higher income professionals aged {premium_age}",
            demographic_target=target,
            recommended_prices=(_point(optimal_price, PREMIUM_POINT),),
        ))

    value_age = top_bucket(_age_buckets(dist.age, lambda lower: lower < VALUE_MAX_AGE))
    if value_age:
        segments.append(Segment(
            name="Value Segment",
            description="Younger audience, more price-sensitive",
            demographic_target={
                "age": {value_age: 1.0},
                "interest": _blend(top_interest, "Education"),
                "location": {"Global": 1.0},
            },
            recommended_prices=(_point(optimal_price, VALUE_POINT),),
        ))

    return segments
