# backend/socioprice/services/pricing_engine.py

import logging
import math
from dataclasses import dataclass
from typing import Optional

from socioprice.errors import InvalidInput, InvalidProductType
from socioprice.services.demographics import AggregatedDemographics, DIMENSIONS, validate_distribution
from socioprice.services.multipliers import industry_multiplier, region_multiplier, weighted_multiplier
from socioprice.utils.helpers import round_half_up

logger = logging.getLogger("socioprice-backend.pricing")


# ---------------------------------------------
# BASE PRICES (USD): price at 100 followers
# with neutral demographics
# ---------------------------------------------
BASE_PRICES = {
    # commerce categories
    "digital_product":    59,
    "physical_product":   89,
    "membership":         29,
    "service":            299,
    "affiliate_product":  119,
    # product formats
    "course":             97,
    "ebook":              27,
    "template":           47,
    "coaching":           147,
    "planner":            27,
    "subscription":       19,
    "software":           79,
    "tutorial":           47,
    "digital_art":        47,
}

# ---------------------------------------------
# ABSOLUTE PRICE BANDS (USD): (min, max)
# ---------------------------------------------
PRICE_BANDS = {
    "digital_product":    (19, 99),
    "physical_product":   (29, 149),
    "membership":         (9, 49),
    "service":            (99, 499),
    "affiliate_product":  (39, 199),
    "course":             (97, 997),
    "ebook":              (17, 67),
    "template":           (27, 147),
    "coaching":           (97, 997),
    "planner":            (17, 97),
    "subscription":       (9, 99),
    "software":           (29, 199),
    "tutorial":           (27, 147),
    "digital_art":        (15, 147),
}

MIN_FOLLOWERS = 100
FOLLOWER_STEP = 0.2          # +20% per 10x followers above 100
ENGAGEMENT_WEIGHT = 0.3      # full engagement adds 30%
RANGE_LOW = 0.8
RANGE_HIGH = 1.2

BASE_CONVERSION = 0.05
DISCOUNT_CONVERSION = 0.08   # price under 70% of base
PREMIUM_CONVERSION = 0.03    # price over 130% of base

# confidence saturation points
FOLLOWER_SIGNIFICANCE = 10_000
ENGAGEMENT_QUALITY_CEILING = 0.10
LOCATION_DIVERSITY = 10
INDUSTRY_DIVERSITY = 5


@dataclass(frozen=True)
class PriceRange:
    min: int
    max: int

    def to_dict(self):
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class PricingFactors:
    base_price: int
    follower_multiplier: float
    industry_multiplier: float
    location_multiplier: float
    engagement_score: float
    engagement_multiplier: float
    follower_count: int


@dataclass(frozen=True)
class PriceEstimate:
    recommended_price: int
    price_range: PriceRange
    conversion_rate: float
    confidence: float
    factors: PricingFactors


def is_known_product_type(product_type: str) -> bool:
    return product_type in BASE_PRICES


def follower_multiplier(follower_count: int) -> float:
    """
    Logarithmic: 1.0 at 100 followers, 1.2 at 1k, 1.4 at 10k ...
    Counts below 100 (including 0) are treated as 100.
    """
    return 1 + (math.log10(max(follower_count, MIN_FOLLOWERS)) - 2) * FOLLOWER_STEP


def _clamp(value: int, band) -> int:
    if band is None:
        return value
    low, high = band
    return max(low, min(high, value))


def _confidence(aggregated: AggregatedDemographics, follower_count: int, engagement_rate: Optional[float]) -> float:
    dist = aggregated.demographics
    scores = [
        dist.filled_dimensions() / len(DIMENSIONS),
        min(follower_count / FOLLOWER_SIGNIFICANCE, 1),
        min(engagement_rate / ENGAGEMENT_QUALITY_CEILING, 1) if engagement_rate else 0.0,
        min(len(dist.location) / LOCATION_DIVERSITY, 1),
        min(len(dist.interest) / INDUSTRY_DIVERSITY, 1),
    ]
    return sum(scores) / len(scores)


def conversion_rate(price: int, base_price: int, engagement_mult: float) -> float:
    """
    Expected conversion at `price`: 8% when well under base, 3% when well
    over, 5% otherwise; scaled by engagement, capped at 1, 4 decimals.
    """
    rate = BASE_CONVERSION
    if price < base_price * 0.7:
        rate = DISCOUNT_CONVERSION
    elif price > base_price * 1.3:
        rate = PREMIUM_CONVERSION
    return round(min(rate * engagement_mult, 1.0), 4)


def recommend_price(
    product_type: str,
    aggregated: AggregatedDemographics,
    follower_count: int,
    engagement_rate: Optional[float] = None,
) -> PriceEstimate:
    """
    Deterministic price recommendation for one product type.

    recommended = base × follower × industry × location × engagement,
    rounded half-up. Missing demographics or engagement fall back to
    neutral multipliers; only malformed input raises.
    """
    if product_type not in BASE_PRICES:
        raise InvalidProductType(product_type)

    if follower_count is None or follower_count < 0:
        raise InvalidInput("follower count cannot be negative")

    if engagement_rate is not None and not (0 <= engagement_rate <= 1):
        raise InvalidInput("engagement rate must be between 0 and 1")

    dist = aggregated.demographics
    validate_distribution(dist)

    # counts below 100 (including 0) are priced and scored as 100
    follower_count = max(follower_count, MIN_FOLLOWERS)

    base_price = BASE_PRICES[product_type]
    follower_mult = follower_multiplier(follower_count)
    industry_mult = weighted_multiplier(dist.interest, industry_multiplier)
    location_mult = weighted_multiplier(dist.location, region_multiplier)

    engagement_score = min(engagement_rate, 1.0) if engagement_rate is not None else 0.0
    engagement_mult = 1 + engagement_score * ENGAGEMENT_WEIGHT

    recommended = round_half_up(
        base_price * follower_mult * industry_mult * location_mult * engagement_mult
    )

    band = PRICE_BANDS.get(product_type)
    price_range = PriceRange(
        min=_clamp(round_half_up(recommended * RANGE_LOW), band),
        max=_clamp(round_half_up(recommended * RANGE_HIGH), band),
    )

    logger.debug(
        "%s: base=%s follower=%.3f industry=%.3f location=%.3f engagement=%.3f -> %s",
        product_type, base_price, follower_mult, industry_mult, location_mult, engagement_mult, recommended,
    )

    return PriceEstimate(
        recommended_price=recommended,
        price_range=price_range,
        conversion_rate=conversion_rate(recommended, base_price, engagement_mult),
        confidence=round(_confidence(aggregated, follower_count, engagement_rate), 4),
        factors=PricingFactors(
            base_price=base_price,
            follower_multiplier=follower_mult,
            industry_multiplier=industry_mult,
            location_multiplier=location_mult,
            engagement_score=engagement_score,
            engagement_multiplier=engagement_mult,
            follower_count=follower_count,
        ),
    )
