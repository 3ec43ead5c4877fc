# backend/socioprice/services/pricing_service.py

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from socioprice.errors import InvalidInput
from socioprice.services.demographics import (
    AggregatedDemographics,
    Platform,
    SocialAccountSnapshot,
    aggregate_demographics,
)
from socioprice.services.pricing_engine import PriceEstimate, conversion_rate, recommend_price
from socioprice.services.segments import Segment, generate_segments

logger = logging.getLogger("socioprice-backend.pricing")


@dataclass(frozen=True)
class PricingRequest:
    product_name: str
    product_description: str
    product_type: str
    product_cost: Optional[float] = None
    target_margin: Optional[float] = None
    platforms: Sequence[Platform] = field(default_factory=tuple)


@dataclass(frozen=True)
class OverallRecommendation:
    min_price: int
    max_price: int
    optimal_price: int
    conversion_rate: float
    confidence: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "optimalPrice": self.optimal_price,
            "conversionRate": self.conversion_rate,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class PricingRecommendation:
    overall: OverallRecommendation
    segments: List[Segment]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overallRecommendation": self.overall.to_dict(),
            "segments": [s.to_dict() for s in self.segments],
        }


def cost_floor(product_cost: Optional[float], target_margin: Optional[float]) -> Optional[int]:
    """
    Lowest whole price that keeps target_margin over product_cost.
    None unless both are given.
    """
    if product_cost is not None and not (math.isfinite(product_cost) and product_cost >= 0):
        raise InvalidInput("product cost must be a non-negative number")
    if target_margin is not None and not (math.isfinite(target_margin) and 0 <= target_margin < 1):
        raise InvalidInput("target margin must be in [0, 1)")

    if product_cost is None or target_margin is None:
        return None
    return int(math.ceil(round(product_cost / (1 - target_margin), 6)))


def select_accounts(
    accounts: Iterable[SocialAccountSnapshot],
    platforms: Sequence[Platform],
) -> List[SocialAccountSnapshot]:
    """Accounts on the requested platforms; every account when none are named."""
    accounts = list(accounts)
    if not platforms:
        return accounts
    wanted = set(platforms)
    return [a for a in accounts if a.platform in wanted]


def _overall(estimate: PriceEstimate, floor: Optional[int]) -> OverallRecommendation:
    min_price = estimate.price_range.min
    max_price = estimate.price_range.max

    if floor is not None and floor > min_price:
        min_price = floor

    optimal = min(max(estimate.recommended_price, min_price), max(max_price, min_price))
    max_price = max(max_price, optimal)

    rate = estimate.conversion_rate
    if optimal != estimate.recommended_price:
        factors = estimate.factors
        rate = conversion_rate(optimal, factors.base_price, factors.engagement_multiplier)

    return OverallRecommendation(
        min_price=min_price,
        max_price=max_price,
        optimal_price=optimal,
        conversion_rate=rate,
        confidence=estimate.confidence,
    )


def build_recommendation(
    request: PricingRequest,
    accounts: Iterable[SocialAccountSnapshot],
    weight_by_followers: bool = False,
) -> PricingRecommendation:
    """
    Full pipeline: filter accounts → aggregate → price → segments.
    Zero matching accounts degrade to baseline pricing.
    """
    floor = cost_floor(request.product_cost, request.target_margin)

    selected = select_accounts(accounts, request.platforms)
    aggregated: AggregatedDemographics = aggregate_demographics(selected, weight_by_followers)

    estimate = recommend_price(
        request.product_type,
        aggregated,
        aggregated.total_followers,
        aggregated.engagement_rate,
    )

    overall = _overall(estimate, floor)
    segments = generate_segments(aggregated, overall.optimal_price)

    logger.info(
        "💰 %s (%s): %d accounts, %d followers → optimal %s [%s-%s]",
        request.product_name, request.product_type, aggregated.account_count,
        aggregated.total_followers, overall.optimal_price, overall.min_price, overall.max_price,
    )

    return PricingRecommendation(overall=overall, segments=segments)
