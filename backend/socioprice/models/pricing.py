from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from socioprice.models.social import AccountPayload
from socioprice.services.demographics import Platform
from socioprice.services.pricing_service import PricingRequest


class ProductPayload(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    product_name: str
    product_description: str
    product_type: str
    product_cost: Optional[float] = None
    target_margin: Optional[float] = None
    platforms: List[Platform] = Field(default_factory=list)

    def to_request(self) -> PricingRequest:
        return PricingRequest(
            product_name=self.product_name,
            product_description=self.product_description,
            product_type=self.product_type,
            product_cost=self.product_cost,
            target_margin=self.target_margin,
            platforms=tuple(self.platforms),
        )


class CalculatePayload(ProductPayload):
    accounts: List[AccountPayload] = Field(default_factory=list)
    weight_by_followers: Optional[bool] = None  # None → WEIGHT_BY_FOLLOWERS setting


class RecommendPayload(ProductPayload):
    user_id: str
    weight_by_followers: Optional[bool] = None
