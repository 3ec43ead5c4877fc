# backend/socioprice/routes/pricing.py

import logging
from typing import Optional

import psycopg2
from fastapi import APIRouter, HTTPException, Query

from socioprice.config import get_settings
from socioprice.errors import PricingError
from socioprice.models.pricing import CalculatePayload, RecommendPayload
from socioprice.services import account_store, history_store
from socioprice.services.pricing_service import build_recommendation

logger = logging.getLogger("socioprice-backend.pricing")

router = APIRouter(prefix="/pricing", tags=["Pricing"])


def _weighting(requested: Optional[bool]) -> bool:
    if requested is None:
        return get_settings().weight_by_followers
    return requested


@router.post("/calculate")
def calculate_pricing(data: CalculatePayload):
    """
    Stateless pricing: accounts travel in the payload, nothing is stored.
    """
    try:
        accounts = [account.to_snapshot() for account in data.accounts]
        recommendation = build_recommendation(
            data.to_request(), accounts, _weighting(data.weight_by_followers)
        )
    except PricingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return recommendation.to_dict()


@router.post("/recommend")
def recommend_pricing(data: RecommendPayload):
    """
    Prices a product against the user's connected accounts
    and appends the result to their history.
    """
    try:
        accounts = account_store.list_accounts(data.user_id)
    except (RuntimeError, psycopg2.Error) as e:
        logger.error("❌ Could not load accounts for %s: %s", data.user_id, e)
        raise HTTPException(status_code=503, detail="Database unavailable")

    request = data.to_request()
    try:
        recommendation = build_recommendation(request, accounts, _weighting(data.weight_by_followers))
    except PricingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    # history is best effort, the recommendation is still returned
    try:
        history_store.save_recommendation(data.user_id, request, recommendation)
        saved = True
    except (RuntimeError, psycopg2.Error) as e:
        logger.error("❌ Could not store recommendation for %s: %s", data.user_id, e)
        saved = False

    return {"recommendations": recommendation.to_dict(), "saved": saved}


@router.get("/history/{user_id}")
def pricing_history(user_id: str, limit: int = Query(50, ge=1, le=200)):
    try:
        history = history_store.list_history(user_id, limit=limit)
    except (RuntimeError, psycopg2.Error) as e:
        logger.error("❌ Could not load pricing history for %s: %s", user_id, e)
        raise HTTPException(status_code=503, detail="Database unavailable")

    return {"success": True, "data": history}
