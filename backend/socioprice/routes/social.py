# backend/socioprice/routes/social.py

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import psycopg2
from fastapi import APIRouter, HTTPException

from socioprice.config import get_settings
from socioprice.errors import PricingError
from socioprice.models.social import ConnectAccountPayload, LinkedInFollowersPayload, RemoveAccountPayload
from socioprice.services import account_store
from socioprice.services.demographics import (
    Platform,
    SocialAccountSnapshot,
    aggregate_demographics,
    is_stale,
    validate_snapshot,
)
from socioprice.services.follower_profiles import profile_followers

logger = logging.getLogger("socioprice-backend.social")

router = APIRouter(prefix="/social", tags=["Social"])


def snapshot_to_dict(snapshot: SocialAccountSnapshot) -> Dict[str, Any]:
    return {
        "platform": snapshot.platform.value,
        "followerCount": snapshot.follower_count,
        "engagementRate": snapshot.engagement_rate,
        "demographics": snapshot.demographics.to_dict(),
        "lastUpdated": snapshot.last_updated.isoformat() if snapshot.last_updated else None,
    }


def _store(user_id: str, snapshot: SocialAccountSnapshot) -> Dict[str, Any]:
    try:
        validate_snapshot(snapshot)
    except PricingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    try:
        account_store.save_account(user_id, snapshot)
    except (RuntimeError, psycopg2.Error):
        raise HTTPException(status_code=503, detail="Database unavailable")

    return {"success": True, "account": snapshot_to_dict(snapshot)}


# -------------------------------------------------
# LIST CONNECTED ACCOUNTS
# -------------------------------------------------
@router.get("/accounts/{user_id}")
def list_accounts(user_id: str):
    try:
        accounts = account_store.list_accounts(user_id)
    except (RuntimeError, psycopg2.Error) as e:
        logger.error("❌ Could not load accounts for %s: %s", user_id, e)
        raise HTTPException(status_code=503, detail="Database unavailable")

    return {"accounts": [snapshot_to_dict(a) for a in accounts]}


# -------------------------------------------------
# CONNECT / REFRESH (replaces the platform snapshot)
# -------------------------------------------------
@router.post("/accounts")
def connect_account(data: ConnectAccountPayload):
    try:
        snapshot = data.to_snapshot()
    except PricingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _store(data.user_id, snapshot)


# -------------------------------------------------
# LINKEDIN FOLLOWER RECORDS → SNAPSHOT
# -------------------------------------------------
@router.post("/linkedin/followers")
def import_linkedin_followers(data: LinkedInFollowersPayload):
    if not data.followers:
        raise HTTPException(status_code=400, detail="followers cannot be empty")

    distribution = profile_followers(record.to_record() for record in data.followers)
    follower_count = data.follower_count if data.follower_count is not None else len(data.followers)

    snapshot = SocialAccountSnapshot(
        platform=Platform.LINKEDIN,
        follower_count=follower_count,
        demographics=distribution,
        engagement_rate=data.engagement_rate,
    )
    return _store(data.user_id, snapshot)


# -------------------------------------------------
# AGGREGATED DEMOGRAPHICS (+ per-account freshness)
# -------------------------------------------------
@router.get("/demographics/{user_id}")
def user_demographics(user_id: str, weight_by_followers: Optional[bool] = None):
    try:
        accounts = account_store.list_accounts(user_id)
    except (RuntimeError, psycopg2.Error) as e:
        logger.error("❌ Could not load accounts for %s: %s", user_id, e)
        raise HTTPException(status_code=503, detail="Database unavailable")

    if weight_by_followers is None:
        weight_by_followers = get_settings().weight_by_followers

    try:
        aggregated = aggregate_demographics(accounts, weight_by_followers)
    except PricingError as e:
        raise HTTPException(status_code=400, detail=str(e))

    now = datetime.now(timezone.utc)
    return {
        "totalFollowers": aggregated.total_followers,
        "accountCount": aggregated.account_count,
        "engagementRate": aggregated.engagement_rate,
        "demographics": aggregated.demographics.to_dict(),
        "accounts": [dict(snapshot_to_dict(a), stale=is_stale(a, now)) for a in accounts],
    }


# -------------------------------------------------
# REMOVE
# -------------------------------------------------
@router.post("/remove")
def remove_account(data: RemoveAccountPayload):
    try:
        removed = account_store.remove_account(data.user_id, data.platform)
    except (RuntimeError, psycopg2.Error) as e:
        logger.error("❌ Could not remove %s for %s: %s", data.platform.value, data.user_id, e)
        raise HTTPException(status_code=503, detail="Database unavailable")

    if not removed:
        raise HTTPException(status_code=404, detail=f"No {data.platform.value} account connected")

    return {"success": True, "message": f"{data.platform.value} account has been removed"}
