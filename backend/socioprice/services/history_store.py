# backend/socioprice/services/history_store.py

import logging
from typing import Any, Dict, List

from psycopg2.extras import Json

from socioprice.db import get_db
from socioprice.services.pricing_service import PricingRecommendation, PricingRequest

logger = logging.getLogger("socioprice-backend.history")


def save_recommendation(user_id: str, request: PricingRequest, recommendation: PricingRecommendation) -> int:
    """
    Appends a recommendation to the user's history. Rows are never updated.
    Returns the new row id.
    """
    conn = None
    try:
        conn = get_db()
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO pricing_recommendations
                (user_id, product_name, product_description, product_type,
                 product_cost, target_margin, platforms, recommendation)
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING id
            """,
            (
                user_id,
                request.product_name,
                request.product_description,
                request.product_type,
                request.product_cost,
                request.target_margin,
                Json([p.value for p in request.platforms]),
                Json(recommendation.to_dict()),
            ),
        )
        row = cur.fetchone()
        conn.commit()

    except Exception:
        if conn:
            conn.rollback()
        raise

    finally:
        if conn:
            conn.close()

    logger.info("🗂 Stored recommendation %s for user %s", row["id"], user_id)
    return row["id"]


def list_history(user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
    conn = get_db()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT id, product_name, product_description, product_type,
                   product_cost, target_margin, platforms, recommendation, created_at
            FROM pricing_recommendations
            WHERE user_id = %s
            ORDER BY created_at DESC, id DESC
            LIMIT %s
            """,
            (user_id, limit),
        )
        rows = cur.fetchall()
    finally:
        conn.close()

    history = []
    for row in rows:
        entry = dict(row)
        if entry.get("created_at") is not None:
            entry["created_at"] = entry["created_at"].isoformat()
        history.append(entry)
    return history
