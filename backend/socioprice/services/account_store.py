# backend/socioprice/services/account_store.py

import datetime
import logging
from typing import Any, List, Mapping, Optional

from psycopg2.extras import Json

from socioprice.db import get_db
from socioprice.services.demographics import DemographicDistribution, Platform, SocialAccountSnapshot

logger = logging.getLogger("socioprice-backend.social")


def normalize_dt(value: Optional[object]) -> Optional[datetime.datetime]:
    """
    Ensures dt from DB is timezone-aware.
    Handles str/datetime/None.
    """
    if value is None:
        return None

    if isinstance(value, datetime.datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=datetime.timezone.utc)
        return value

    # Handle string values: "2026-01-20T12:33:00+00:00"
    try:
        dt = datetime.datetime.fromisoformat(str(value))
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return dt


def row_to_snapshot(row: Mapping[str, Any]) -> SocialAccountSnapshot:
    return SocialAccountSnapshot(
        platform=Platform(row["platform"]),
        follower_count=int(row["follower_count"] or 0),
        demographics=DemographicDistribution.from_dict(row.get("demographics")),
        engagement_rate=row.get("engagement_rate"),
        last_updated=normalize_dt(row.get("last_updated")),
    )


# -------------------------------------------------
# CONNECT / REFRESH (one snapshot per user+platform)
# -------------------------------------------------
def save_account(user_id: str, snapshot: SocialAccountSnapshot) -> None:
    conn = None
    try:
        conn = get_db()
        cur = conn.cursor()
        cur.execute(
            """
            INSERT INTO social_accounts
                (user_id, platform, follower_count, engagement_rate, demographics, last_updated)
            VALUES (%s, %s, %s, %s, %s, COALESCE(%s, CURRENT_TIMESTAMP))
            ON CONFLICT (user_id, platform)
            DO UPDATE SET
                follower_count = EXCLUDED.follower_count,
                engagement_rate = EXCLUDED.engagement_rate,
                demographics = EXCLUDED.demographics,
                last_updated = EXCLUDED.last_updated
            """,
            (
                user_id,
                snapshot.platform.value,
                snapshot.follower_count,
                snapshot.engagement_rate,
                Json(snapshot.demographics.to_dict()),
                snapshot.last_updated,
            ),
        )
        conn.commit()
        logger.info("✅ Saved %s snapshot for user %s", snapshot.platform.value, user_id)

    except Exception:
        if conn:
            conn.rollback()
        logger.exception("❌ Failed to save %s snapshot for user %s", snapshot.platform.value, user_id)
        raise

    finally:
        if conn:
            conn.close()


def list_accounts(user_id: str) -> List[SocialAccountSnapshot]:
    conn = get_db()
    try:
        cur = conn.cursor()
        cur.execute(
            """
            SELECT platform, follower_count, engagement_rate, demographics, last_updated
            FROM social_accounts
            WHERE user_id = %s
            ORDER BY platform
            """,
            (user_id,),
        )
        rows = cur.fetchall()
    finally:
        conn.close()

    return [row_to_snapshot(row) for row in rows]


def remove_account(user_id: str, platform: Platform) -> bool:
    conn = get_db()
    try:
        cur = conn.cursor()
        cur.execute(
            "DELETE FROM social_accounts WHERE user_id = %s AND platform = %s",
            (user_id, platform.value),
        )
        removed = cur.rowcount > 0
        conn.commit()
    finally:
        conn.close()

    if removed:
        logger.info("🗑 Removed %s account for user %s", platform.value, user_id)
    return removed
