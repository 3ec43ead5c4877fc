import logging

from socioprice.db import get_db

logger = logging.getLogger("socioprice-backend.db")

MIGRATIONS = [
    """
    CREATE TABLE IF NOT EXISTS social_accounts (
        user_id TEXT NOT NULL,
        platform TEXT NOT NULL,
        follower_count INTEGER NOT NULL DEFAULT 0,
        engagement_rate DOUBLE PRECISION,
        demographics JSONB NOT NULL DEFAULT '{}'::jsonb,
        last_updated TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
        PRIMARY KEY (user_id, platform)
    );
    """,
    """
    CREATE TABLE IF NOT EXISTS pricing_recommendations (
        id SERIAL PRIMARY KEY,
        user_id TEXT NOT NULL,
        product_name TEXT NOT NULL,
        product_description TEXT NOT NULL,
        product_type TEXT NOT NULL,
        product_cost DOUBLE PRECISION,
        target_margin DOUBLE PRECISION,
        platforms JSONB NOT NULL DEFAULT '[]'::jsonb,
        recommendation JSONB NOT NULL,
        created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
    );
    """,
    """
    CREATE INDEX IF NOT EXISTS pricing_recommendations_user_idx
        ON pricing_recommendations (user_id, created_at DESC);
    """,
]


def run_migrations():
    conn = None
    try:
        conn = get_db()
        cur = conn.cursor()
        for sql in MIGRATIONS:
            cur.execute(sql)
        conn.commit()
        cur.close()
    except Exception as e:
        logger.error(f"DB Migration Error: {e}")
        if conn:
            conn.rollback()
        raise
    finally:
        if conn:
            conn.close()
