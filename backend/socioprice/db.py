import logging

import psycopg2
from psycopg2.extras import RealDictCursor

from socioprice.config import get_settings

logger = logging.getLogger("socioprice-backend.db")


# -------------------------------------------------
# DB CONNECTION (LAZY, SAFE)
# -------------------------------------------------
def get_db() -> psycopg2.extensions.connection:
    """
    Returns a new PostgreSQL connection with dict rows.
    Caller is responsible for closing it.
    DATABASE_URL is only required once something actually touches the DB.
    """
    settings = get_settings()
    if not settings.database_url:
        raise RuntimeError("❌ DATABASE_URL is not set")

    try:
        conn = psycopg2.connect(
            settings.database_url,
            cursor_factory=RealDictCursor,
            sslmode=settings.database_sslmode,
            connect_timeout=5,
        )
        return conn

    except psycopg2.Error as e:
        logger.exception(f"❌ Database connection failed → {e}")
        raise RuntimeError("Database connection failed") from e
