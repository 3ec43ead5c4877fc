# -------------------------------------------------
# STANDARD IMPORTS
# -------------------------------------------------
import logging

from fastapi import FastAPI, status

from socioprice.config import get_settings
from socioprice.db import get_db

# -------------------------------------------------
# DB MIGRATIONS
# -------------------------------------------------
from socioprice.db_auto_migrate import run_migrations

# -------------------------------------------------
# ROUTERS
# -------------------------------------------------
from socioprice.routes.pricing import router as pricing_router
from socioprice.routes.social import router as social_router
from socioprice.routes.telegram_webhook import get_telegram_app
from socioprice.routes.telegram_webhook import router as telegram_router

# -------------------------------------------------
# LOGGING SETUP
# -------------------------------------------------
settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("socioprice-backend")

# -------------------------------------------------
# FASTAPI APP
# -------------------------------------------------
app = FastAPI(
    title="SocioPrice API",
    version="1.0.0",
)

# -------------------------------------------------
# STARTUP LIFECYCLE (MIGRATIONS + BOT INIT)
# -------------------------------------------------
@app.on_event("startup")
async def startup_event():
    logger.info("🚀 Startup event triggered")

    # --- SAFE DB MIGRATIONS ---
    try:
        logger.info("🛠 Running DB migrations...")
        run_migrations()
        logger.info("✅ Migrations complete")
    except Exception as e:
        logger.error(f"❌ Migration error: {e}")

    # --- INIT TELEGRAM BOT ---
    telegram_app = get_telegram_app()
    if telegram_app is None:
        logger.info("🤖 TELEGRAM_BOT_TOKEN not set, bot disabled")
        return
    try:
        await telegram_app.initialize()
        logger.info("🤖 Telegram bot initialized")
    except Exception as e:
        logger.error(f"❌ Telegram init failed: {e}")

# -------------------------------------------------
# SHUTDOWN LIFECYCLE
# -------------------------------------------------
@app.on_event("shutdown")
async def shutdown_event():
    telegram_app = get_telegram_app()
    if telegram_app is None:
        return
    try:
        await telegram_app.shutdown()
        logger.info("🛑 Telegram bot shutdown")
    except Exception as e:
        logger.error(f"❌ Telegram shutdown failed: {e}")

# -------------------------------------------------
# ROUTERS
# -------------------------------------------------
app.include_router(pricing_router)
app.include_router(social_router)
if settings.telegram_bot_token:
    app.include_router(telegram_router)

# -------------------------------------------------
# HEALTH CHECK (NO DB REQUIRED)
# -------------------------------------------------
@app.get("/health", status_code=status.HTTP_200_OK)
def health():
    return {"status": "ok"}

# -------------------------------------------------
# DB TEST (CONNECTION CHECK)
# -------------------------------------------------
@app.get("/db/test", status_code=status.HTTP_200_OK)
def db_test():
    try:
        conn = get_db()
        conn.close()
        return {"db": "ok"}
    except Exception as e:
        return {"db": "error", "detail": str(e)}
