import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from telegram import Update
from telegram.ext import (
    Application,
    CallbackQueryHandler,
    CommandHandler,
    MessageHandler,
    filters,
)

from socioprice.bot.handlers.pricing import price_command, pricing_text, product_selected
from socioprice.bot.handlers.start import start_message
from socioprice.config import get_settings

# -------------------------------------------------
# LOGGING
# -------------------------------------------------
logger = logging.getLogger("socioprice-backend.telegram")

_telegram_app: Optional[Application] = None


# -------------------------------------------------
# TELEGRAM APPLICATION
# -------------------------------------------------
def build_telegram_app(token: str) -> Application:
    app = Application.builder().token(token).build()

    # ---------- COMMANDS ----------
    app.add_handler(CommandHandler("start", start_message))
    app.add_handler(CommandHandler("help", start_message))
    app.add_handler(CommandHandler("price", price_command))

    # ---------- PRODUCT KEYBOARD ----------
    app.add_handler(CallbackQueryHandler(product_selected, pattern="^product_"))

    # ---------- PLAIN TEXT (LAST) ----------
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, pricing_text))
    return app


def get_telegram_app() -> Optional[Application]:
    """Built on first use; None when TELEGRAM_BOT_TOKEN is not configured."""
    global _telegram_app
    token = get_settings().telegram_bot_token
    if _telegram_app is None and token:
        _telegram_app = build_telegram_app(token)
    return _telegram_app


# -------------------------------------------------
# FASTAPI ROUTER
# -------------------------------------------------
router = APIRouter(prefix="/telegram")


@router.post("/webhook")
async def telegram_webhook(request: Request):
    """
    Receives Telegram webhook updates and routes them to PTB.
    """
    telegram_app = get_telegram_app()
    if telegram_app is None:
        raise HTTPException(status_code=404, detail="Telegram bot is not configured")

    payload = await request.json()

    try:
        update = Update.de_json(payload, telegram_app.bot)
        await telegram_app.process_update(update)
    except Exception as e:
        logger.error("❌ Error processing Telegram update: %s", e)

    return {"ok": True}
