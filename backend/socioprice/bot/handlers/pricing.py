# backend/socioprice/bot/handlers/pricing.py

import logging
import re
from typing import Any, Dict, List, Optional, Tuple, cast

from telegram import CallbackQuery, Update
from telegram.ext import ContextTypes

from socioprice.bot.keyboards.products import product_keyboard, product_label
from socioprice.errors import PricingError
from socioprice.services.demographics import AggregatedDemographics
from socioprice.services.pricing_engine import PriceEstimate, recommend_price
from socioprice.utils.helpers import parse_engagement, parse_number

logger = logging.getLogger("socioprice-backend.bot")


# -------------------------------------------------
# PARSER
# -------------------------------------------------
def parse_price_args(parts: List[str]) -> Tuple[Optional[str], int, Optional[float]]:
    """
    Accepts:
        ebook 50k 0.05   -> ("ebook", 50000, 0.05)
        ebook 50k        -> ("ebook", 50000, None)
        50k 5%           -> (None, 50000, 0.05)
    """
    parts = list(parts)
    product_type = None
    if parts and not parts[0][:1].isdigit():
        product_type = parts.pop(0).lower()

    if len(parts) not in (1, 2):
        raise ValueError("Expected followers and optional engagement")

    followers = parse_number(parts[0])
    engagement = parse_engagement(parts[1]) if len(parts) == 2 else None
    return product_type, followers, engagement


def format_estimate(product_type: str, estimate: PriceEstimate) -> str:
    return (
        f"💰 *{product_label(product_type)}*\n\n"
        f"Optimal price: *${estimate.recommended_price}*\n"
        f"Test range: ${estimate.price_range.min} – ${estimate.price_range.max}\n"
        f"Expected conversion: {estimate.conversion_rate:.1%}\n"
        f"Confidence: {estimate.confidence:.0%}\n\n"
        "ℹ️ Connect your accounts in the dashboard to price against follower demographics."
    )


def _estimate(product_type: str, followers: int, engagement: Optional[float]) -> PriceEstimate:
    return recommend_price(product_type, AggregatedDemographics.empty(), followers, engagement)


# -------------------------------------------------
# TEXT / COMMAND ENTRY POINTS
# -------------------------------------------------
async def _run(message, context: ContextTypes.DEFAULT_TYPE, parts: List[str]):
    try:
        product_type, followers, engagement = parse_price_args(parts)
    except (ValueError, OverflowError):
        await _invalid_format(message)
        return

    if product_type is None:
        ud = cast(Dict[str, Any], context.user_data)
        ud["stats"] = {"followers": followers, "engagement": engagement}
        await message.reply_text(
            "🛍 Which *product* are you pricing?",
            reply_markup=product_keyboard(),
            parse_mode="Markdown",
        )
        return

    try:
        estimate = _estimate(product_type, followers, engagement)
    except PricingError as e:
        await message.reply_text(f"❌ {e}")
        return

    await message.reply_text(format_estimate(product_type, estimate), parse_mode="Markdown")


async def price_command(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """/price ebook 50k 0.05"""
    message = update.effective_message
    if not message:
        return
    await _run(message, context, list(context.args or []))


async def pricing_text(update: Update, context: ContextTypes.DEFAULT_TYPE):
    message = update.effective_message
    if not message or not message.text:
        return
    await _run(message, context, re.split(r"\s+", message.text.strip()))


# -------------------------------------------------
# PRODUCT KEYBOARD CALLBACK
# -------------------------------------------------
async def product_selected(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    query: Optional[CallbackQuery] = update.callback_query
    if query is None:
        return

    await query.answer()

    msg = query.message
    if msg is None or msg.chat is None:
        return
    chat_id = msg.chat.id

    product_type = (query.data or "").replace("product_", "", 1)
    ud = cast(Dict[str, Any], context.user_data)
    stats = ud.get("stats")

    if not stats:
        await context.bot.send_message(chat_id, "⚠️ Send your stats first, e.g. `50k 0.05`", parse_mode="Markdown")
        return

    try:
        estimate = _estimate(product_type, stats["followers"], stats["engagement"])
    except PricingError as e:
        await context.bot.send_message(chat_id, f"❌ {e}")
        return

    logger.info("🤖 Bot priced %s for %s followers", product_type, stats["followers"])
    await context.bot.send_message(chat_id, format_estimate(product_type, estimate), parse_mode="Markdown")


# -------------------------------------------------
# INVALID FORMAT RESPONSE
# -------------------------------------------------
async def _invalid_format(message):
    await message.reply_text(
        "❌ *Invalid format*\n\n"
        "Use one of the following:\n"
        "`ebook 50k` — product + followers\n"
        "`ebook 50k 0.05` — product + followers + engagement\n"
        "`50k 0.05` — then pick the product\n",
        parse_mode="Markdown",
    )
