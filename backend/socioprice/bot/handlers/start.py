from telegram import Update
from telegram.ext import ContextTypes


async def start_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    message = update.effective_message
    if not message:
        return

    await message.reply_text(
        "👋 **Welcome to SocioPrice**\n\n"
        "Find out what your audience will pay for your product.\n\n"
        "📈 **Send your stats in this format:**\n"
        "`product_type followers engagement_rate`\n\n"
        "Example:\n"
        "`ebook 50k 0.05`\n\n"
        "Or just `50k 0.05` and pick the product from the list.\n\n"
        "You’ll instantly see:\n"
        "• The optimal price\n"
        "• A price range to test\n"
        "• How confident the estimate is\n\n"
        "🔗 Connect your social accounts in the dashboard to price against real follower demographics.",
        parse_mode="Markdown",
    )
