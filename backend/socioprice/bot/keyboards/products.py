from telegram import InlineKeyboardButton, InlineKeyboardMarkup

from socioprice.services.pricing_engine import BASE_PRICES


def product_label(product_type: str) -> str:
    return product_type.replace("_", " ").title()


def product_keyboard():
    buttons = [
        InlineKeyboardButton(product_label(name), callback_data=f"product_{name}")
        for name in BASE_PRICES
    ]
    keyboard = [buttons[i:i + 2] for i in range(0, len(buttons), 2)]
    return InlineKeyboardMarkup(keyboard)
