import asyncio

import pytest

from socioprice.bot.handlers.pricing import (
    parse_price_args,
    price_command,
    pricing_text,
    product_selected,
)
from socioprice.bot.keyboards.products import product_keyboard


class FakeMessage:
    def __init__(self, text=None, chat_id=42):
        self.text = text
        self.chat = type("Chat", (), {"id": chat_id})()
        self.replies = []

    async def reply_text(self, text, **kwargs):
        self.replies.append((text, kwargs))


class FakeQuery:
    def __init__(self, data, message):
        self.data = data
        self.message = message
        self.answered = False

    async def answer(self):
        self.answered = True


class FakeBot:
    def __init__(self):
        self.sent = []

    async def send_message(self, chat_id, text, **kwargs):
        self.sent.append((chat_id, text))


class FakeUpdate:
    def __init__(self, message=None, callback_query=None):
        self.effective_message = message
        self.callback_query = callback_query


class FakeContext:
    def __init__(self, args=None, user_data=None):
        self.args = args
        self.user_data = {} if user_data is None else user_data
        self.bot = FakeBot()


# -------------------------------------------------
# PARSER
# -------------------------------------------------
@pytest.mark.parametrize("parts,expected", [
    (["ebook", "50k", "0.05"], ("ebook", 50_000, 0.05)),
    (["Course", "1.2m"], ("course", 1_200_000, None)),
    (["50k", "5%"], (None, 50_000, 0.05)),
    (["10,000"], (None, 10_000, None)),
])
def test_parse_price_args(parts, expected):
    product_type, followers, engagement = parse_price_args(parts)
    assert (product_type, followers) == expected[:2]
    assert engagement == pytest.approx(expected[2])


@pytest.mark.parametrize("parts", [
    [],
    ["ebook"],
    ["ebook", "50k", "5%", "extra"],
    ["ebook", "lots"],
    ["50k", "150"],
    ["ebook", "inf"],
    ["ebook", "1e999"],
])
def test_parse_price_args_rejects(parts):
    with pytest.raises(ValueError):
        parse_price_args(parts)


# -------------------------------------------------
# HANDLERS
# -------------------------------------------------
def test_price_command_replies_with_estimate():
    message = FakeMessage()
    asyncio.run(price_command(FakeUpdate(message), FakeContext(args=["ebook", "50k", "0.05"])))

    (text, kwargs), = message.replies
    assert "Ebook" in text
    assert "$42" in text
    assert kwargs["parse_mode"] == "Markdown"


def test_text_without_product_asks_for_one():
    message = FakeMessage("50k 0.05")
    context = FakeContext()
    asyncio.run(pricing_text(FakeUpdate(message), context))

    assert context.user_data["stats"] == {"followers": 50_000, "engagement": 0.05}
    (_, kwargs), = message.replies
    assert kwargs["reply_markup"] is not None


def test_invalid_text_gets_format_help():
    message = FakeMessage("how much should I charge?")
    asyncio.run(pricing_text(FakeUpdate(message), FakeContext()))
    assert "Invalid format" in message.replies[0][0]


def test_unknown_product_is_reported():
    message = FakeMessage("spaceship 50k")
    asyncio.run(pricing_text(FakeUpdate(message), FakeContext()))
    assert message.replies[0][0].startswith("❌ Unknown product type")


def test_product_button_prices_saved_stats():
    context = FakeContext(user_data={"stats": {"followers": 50_000, "engagement": 0.05}})
    query = FakeQuery("product_ebook", FakeMessage(chat_id=7))
    asyncio.run(product_selected(FakeUpdate(callback_query=query), context))

    assert query.answered
    (chat_id, text), = context.bot.sent
    assert chat_id == 7
    assert "$42" in text


def test_product_button_without_stats():
    context = FakeContext()
    query = FakeQuery("product_course", FakeMessage())
    asyncio.run(product_selected(FakeUpdate(callback_query=query), context))
    assert "Send your stats first" in context.bot.sent[0][1]


def test_product_keyboard_lists_every_type():
    rows = product_keyboard().inline_keyboard
    assert all(len(row) <= 2 for row in rows)
    callbacks = [button.callback_data for row in rows for button in row]
    assert "product_ebook" in callbacks
    assert "product_digital_product" in callbacks


@pytest.mark.parametrize("text", ["ebook inf", "ebook 1e999", "course 50k nan"])
def test_non_finite_numbers_get_format_help(text):
    message = FakeMessage(text)
    asyncio.run(pricing_text(FakeUpdate(message), FakeContext()))
    assert "Invalid format" in message.replies[0][0]
