"""Tests for Telegram error classification."""

import asyncio

import pytest
from telegram.error import BadRequest, Forbidden, NetworkError, RetryAfter

from sigbot_app.delivery import StdoutDelivery, TelegramDelivery
from sigbot_app.errors import DeliveryTerminalError, DeliveryTransientError


class FakeBot:
    """Stands in for telegram.Bot; raises ``error`` on send when given."""

    def __init__(self, error=None):
        self.error = error
        self.messages = []

    async def send_message(self, chat_id, text):
        if self.error is not None:
            raise self.error
        self.messages.append((chat_id, text))


class TestTelegramDelivery:
    """Mapping of Bot API errors onto delivery errors."""

    def test_successful_send(self):
        bot = FakeBot()
        delivery = TelegramDelivery(bot)

        asyncio.run(delivery.send("12345", "hi"))

        assert bot.messages == [(12345, "hi")]
        assert delivery.get_stats()["delivery_count"] == 1

    def test_forbidden_is_terminal(self):
        delivery = TelegramDelivery(FakeBot(Forbidden("Forbidden: bot was blocked by the user")))

        with pytest.raises(DeliveryTerminalError) as exc_info:
            asyncio.run(delivery.send("12345", "hi"))

        assert exc_info.value.status_code == 403
        assert exc_info.value.recipient_id == "12345"
        assert delivery.get_stats()["error_count"] == 1

    def test_flood_control_is_transient(self):
        delivery = TelegramDelivery(FakeBot(RetryAfter(5)))

        with pytest.raises(DeliveryTransientError) as exc_info:
            asyncio.run(delivery.send("12345", "hi"))

        assert exc_info.value.status_code == 429
        assert exc_info.value.retry_after == 5.0

    @pytest.mark.parametrize("error", [
        NetworkError("Connection reset"),
        BadRequest("Chat not found"),
    ])
    def test_other_errors_are_transient(self, error):
        delivery = TelegramDelivery(FakeBot(error))

        with pytest.raises(DeliveryTransientError):
            asyncio.run(delivery.send("12345", "hi"))


class TestStdoutDelivery:
    def test_prints_message(self, capsys):
        delivery = StdoutDelivery(include_timestamp=False)
        asyncio.run(delivery.send("42", "signal text"))

        out = capsys.readouterr().out
        assert "--- to 42" in out
        assert "signal text" in out
        assert delivery.get_stats()["success_rate"] == 1.0
