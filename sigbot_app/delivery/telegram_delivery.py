"""Telegram Bot API transport."""

from datetime import timedelta

from telegram import Bot
from telegram.error import Forbidden, RetryAfter, TelegramError

from ..errors import DeliveryTerminalError, DeliveryTransientError
from .base import BaseDeliveryTransport


class TelegramDelivery(BaseDeliveryTransport):
    """Sends plain-text messages through a python-telegram-bot Bot."""

    def __init__(self, bot: Bot, name: str = "telegram"):
        super().__init__(name)
        self.bot = bot

    async def send(self, recipient_id: str, text: str) -> None:
        try:
            await self.bot.send_message(chat_id=int(recipient_id), text=text)

        except Forbidden as e:
            # Blocked by the user, kicked from the group or account deleted
            self._error_count += 1
            raise DeliveryTerminalError(
                f"Forbidden: {e.message}",
                recipient_id=recipient_id,
                status_code=403
            ) from e

        except RetryAfter as e:
            self._error_count += 1
            retry_after = e.retry_after
            if isinstance(retry_after, timedelta):
                retry_after = retry_after.total_seconds()
            raise DeliveryTransientError(
                f"Flood control: {e.message}",
                retry_after=float(retry_after),
                recipient_id=recipient_id,
                status_code=429
            ) from e

        except TelegramError as e:
            # NetworkError, TimedOut, BadRequest, ChatMigrated ...
            self._error_count += 1
            raise DeliveryTransientError(
                f"{type(e).__name__}: {e.message}",
                recipient_id=recipient_id
            ) from e

        self._delivery_count += 1
