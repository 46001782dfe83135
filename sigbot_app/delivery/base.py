"""Base classes for message delivery transports."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import structlog


class DeliveryState(Enum):
    """
    Per-subscriber delivery state.

    Pending -> Sending -> Sent | Removed | Failed, with Retrying -> Sending
    between attempts.
    """
    PENDING = "pending"
    SENDING = "sending"
    RETRYING = "retrying"
    SENT = "sent"
    REMOVED = "removed"
    FAILED = "failed"

    @property
    def is_final(self) -> bool:
        return self in (DeliveryState.SENT, DeliveryState.REMOVED, DeliveryState.FAILED)


@dataclass
class DeliveryResult:
    """Result of delivering one message to one subscriber."""
    recipient_id: str
    state: DeliveryState = DeliveryState.PENDING
    attempt_count: int = 0
    error: Optional[Exception] = None


class BaseDeliveryTransport(ABC):
    """Base class for transports that send a text to one recipient."""

    def __init__(self, name: str):
        self.name = name
        self.logger = structlog.get_logger(f"signal.delivery.{name}")
        self._delivery_count = 0
        self._error_count = 0

    @abstractmethod
    async def send(self, recipient_id: str, text: str) -> None:
        """
        Deliver ``text`` to ``recipient_id``.

        Raises:
            DeliveryTerminalError: recipient can never be reached again
            DeliveryTransientError: anything worth retrying
        """

    def get_stats(self) -> dict[str, Any]:
        """Get delivery statistics."""
        return {
            "name": self.name,
            "delivery_count": self._delivery_count,
            "error_count": self._error_count,
            "success_rate": (
                self._delivery_count / (self._delivery_count + self._error_count)
                if (self._delivery_count + self._error_count) > 0 else 0.0
            )
        }

    def reset_stats(self):
        """Reset delivery statistics."""
        self._delivery_count = 0
        self._error_count = 0
