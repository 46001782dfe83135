"""
Message delivery: transports and the retrying broadcast fan-out.
"""

from .base import BaseDeliveryTransport, DeliveryResult, DeliveryState
from .broadcast import BroadcastFanout, BroadcastResult
from .retry import RetryPolicy
from .stdout_delivery import StdoutDelivery
from .telegram_delivery import TelegramDelivery

__all__ = [
    "BaseDeliveryTransport",
    "BroadcastFanout",
    "BroadcastResult",
    "DeliveryResult",
    "DeliveryState",
    "RetryPolicy",
    "StdoutDelivery",
    "TelegramDelivery",
]
