"""
Delivery error classifications for the broadcast fan-out.

A terminal error means the recipient can never be reached again (blocked the
bot, deleted the chat) and triggers subscriber removal. Everything else is
transient and retried.
"""

from typing import Optional, Dict, Any

# 403 Forbidden (bot blocked), 410 Gone (chat deleted)
TERMINAL_STATUS_CODES = (403, 410)


class DeliveryError(Exception):
    """Base class for message delivery failures."""

    def __init__(self, message: str, recipient_id: Optional[str] = None,
                 status_code: Optional[int] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.recipient_id = recipient_id
        self.status_code = status_code
        self.context = context or {}


class DeliveryTerminalError(DeliveryError):
    """Recipient is unreachable for good; do not retry."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.recoverable = False


class DeliveryTransientError(DeliveryError):
    """Network, timeout, flood control or any other retryable failure."""

    def __init__(self, message: str, retry_after: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after
        self.recoverable = True


def is_terminal_delivery_error(error: BaseException) -> bool:
    """
    True when the recipient can never be reached again.

    DeliveryTerminalError is terminal by type. Any other DeliveryError is
    terminal when its ``status_code`` is 403 or 410, so transports that only
    report a status still get their dead recipients pruned.
    """
    if isinstance(error, DeliveryTerminalError):
        return True
    if isinstance(error, DeliveryError):
        return error.status_code in TERMINAL_STATUS_CODES
    return False
