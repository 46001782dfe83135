"""
Broadcast fan-out with bounded per-recipient retry.

Every current subscriber gets the message independently: one recipient's
failure never aborts the broadcast. Recipients that fail terminally are
pruned from the subscriber store.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable

import structlog

from ..errors import PersistenceError, is_terminal_delivery_error
from ..models import Subscriber
from ..persistence import SubscriberStore
from .base import BaseDeliveryTransport, DeliveryResult, DeliveryState
from .retry import RetryPolicy

logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


@dataclass
class BroadcastResult:
    """Aggregate outcome of one broadcast."""
    success_count: int = 0
    fail_count: int = 0
    removed: list[str] = field(default_factory=list)
    results: list[DeliveryResult] = field(default_factory=list)


class BroadcastFanout:
    """Delivers one rendered message to every subscriber."""

    def __init__(
        self,
        subscribers: SubscriberStore,
        transport: BaseDeliveryTransport,
        retry_policy: RetryPolicy = RetryPolicy(),
        inter_message_delay: float = 0.08,
        sleep: Sleep = asyncio.sleep
    ) -> None:
        self.subscribers = subscribers
        self.transport = transport
        self.retry_policy = retry_policy
        self.inter_message_delay = inter_message_delay
        self.sleep = sleep

    async def broadcast(self, message: str) -> BroadcastResult:
        """
        Send ``message`` to every subscriber in store enumeration order.

        The subscriber list is read once up front. Subscribers added or
        removed by a command handler while the broadcast is suspended may or
        may not be reached.
        """
        result = BroadcastResult()

        try:
            recipients = self.subscribers.list_all()
        except PersistenceError as e:
            logger.error("Could not load subscribers for broadcast", error=str(e))
            return result

        for subscriber in recipients:
            delivery = await self._deliver(subscriber, message)
            result.results.append(delivery)

            if delivery.state is DeliveryState.SENT:
                result.success_count += 1
                await self.sleep(self.inter_message_delay)
            else:
                result.fail_count += 1
                if delivery.state is DeliveryState.REMOVED:
                    result.removed.append(subscriber.id)

        logger.info(
            "Broadcast finished",
            success=result.success_count,
            failed=result.fail_count,
            removed=len(result.removed)
        )
        return result

    async def _deliver(self, subscriber: Subscriber, message: str) -> DeliveryResult:
        """Run the per-subscriber state machine to a final state."""
        delivery = DeliveryResult(recipient_id=subscriber.id)

        while not delivery.state.is_final:
            delivery.state = DeliveryState.SENDING
            delivery.attempt_count += 1
            attempt = delivery.attempt_count

            try:
                await self.transport.send(subscriber.id, message)
                delivery.state = DeliveryState.SENT
                delivery.error = None

            except Exception as e:
                delivery.error = e
                if is_terminal_delivery_error(e):
                    logger.warning(
                        "Recipient unreachable, removing subscriber",
                        subscriber_id=subscriber.id,
                        attempt=attempt,
                        error=str(e)
                    )
                    self._remove(subscriber.id)
                    delivery.state = DeliveryState.REMOVED
                    continue

                logger.warning(
                    "Delivery attempt failed",
                    subscriber_id=subscriber.id,
                    attempt=attempt,
                    max_attempts=self.retry_policy.max_attempts,
                    retry_after=getattr(e, "retry_after", None),
                    error=str(e)
                )
                if self.retry_policy.should_retry(attempt):
                    delivery.state = DeliveryState.RETRYING
                    await self.sleep(self.retry_policy.delay_for(attempt))
                else:
                    delivery.state = DeliveryState.FAILED

        return delivery

    def _remove(self, subscriber_id: str) -> None:
        try:
            self.subscribers.remove(subscriber_id)
        except PersistenceError as e:
            logger.error("Failed to remove subscriber", subscriber_id=subscriber_id, error=str(e))
