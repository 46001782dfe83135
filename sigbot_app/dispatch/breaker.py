"""
Rate-limit circuit breaker.

Counts consecutive rate-limit-class failures from signal sources. When the
count reaches the threshold the current cycle is aborted and a one-shot
cooldown timer resets the counter. Any other failure resets the counter
immediately. Successful calls never touch the breaker.

The breaker only shortens the cycle in flight: it does not pause the
scheduler, so a cycle starting before the cooldown fires begins with the
counter still at (or above) the threshold and aborts on its first
rate-limit failure.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

from ..errors import is_rate_limit_error
from ..logging.config import get_dispatch_logger
from ..models import CycleState

logger = get_dispatch_logger(__name__)


@dataclass(frozen=True)
class BreakerDecision:
    """Outcome of recording a failure."""
    abort: bool
    rate_limited: bool
    consecutive_errors: int


class CircuitBreaker:
    """Consecutive rate-limit failure counter with a cooldown reset."""

    def __init__(
        self,
        state: CycleState,
        threshold: int = 5,
        cooldown_seconds: float = 600.0
    ) -> None:
        self.state = state
        self.threshold = threshold
        self.cooldown_seconds = cooldown_seconds
        self.cooldown_handle: Optional[asyncio.TimerHandle] = None
        self.trip_count = 0

    @property
    def consecutive_errors(self) -> int:
        return self.state.consecutive_error_count

    def on_failure(self, error: BaseException) -> BreakerDecision:
        """Record a source failure and decide whether to abort the cycle."""
        if not is_rate_limit_error(error):
            if self.state.consecutive_error_count:
                logger.debug(
                    "Non rate-limit failure, resetting error counter",
                    previous_count=self.state.consecutive_error_count
                )
            self.state.consecutive_error_count = 0
            return BreakerDecision(abort=False, rate_limited=False, consecutive_errors=0)

        self.state.consecutive_error_count += 1
        count = self.state.consecutive_error_count
        logger.warning(
            "Rate-limit failure",
            consecutive_errors=count,
            threshold=self.threshold,
            error=str(error)
        )

        if count < self.threshold:
            return BreakerDecision(abort=False, rate_limited=True, consecutive_errors=count)

        self.trip_count += 1
        self._arm_cooldown()
        logger.error(
            "Circuit breaker tripped, aborting cycle",
            consecutive_errors=count,
            cooldown_seconds=self.cooldown_seconds
        )
        return BreakerDecision(abort=True, rate_limited=True, consecutive_errors=count)

    def reset(self) -> None:
        """Force the counter back to zero (cooldown timer callback)."""
        self.state.consecutive_error_count = 0
        self.cooldown_handle = None
        logger.info("Circuit breaker reset")

    def _arm_cooldown(self) -> None:
        """Schedule the one-shot counter reset on the running event loop."""
        loop = asyncio.get_running_loop()
        self.cooldown_handle = loop.call_later(self.cooldown_seconds, self.reset)
