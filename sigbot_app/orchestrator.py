"""
Signal dispatch orchestrator.

Runs one complete evaluation cycle over the symbol universe:

    operating window -> subscribers? -> for symbol, for source:
        analyze -> confidence filter -> dedup -> broadcast -> mark sent

Only one cycle may be in flight per orchestrator. A trigger that arrives
while a cycle is running is dropped, not queued.
"""

import asyncio
import random
from typing import Awaitable, Callable, Optional, Sequence

import structlog

from .config.defaults import DefaultConfig
from .delivery import BroadcastFanout, RetryPolicy
from .delivery.base import BaseDeliveryTransport
from .dispatch import (
    CircuitBreaker,
    ConfidenceFilter,
    DuplicateSuppressor,
    OperatingWindow,
    PacingPolicy,
)
from .errors import PersistenceError
from .logging.config import get_dispatch_logger, log_filter_decision
from .models import CycleReport, CycleState, CycleStatus, Signal
from .persistence import DedupStore, SubscriberStore
from .rendering import format_signal_message
from .sources import SignalSource

logger = structlog.get_logger(__name__)
dispatch_logger = get_dispatch_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class SignalOrchestrator:
    """
    Wires sources, filters, dedup, breaker and fan-out into the cycle loop.

    All waiting goes through ``sleep`` so that command handlers can run in
    the gaps, and so tests can replace it.
    """

    def __init__(
        self,
        symbols: Sequence[str],
        sources: Sequence[SignalSource],
        subscribers: SubscriberStore,
        fanout: BroadcastFanout,
        suppressor: DuplicateSuppressor,
        window: OperatingWindow,
        confidence_filter: Optional[ConfidenceFilter] = None,
        pacing: Optional[PacingPolicy] = None,
        state: Optional[CycleState] = None,
        breaker: Optional[CircuitBreaker] = None,
        sleep: Sleep = asyncio.sleep,
        rng: Optional[random.Random] = None
    ) -> None:
        if not sources:
            raise ValueError("At least one signal source is required")

        self.symbols = [s.upper() for s in symbols]
        self.sources = list(sources)
        self.subscribers = subscribers
        self.fanout = fanout
        self.suppressor = suppressor
        self.window = window
        self.confidence_filter = confidence_filter or ConfidenceFilter()
        self.pacing = pacing or PacingPolicy()
        self.state = state or CycleState()
        self.breaker = breaker or CircuitBreaker(self.state)
        self.sleep = sleep
        self.rng = rng or random.Random()

    @classmethod
    def from_config(
        cls,
        config: DefaultConfig,
        sources: Sequence[SignalSource],
        subscribers: SubscriberStore,
        dedup_store: DedupStore,
        transport: BaseDeliveryTransport,
        sleep: Sleep = asyncio.sleep
    ) -> "SignalOrchestrator":
        """Build an orchestrator and its collaborators from configuration."""
        state = CycleState()
        fanout = BroadcastFanout(
            subscribers,
            transport,
            retry_policy=RetryPolicy(
                max_attempts=config.broadcast.max_attempts,
                backoff_seconds=config.broadcast.backoff_seconds
            ),
            inter_message_delay=config.broadcast.inter_message_delay,
            sleep=sleep
        )
        return cls(
            symbols=config.symbols,
            sources=sources,
            subscribers=subscribers,
            fanout=fanout,
            suppressor=DuplicateSuppressor(dedup_store, config.dedup.window_seconds),
            window=OperatingWindow(
                config.schedule.timezone,
                config.schedule.start_hour,
                config.schedule.end_hour,
                config.schedule.end_minute
            ),
            confidence_filter=ConfidenceFilter(config.filter.min_confidence),
            pacing=PacingPolicy(
                between_evaluations=config.pacing.between_evaluations,
                after_dispatch=config.pacing.after_dispatch,
                progress_growth=config.pacing.progress_growth,
                jitter_seconds=config.pacing.jitter_seconds
            ),
            state=state,
            breaker=CircuitBreaker(
                state,
                threshold=config.breaker.threshold,
                cooldown_seconds=config.breaker.cooldown_seconds
            ),
            sleep=sleep
        )

    async def run_cycle(self) -> CycleReport:
        """Run one evaluation cycle, or drop the trigger if one is in flight."""
        if self.state.is_running:
            logger.info("Cycle already running, skipping this trigger")
            return CycleReport(status=CycleStatus.SKIPPED_RUNNING)

        self.state.is_running = True
        try:
            return await self._run_cycle()
        except Exception as e:
            logger.exception("Critical error in cycle", error=str(e))
            return CycleReport(status=CycleStatus.FAILED)
        finally:
            self.state.is_running = False

    async def _run_cycle(self) -> CycleReport:
        local_now = self.window.local_now()
        if not self.window.is_open(local_now):
            logger.info(
                "Outside operating hours, skipping cycle",
                local_time=local_now.strftime("%H:%M"),
                window=self.window.describe()
            )
            return CycleReport(status=CycleStatus.OUTSIDE_HOURS)

        subscriber_count = self.subscriber_count()
        if subscriber_count == 0:
            logger.info("No subscribers, skipping cycle")
            return CycleReport(status=CycleStatus.NO_SUBSCRIBERS)

        logger.info(
            "Starting cycle",
            local_time=local_now.strftime("%H:%M"),
            subscribers=subscriber_count,
            symbols=len(self.symbols),
            sources=len(self.sources)
        )

        report = CycleReport(status=CycleStatus.COMPLETED)
        total = len(self.symbols) * len(self.sources)
        position = 0

        for symbol_index, symbol in enumerate(self.symbols, start=1):
            for source in self.sources:
                logger.debug(
                    "Analyzing",
                    symbol=symbol,
                    source=source.name,
                    progress=f"{symbol_index}/{len(self.symbols)}"
                )
                report.evaluated += 1

                try:
                    signal = await source.analyze(symbol)
                except Exception as e:
                    report.source_errors += 1
                    logger.error("Error analyzing symbol", symbol=symbol, source=source.name, error=str(e))
                    decision = self.breaker.on_failure(e)
                    if decision.abort:
                        report.status = CycleStatus.ABORTED
                        logger.warning(
                            "Cycle aborted by circuit breaker",
                            evaluated=report.evaluated,
                            dispatched=len(report.dispatched)
                        )
                        return report
                else:
                    try:
                        if await self._process_signal(symbol, source, signal):
                            report.dispatched.append(signal.symbol)
                    except Exception as e:
                        logger.exception(
                            "Error dispatching signal",
                            symbol=symbol,
                            source=source.name,
                            error=str(e)
                        )

                await self.sleep(self.pacing.evaluation_delay(position, total, self.rng))
                position += 1

        logger.info(
            "Cycle finished",
            evaluated=report.evaluated,
            signals_found=len(report.dispatched),
            source_errors=report.source_errors
        )
        return report

    async def _process_signal(self, symbol: str, source: SignalSource, signal: Signal) -> bool:
        """Filter, dedup and broadcast one verdict. Returns True when dispatched."""
        reason = self.confidence_filter.rejection_reason(signal)
        if reason is not None:
            log_filter_decision(dispatch_logger, "confidence", False, symbol, reason,
                                context={"source": source.name})
            return False

        dedup_symbol = signal.symbol or symbol
        if not self.suppressor.should_send(dedup_symbol):
            log_filter_decision(
                dispatch_logger, "dedup", False, dedup_symbol,
                f"already signaled within {self.suppressor.window_seconds // 60} minutes",
                context={"source": source.name}
            )
            return False

        index = self.state.next_signal_index()
        message = format_signal_message(signal, index)
        result = await self.fanout.broadcast(message)
        self.suppressor.mark_sent(dedup_symbol)

        logger.info(
            "Signal sent",
            symbol=dedup_symbol,
            direction=signal.direction.value,
            confidence=signal.confidence,
            source=source.name,
            index=index,
            delivered=result.success_count,
            failed=result.fail_count
        )

        await self.sleep(self.pacing.dispatch_delay(self.rng))
        return True

    def subscriber_count(self) -> int:
        """Subscriber count for status replies, zero when the store is down."""
        try:
            return self.subscribers.count()
        except PersistenceError as e:
            logger.error("Could not count subscribers", error=str(e))
            return 0
