"""Pytest configuration and shared fixtures."""

from datetime import datetime, timezone
from typing import Any, Callable, Optional

import pytest

from sigbot_app.delivery import BroadcastFanout, RetryPolicy
from sigbot_app.delivery.base import BaseDeliveryTransport
from sigbot_app.dispatch import (
    CircuitBreaker,
    ConfidenceFilter,
    DuplicateSuppressor,
    OperatingWindow,
    PacingPolicy,
)
from sigbot_app.models import CycleState, Direction, Signal
from sigbot_app.orchestrator import SignalOrchestrator
from sigbot_app.persistence import InMemoryDedupStore, InMemorySubscriberStore
from sigbot_app.sources import SignalSource

# 10:00 local time in Asia/Ho_Chi_Minh (UTC+7)
OPEN_TIME = datetime(2025, 1, 15, 3, 0, 0, tzinfo=timezone.utc)


class RecordingSleep:
    """Async sleep replacement that records requested delays and returns at once."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeTransport(BaseDeliveryTransport):
    """Transport that records deliveries and raises scripted failures per recipient."""

    def __init__(self, failures: Optional[dict[str, list[Exception]]] = None):
        super().__init__("fake")
        self.failures = {k: list(v) for k, v in (failures or {}).items()}
        self.sent: list[tuple[str, str]] = []
        self.attempts: list[str] = []

    async def send(self, recipient_id: str, text: str) -> None:
        self.attempts.append(recipient_id)
        pending = self.failures.get(recipient_id)
        if pending:
            self._error_count += 1
            raise pending.pop(0)
        self.sent.append((recipient_id, text))
        self._delivery_count += 1


class ScriptedSource(SignalSource):
    """
    Source returning scripted verdicts per symbol.

    A verdict may be a Signal, an exception instance (raised), or a callable
    taking the symbol. Unknown symbols yield NO_TRADE unless ``default`` is set.
    """

    def __init__(self, name: str = "scripted", verdicts: Optional[dict[str, Any]] = None,
                 default: Any = None):
        super().__init__(name)
        self.verdicts = verdicts or {}
        self.default = default
        self.calls: list[str] = []

    async def analyze(self, symbol: str) -> Signal:
        self.calls.append(symbol)
        self._call_count += 1
        outcome = self.verdicts.get(symbol, self.default)
        if callable(outcome):
            outcome = outcome(symbol)
        if isinstance(outcome, BaseException):
            self._error_count += 1
            raise outcome
        if outcome is None:
            return Signal(symbol=symbol, direction=Direction.NO_TRADE, source=self.label)
        return outcome


def signal_for(symbol: str, direction: Direction = Direction.LONG,
               confidence: float = 75.0, source: str = "scripted") -> Signal:
    """Build a complete signal verdict."""
    return Signal(
        symbol=symbol,
        direction=direction,
        confidence=confidence,
        entry=100.0,
        stop_loss=95.0,
        take_profit=110.0,
        risk_reward="1:2",
        source=source,
    )


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def subscribers() -> InMemorySubscriberStore:
    """Store with two subscribers."""
    store = InMemorySubscriberStore()
    store.add("100", {"display_name": "Alice", "username": "alice"})
    store.add("200", {"display_name": "Bob"})
    return store


@pytest.fixture
def dedup_store() -> InMemoryDedupStore:
    return InMemoryDedupStore()


@pytest.fixture
def make_signal() -> Callable[..., Signal]:
    return signal_for


@pytest.fixture
def make_source() -> Callable[..., ScriptedSource]:
    return ScriptedSource


@pytest.fixture
def make_transport() -> Callable[..., FakeTransport]:
    return FakeTransport


@pytest.fixture
def make_orchestrator(sleep, transport, subscribers, dedup_store) -> Callable[..., SignalOrchestrator]:
    """
    Factory for orchestrators wired to in-memory stores, the fake transport
    and the recording sleep. The operating window is open unless
    ``now`` says otherwise.
    """

    def _make(symbols, sources, now: datetime = OPEN_TIME, sleep_fn=None, **overrides) -> SignalOrchestrator:
        sleep_fn = sleep_fn or sleep
        state = overrides.pop("state", None) or CycleState()
        store = overrides.pop("subscribers", subscribers)
        fanout = BroadcastFanout(
            store,
            overrides.pop("transport", transport),
            retry_policy=RetryPolicy(max_attempts=3, backoff_seconds=1.0),
            inter_message_delay=0.08,
            sleep=sleep_fn,
        )
        kwargs = dict(
            symbols=symbols,
            sources=sources,
            subscribers=store,
            fanout=fanout,
            suppressor=DuplicateSuppressor(overrides.pop("dedup_store", dedup_store), 3600),
            window=OperatingWindow(clock=lambda: now),
            confidence_filter=ConfidenceFilter(60.0),
            pacing=PacingPolicy(between_evaluations=3.0, after_dispatch=2.0),
            state=state,
            breaker=CircuitBreaker(state, threshold=5, cooldown_seconds=600.0),
            sleep=sleep_fn,
        )
        kwargs.update(overrides)
        return SignalOrchestrator(**kwargs)

    return _make


@pytest.fixture
def config_dir(tmp_path, monkeypatch):
    """Empty configuration directory; environment overrides cleared."""
    monkeypatch.delenv("SIGBOT_CONFIG_DIR", raising=False)
    monkeypatch.delenv("SIGBOT_DB_PATH", raising=False)
    directory = tmp_path / "config"
    directory.mkdir()
    return directory
