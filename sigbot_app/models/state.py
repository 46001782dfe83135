"""Process-lifetime cycle state and per-cycle reports."""

from dataclasses import dataclass, field
from enum import Enum


@dataclass
class CycleState:
    """
    Mutable state of one orchestrator.

    Held by the orchestrator instance rather than module globals so that
    independent orchestrators (tests, dry runs) never interfere.
    """
    is_running: bool = False
    consecutive_error_count: int = 0
    signals_sent_today: int = 0

    def next_signal_index(self) -> int:
        """Allocate the next daily signal index."""
        self.signals_sent_today += 1
        return self.signals_sent_today


class CycleStatus(Enum):
    """How a cycle ended."""
    COMPLETED = "completed"
    ABORTED = "aborted"                      # Circuit breaker tripped
    SKIPPED_RUNNING = "skipped_running"      # Another cycle in flight
    OUTSIDE_HOURS = "outside_hours"
    NO_SUBSCRIBERS = "no_subscribers"
    FAILED = "failed"                        # Unexpected error, loop survived


@dataclass
class CycleReport:
    """Summary of a single run_cycle call."""
    status: CycleStatus
    evaluated: int = 0
    dispatched: list[str] = field(default_factory=list)
    source_errors: int = 0
