"""Per-symbol duplicate suppression window."""

import time
from typing import Callable

import structlog

from ..errors import PersistenceError
from ..persistence import DedupStore

logger = structlog.get_logger(__name__)


class DuplicateSuppressor:
    """
    Decides whether a qualifying signal for a symbol may be sent.

    The window is measured from the last successful dispatch. Evaluations
    that never dispatched do not move it. The key is the symbol alone, so a
    dispatch from one source also suppresses every other source.
    """

    def __init__(
        self,
        store: DedupStore,
        window_seconds: int = 3600,
        clock: Callable[[], float] = time.time
    ) -> None:
        self.store = store
        self.window_seconds = window_seconds
        self.clock = clock

    def _now(self) -> int:
        return int(self.clock())

    def should_send(self, symbol: str) -> bool:
        """True iff there is no record or the window has fully elapsed."""
        key = symbol.upper()
        try:
            record = self.store.get(key)
        except PersistenceError as e:
            logger.error("Dedup read failed, treating as no record", symbol=key, error=str(e))
            return True

        if record is None:
            return True

        return (self._now() - record.last_sent_epoch) >= self.window_seconds

    def mark_sent(self, symbol: str) -> None:
        """Overwrite the symbol's record with the current time."""
        key = symbol.upper()
        try:
            self.store.set(key, self._now())
        except PersistenceError as e:
            logger.error("Dedup write failed", symbol=key, error=str(e))
