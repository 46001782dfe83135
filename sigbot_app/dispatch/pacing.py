"""Politeness pacing between upstream calls."""

import random
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PacingPolicy:
    """
    Delays inserted after every (symbol, source) evaluation and after every
    dispatched signal.

    The evaluation delay grows linearly with progress through the universe
    by up to ``progress_growth`` (a fraction of the base delay) and adds
    uniform jitter in ``[0, jitter_seconds]``.
    """
    between_evaluations: float = 3.0
    after_dispatch: float = 2.0
    progress_growth: float = 0.0
    jitter_seconds: float = 0.0

    def evaluation_delay(self, position: int, total: int, rng: Optional[random.Random] = None) -> float:
        """Delay after the evaluation at zero-based ``position`` of ``total``."""
        progress = position / (total - 1) if total > 1 else 0.0
        delay = self.between_evaluations * (1.0 + self.progress_growth * progress)
        return delay + self._jitter(rng)

    def dispatch_delay(self, rng: Optional[random.Random] = None) -> float:
        return self.after_dispatch + self._jitter(rng)

    def _jitter(self, rng: Optional[random.Random]) -> float:
        if self.jitter_seconds <= 0:
            return 0.0
        return (rng or random).uniform(0.0, self.jitter_seconds)
