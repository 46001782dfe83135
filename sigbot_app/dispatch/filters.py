"""Confidence filter applied to every source verdict."""

from typing import Optional

from ..models import Signal


class ConfidenceFilter:
    """Passes tradeable verdicts whose confidence meets the threshold."""

    def __init__(self, min_confidence: float = 60.0) -> None:
        self.min_confidence = min_confidence

    def rejection_reason(self, signal: Optional[Signal]) -> Optional[str]:
        """None when the signal passes, otherwise why it was dropped."""
        if signal is None:
            return "no result"
        if not signal.is_tradeable:
            return f"direction {signal.direction.value}"
        if signal.confidence < self.min_confidence:
            return f"confidence {signal.confidence:g}% < {self.min_confidence:g}%"
        return None

    def passes(self, signal: Optional[Signal]) -> bool:
        return self.rejection_reason(signal) is None
