"""Retry policy for per-recipient delivery."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded attempts with linear backoff."""
    max_attempts: int = 3
    backoff_seconds: float = 1.0

    def should_retry(self, attempt: int) -> bool:
        """Whether another attempt follows the failed attempt number ``attempt`` (1-based)."""
        return attempt < self.max_attempts

    def delay_for(self, attempt: int) -> float:
        """Backoff after the failed attempt number ``attempt`` (1-based)."""
        return self.backoff_seconds * attempt
