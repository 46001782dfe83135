"""
Dispatch decisions: operating window, confidence filter, duplicate
suppression, rate-limit circuit breaker and politeness pacing.
"""

from .breaker import BreakerDecision, CircuitBreaker
from .dedup import DuplicateSuppressor
from .filters import ConfidenceFilter
from .hours import OperatingWindow
from .pacing import PacingPolicy

__all__ = [
    "BreakerDecision",
    "CircuitBreaker",
    "ConfidenceFilter",
    "DuplicateSuppressor",
    "OperatingWindow",
    "PacingPolicy",
]
