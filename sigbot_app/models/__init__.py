"""
Data models for signals, subscribers and cycle state.
"""

from .signal import Direction, Signal, TRADEABLE_DIRECTIONS
from .state import CycleReport, CycleState, CycleStatus
from .subscriber import DedupRecord, Subscriber

__all__ = [
    "CycleReport",
    "CycleState",
    "CycleStatus",
    "DedupRecord",
    "Direction",
    "Signal",
    "Subscriber",
    "TRADEABLE_DIRECTIONS",
]
