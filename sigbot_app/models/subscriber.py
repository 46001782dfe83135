"""Subscriber and dedup records owned by the stores."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Subscriber:
    """One recipient of broadcast signals, keyed by chat id."""
    id: str
    display_name: Optional[str] = None
    username: Optional[str] = None
    added_at: Optional[str] = None


@dataclass(frozen=True)
class DedupRecord:
    """Last successful dispatch time for a symbol."""
    symbol: str
    last_sent_epoch: int
