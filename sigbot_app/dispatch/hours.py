"""Operating-hours gate."""

from datetime import datetime, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class OperatingWindow:
    """
    Local-time window ``[start_hour:00, end_hour:end_minute)`` during which
    cycles may evaluate symbols.
    """

    def __init__(
        self,
        tz_name: str = "Asia/Ho_Chi_Minh",
        start_hour: int = 4,
        end_hour: int = 23,
        end_minute: int = 30,
        clock: Callable[[], datetime] = _utc_now
    ) -> None:
        self.tz = ZoneInfo(tz_name)
        self.start_hour = start_hour
        self.end_hour = end_hour
        self.end_minute = end_minute
        self.clock = clock

    def local_now(self) -> datetime:
        """Current wall-clock time in the reference zone."""
        return self.clock().astimezone(self.tz)

    def is_open(self, at: Optional[datetime] = None) -> bool:
        """True when ``at`` (default: now) falls inside the window."""
        local = at.astimezone(self.tz) if at is not None else self.local_now()
        if local.hour < self.start_hour:
            return False
        return (local.hour, local.minute) < (self.end_hour, self.end_minute)

    def describe(self) -> str:
        return f"{self.start_hour:02d}:00 - {self.end_hour:02d}:{self.end_minute:02d}"
