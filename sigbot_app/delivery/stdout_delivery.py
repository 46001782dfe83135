"""Standard output transport for dry runs."""

import sys
from datetime import datetime, timezone

from .base import BaseDeliveryTransport


class StdoutDelivery(BaseDeliveryTransport):
    """Prints every message instead of sending it."""

    def __init__(self, name: str = "stdout", include_timestamp: bool = True):
        super().__init__(name)
        self.include_timestamp = include_timestamp

    async def send(self, recipient_id: str, text: str) -> None:
        header = f"--- to {recipient_id}"
        if self.include_timestamp:
            header += f" at {datetime.now(timezone.utc).isoformat()}"
        print(f"{header}\n{text}", file=sys.stdout, flush=True)
        self._delivery_count += 1
