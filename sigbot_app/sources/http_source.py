"""HTTP signal source backed by an external analysis service."""

import asyncio
import json
import socket
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import urlparse
from urllib.request import Request, urlopen

from ..config.defaults import SourceParams
from ..errors import (
    RATE_LIMIT_STATUS_CODES,
    AnalysisError,
    ConfigurationError,
    UpstreamRateLimitError,
)
from ..models import Signal
from .base import SignalSource


class HttpSignalSource(SignalSource):
    """POSTs ``{"symbol": ...}`` to an analyzer and parses the JSON verdict."""

    def __init__(self, params: SourceParams):
        super().__init__(params.name, params.label)
        self.params = params

        parsed = urlparse(params.url)
        if not parsed.scheme or not parsed.netloc:
            raise ConfigurationError(f"Invalid source URL: {params.url}")

    async def analyze(self, symbol: str) -> Signal:
        """Run the blocking request off the event loop."""
        self._call_count += 1
        try:
            payload = await asyncio.to_thread(self._request, symbol)
            return Signal.from_payload(payload, symbol=symbol, source=self.label)
        except Exception:
            self._error_count += 1
            raise

    def _request(self, symbol: str) -> dict[str, Any]:
        """Perform a single analysis request."""
        data = json.dumps({"symbol": symbol}).encode('utf-8')
        headers = {
            'Content-Type': 'application/json',
            'Content-Length': str(len(data)),
            'User-Agent': 'sigbot-app/1.0'
        }

        req = Request(self.params.url, data=data, headers=headers, method="POST")

        try:
            with urlopen(req, timeout=self.params.timeout_seconds) as response:
                body = response.read().decode('utf-8')

        except HTTPError as e:
            error_msg = f"HTTP {e.code}: {e.reason}"
            self.logger.warning(
                "Analyzer HTTP error",
                symbol=symbol,
                error_code=e.code,
                error_reason=str(e.reason)
            )

            if e.code in RATE_LIMIT_STATUS_CODES:
                retry_after = e.headers.get("Retry-After") if e.headers else None
                raise UpstreamRateLimitError(
                    error_msg,
                    retry_after=float(retry_after) if retry_after and retry_after.isdigit() else None,
                    symbol=symbol,
                    source=self.name,
                    status_code=e.code
                ) from e
            raise AnalysisError(error_msg, symbol=symbol, source=self.name, status_code=e.code) from e

        except (OSError, URLError, socket.timeout) as e:
            raise AnalysisError(
                f"Network error: {str(e)}",
                symbol=symbol,
                source=self.name
            ) from e

        try:
            return json.loads(body)
        except json.JSONDecodeError as e:
            raise AnalysisError(
                f"Invalid JSON from analyzer: {str(e)}",
                symbol=symbol,
                source=self.name
            ) from e
