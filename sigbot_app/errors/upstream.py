"""
Signal source error classifications.

The circuit breaker only cares about one distinction: whether the source
reported a throttling or ban-style condition (rate-limit class) or failed
for any other reason.
"""

from typing import Optional, Dict, Any

# 429 Too Many Requests, 418 is what Binance answers once an IP is banned
RATE_LIMIT_STATUS_CODES = (429, 418)


class UpstreamError(Exception):
    """Base class for failures reported by a signal source."""

    def __init__(self, message: str, symbol: Optional[str] = None,
                 source: Optional[str] = None, status_code: Optional[int] = None,
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.symbol = symbol
        self.source = source
        self.status_code = status_code
        self.context = context or {}
        self.recoverable = True


class UpstreamRateLimitError(UpstreamError):
    """Source is throttling or has banned us."""

    def __init__(self, message: str, retry_after: Optional[float] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class AnalysisError(UpstreamError):
    """Any other source failure: bad payload, network error, server error."""


def is_rate_limit_error(error: BaseException) -> bool:
    """
    Classify an arbitrary source failure as rate-limit class or not.

    Sources that raise UpstreamRateLimitError are classified directly. Other
    exceptions are classified by a ``status_code`` attribute. Any other
    UpstreamError is never rate-limit class. Only untyped exceptions fall
    back to an embedded 429/418 code in the error text, which is how HTTP
    client libraries usually surface throttling.
    """
    if isinstance(error, UpstreamRateLimitError):
        return True

    status_code = getattr(error, "status_code", None)
    if status_code is not None:
        return status_code in RATE_LIMIT_STATUS_CODES

    if isinstance(error, UpstreamError):
        return False

    text = str(error)
    return any(str(code) in text for code in RATE_LIMIT_STATUS_CODES)
