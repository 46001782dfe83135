"""
Error classification for the signal dispatch pipeline.

Upstream errors come from signal sources and drive the circuit breaker.
Delivery errors come from the transport and drive retry and pruning in the
broadcast fan-out. Persistence errors come from the stores and are always
handled best-effort.
"""

from .upstream import (
    UpstreamError,
    UpstreamRateLimitError,
    AnalysisError,
    RATE_LIMIT_STATUS_CODES,
    is_rate_limit_error,
)
from .delivery import (
    DeliveryError,
    DeliveryTerminalError,
    DeliveryTransientError,
    TERMINAL_STATUS_CODES,
    is_terminal_delivery_error,
)
from .system_failures import (
    SystemFailureError,
    PersistenceError,
    ConfigurationError,
)

__all__ = [
    # Upstream (signal source) errors
    "UpstreamError",
    "UpstreamRateLimitError",
    "AnalysisError",
    "RATE_LIMIT_STATUS_CODES",
    "is_rate_limit_error",
    # Delivery errors
    "DeliveryError",
    "DeliveryTerminalError",
    "DeliveryTransientError",
    "TERMINAL_STATUS_CODES",
    "is_terminal_delivery_error",
    # System failures
    "SystemFailureError",
    "PersistenceError",
    "ConfigurationError",
]
