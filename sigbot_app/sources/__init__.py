"""
Pluggable signal sources.

A source turns a symbol into a Signal verdict or raises an UpstreamError
subclass that the circuit breaker can classify.
"""

from .base import CallableSignalSource, SignalSource
from .http_source import HttpSignalSource

__all__ = ["CallableSignalSource", "HttpSignalSource", "SignalSource"]
