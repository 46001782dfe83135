"""
System failure error classifications.

These exceptions represent failures of the bot's own infrastructure rather
than of a single symbol, source or subscriber.
"""

from typing import Optional, Dict, Any


class SystemFailureError(Exception):
    """Base class for infrastructure failures."""

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = False


class PersistenceError(SystemFailureError):
    """Database or file system persistence failures."""

    def __init__(self, message: str, operation: Optional[str] = None,
                 target: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation
        self.target = target
        # Callers always degrade gracefully around store failures
        self.recoverable = True


class ConfigurationError(SystemFailureError):
    """Invalid or missing configuration detected at startup."""

    def __init__(self, message: str, errors: Optional[list] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.errors = errors or []
