"""
Sigbot App - Signal Dispatch Bot

Periodically evaluates a fixed universe of crypto symbols against pluggable
signal sources and broadcasts qualifying signals to Telegram subscribers,
with duplicate suppression and a rate-limit circuit breaker.
"""

__version__ = "0.1.0"
__author__ = "Sigbot Team"
