"""
Logging configuration and utilities for the signal dispatch bot.
"""
from .config import configure_logging, get_dispatch_logger, get_logger

__all__ = ["configure_logging", "get_dispatch_logger", "get_logger"]
