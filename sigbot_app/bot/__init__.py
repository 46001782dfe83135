"""Telegram command surface and application wiring."""

from .handlers import build_application, register_handlers

__all__ = ["build_application", "register_handlers"]
