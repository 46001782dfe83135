"""
Inbound command semantics, independent of the chat transport.

Commands mutate the subscriber store or query sources directly. They never
touch the dedup window, never broadcast and never change cycle state; every
failure is turned into a plain-text reply for the requester.
"""

import asyncio
from typing import Any, Awaitable, Callable, Optional, Sequence

import structlog

from .config.defaults import ManualParams
from .dispatch import ConfidenceFilter
from .errors import PersistenceError
from .models import Signal
from .persistence import SubscriberStore
from .rendering import (
    format_no_signal_message,
    format_scan_summary,
    format_signal_message,
)
from .sources import SignalSource

logger = structlog.get_logger(__name__)

Sleep = Callable[[float], Awaitable[None]]

HELP_TEXT = (
    "Available Commands:\n\n"
    "/start              – Subscribe to automatic signals.\n"
    "/stop               – Unsubscribe.\n"
    "/analyzesymbol SYM  – Analyze one symbol now (only you get the answer).\n"
    "/analyzeall         – Scan the whole list now (may take a few minutes).\n"
    "/users              – List subscribers.\n"
    "/help               – Show this message.\n\n"
    "Note: signals are for reference only, not investment advice."
)


def normalize_symbol(raw: str) -> str:
    """Uppercase and append the USDT quote when it is missing."""
    symbol = raw.strip().upper()
    return symbol if symbol.endswith("USDT") else f"{symbol}USDT"


class CommandService:
    """Implements subscribe, unsubscribe and manual analysis commands."""

    def __init__(
        self,
        subscribers: SubscriberStore,
        sources: Sequence[SignalSource],
        symbols: Sequence[str],
        confidence_filter: Optional[ConfidenceFilter] = None,
        params: ManualParams = ManualParams(),
        sleep: Sleep = asyncio.sleep
    ) -> None:
        self.subscribers = subscribers
        self.sources = list(sources)
        self.symbols = [s.upper() for s in symbols]
        self.confidence_filter = confidence_filter or ConfidenceFilter()
        self.params = params
        self.sleep = sleep

    def subscribe(self, recipient_id: str, metadata: Optional[dict[str, Any]] = None) -> str:
        """Add or overwrite the requester's subscription."""
        metadata = metadata or {}
        name = metadata.get("display_name") or "Trader"
        try:
            self.subscribers.add(str(recipient_id), metadata)
        except PersistenceError as e:
            logger.error("Subscribe failed", recipient_id=str(recipient_id), error=str(e))
            return "❌ Could not register you right now, please try /start again later."

        logger.info("Subscribed user", recipient_id=str(recipient_id), name=name)
        return (
            f"👋 Hello {name}!\n\n"
            "You are now subscribed to automatic signals.\n"
            "Just keep the bot and wait for signals. For a manual analysis use "
            "/analyzesymbol SYMBOL\n\n"
            "⚠️ Signals are for reference only. Always follow risk management."
        )

    def unsubscribe(self, recipient_id: str) -> str:
        """Remove the requester's subscription if present."""
        try:
            removed = self.subscribers.remove(str(recipient_id))
        except PersistenceError as e:
            logger.error("Unsubscribe failed", recipient_id=str(recipient_id), error=str(e))
            return "❌ Could not unsubscribe you right now, please try /stop again later."

        if removed:
            logger.info("User unsubscribed", recipient_id=str(recipient_id))
            return "🗑️ You have unsubscribed. Send /start to subscribe again."
        return "You are not subscribed. Send /start to subscribe."

    async def manual_analyze(self, raw_symbol: str) -> list[str]:
        """
        Analyze one symbol with every source and reply to the requester only.

        Tradeable verdicts are rendered in full regardless of confidence; the
        dedup window is neither checked nor updated.
        """
        if not raw_symbol or not raw_symbol.strip():
            return ["Usage: /analyzesymbol SYMBOL"]

        symbol = normalize_symbol(raw_symbol)
        replies = []

        for source in self.sources:
            try:
                signal = await source.analyze(symbol)
            except Exception as e:
                logger.error("Manual analysis failed", symbol=symbol, source=source.name, error=str(e))
                replies.append(f"❌ Error analyzing {symbol} ({source.label}): {e}")
                continue

            if signal.is_tradeable:
                replies.append(format_signal_message(signal, "MANUAL"))
            else:
                reason = signal.reason or signal.direction.value
                replies.append(format_no_signal_message(symbol, f"{reason} ({source.label})"))

        return replies

    async def analyze_all(self) -> str:
        """Scan the whole universe and summarize qualifying verdicts."""
        found: list[Signal] = []

        for symbol in self.symbols:
            for source in self.sources:
                try:
                    signal = await source.analyze(symbol)
                except Exception as e:
                    logger.warning("Scan analysis failed", symbol=symbol, source=source.name, error=str(e))
                    continue
                if self.confidence_filter.passes(signal):
                    found.append(signal)
            await self.sleep(self.params.scan_delay_seconds)

        return format_scan_summary(found, self.params.scan_result_limit)

    def list_users(self) -> str:
        """Subscriber listing, capped at the configured limit."""
        try:
            subscribers = self.subscribers.list_all()
        except PersistenceError as e:
            logger.error("Listing subscribers failed", error=str(e))
            return "❌ Could not load subscribers."

        lines = [f"📊 Subscribers: {len(subscribers)}", ""]
        for subscriber in subscribers[:self.params.users_list_limit]:
            handle = f" (@{subscriber.username})" if subscriber.username else ""
            lines.append(f"- {subscriber.id}{handle} added: {subscriber.added_at}")
        return "\n".join(lines)

    @staticmethod
    def help_text() -> str:
        return HELP_TEXT
