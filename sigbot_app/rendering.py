"""Human-readable message templates."""

from typing import Any, Optional, Sequence, Union

from .models import Direction, Signal

DISCLAIMER = (
    "⚠️ Always follow risk management: risk at most 2-3% per trade. "
    "Signals are for reference only; stop for the day after 3 wins."
)


def fmt_num(value: Any) -> str:
    """Format a price: 2-4 decimals above 1, up to 8 significant decimals below."""
    if value is None or isinstance(value, bool):
        return "N/A"
    try:
        number = float(value)
    except (TypeError, ValueError):
        return "N/A"
    if number != number:
        return "N/A"

    if number >= 1:
        text = f"{number:,.4f}"
        whole, _, decimals = text.partition(".")
        decimals = decimals.rstrip("0").ljust(2, "0")
        return f"{whole}.{decimals}"

    text = f"{number:.8f}".rstrip("0").rstrip(".")
    return text or "0"


def fmt_confidence(confidence: Optional[float]) -> str:
    if confidence is None:
        return "N/A"
    return f"{confidence:g}%"


def short_symbol(symbol: str) -> str:
    return symbol.replace("USDT", "")


def format_signal_message(signal: Signal, signal_index: Union[int, str]) -> str:
    """
    Render a signal for subscribers.

    ``signal_index`` is the running daily index for broadcasts, or a label
    such as ``MANUAL`` for on-demand analysis.
    """
    icon = "🟢" if signal.direction is Direction.LONG else "🔴"

    return (
        f"🤖 Signal [{signal_index} today]\n"
        f"#{short_symbol(signal.symbol)} – [{signal.direction.value}] 📌\n"
        f"\n"
        f"{icon} Entry: {fmt_num(signal.entry)}\n"
        f"🆗 Take Profit: {fmt_num(signal.take_profit)}\n"
        f"🙅‍♂️ Stop-Loss: {fmt_num(signal.stop_loss)}\n"
        f"🪙 RR: {signal.risk_reward or '-'} (Conf: {fmt_confidence(signal.confidence)})\n"
        f"\n"
        f"🧠 By Bot [{signal.source or 'unknown'}]\n"
        f"\n"
        f"{DISCLAIMER}"
    )


def format_no_signal_message(symbol: str, reason: Optional[str] = None) -> str:
    return f"❌ No signal for {symbol}\nReason: {reason or 'No trade'}"


def format_scan_summary(signals: Sequence[Signal], limit: int) -> str:
    """Summary of a full-universe scan, highest confidence first."""
    if not signals:
        return "❌ No signals (confidence ≥ threshold) across the whole list."

    ranked = sorted(signals, key=lambda s: s.confidence, reverse=True)[:limit]
    lines = [f"🔍 FULL SCAN RESULTS ({len(ranked)} signals, showing at most {limit})", ""]
    for signal in ranked:
        lines.append(
            f"#{short_symbol(signal.symbol)} - {signal.direction.value} - "
            f"Conf: {fmt_confidence(signal.confidence)}"
        )
        lines.append(
            f"Entry: {fmt_num(signal.entry)} | SL: {fmt_num(signal.stop_loss)} | "
            f"TP: {fmt_num(signal.take_profit)}"
        )
        lines.append("")
    return "\n".join(lines).rstrip()
