"""Signal verdict produced by a signal source."""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from ..errors import AnalysisError


class Direction(Enum):
    """Direction of a signal verdict."""
    LONG = "LONG"
    SHORT = "SHORT"
    NEUTRAL = "NEUTRAL"
    NO_TRADE = "NO_TRADE"


TRADEABLE_DIRECTIONS = frozenset({Direction.LONG, Direction.SHORT})


def _optional_float(value: Any) -> Optional[float]:
    """Coerce numeric-ish payload values, mapping junk to None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return None if math.isnan(number) else number


@dataclass(frozen=True)
class Signal:
    """
    Ephemeral signal verdict.

    Produced by a signal source call and consumed immediately by the
    dispatch pipeline. Only its dispatch time is ever persisted.
    """
    symbol: str
    direction: Direction
    confidence: float = 0.0
    entry: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    risk_reward: Optional[str] = None
    source: str = ""
    reason: Optional[str] = None

    @property
    def is_tradeable(self) -> bool:
        """True for LONG and SHORT verdicts."""
        return self.direction in TRADEABLE_DIRECTIONS

    @classmethod
    def from_payload(cls, payload: dict[str, Any], symbol: str, source: str) -> "Signal":
        """
        Parse an analyzer payload.

        Accepts both the long field names and the short aliases analyzers
        commonly emit (``sl``, ``tp``, ``rr``), and falls back to
        ``meta.confidence`` when the top-level confidence is missing or zero.
        A missing direction is read as NO_TRADE.
        """
        if not isinstance(payload, dict):
            raise AnalysisError(
                f"Analyzer payload must be an object, got {type(payload).__name__}",
                symbol=symbol,
                source=source
            )

        raw_direction = payload.get("direction") or Direction.NO_TRADE.value
        try:
            direction = Direction(str(raw_direction).upper())
        except ValueError as e:
            raise AnalysisError(
                f"Unknown direction {raw_direction!r}",
                symbol=symbol,
                source=source
            ) from e

        confidence = _optional_float(payload.get("confidence"))
        if not confidence:
            meta = payload.get("meta") or {}
            confidence = _optional_float(meta.get("confidence")) if isinstance(meta, dict) else None

        risk_reward = payload.get("riskReward", payload.get("risk_reward", payload.get("rr")))

        return cls(
            symbol=str(payload.get("symbol") or symbol).upper(),
            direction=direction,
            confidence=confidence or 0.0,
            entry=_optional_float(payload.get("entry")),
            stop_loss=_optional_float(payload.get("stopLoss", payload.get("stop_loss", payload.get("sl")))),
            take_profit=_optional_float(payload.get("takeProfit", payload.get("take_profit", payload.get("tp")))),
            risk_reward=str(risk_reward) if risk_reward not in (None, "") else None,
            source=str(payload.get("source") or source),
            reason=payload.get("reason"),
        )
