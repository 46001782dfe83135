"""Base classes for signal sources."""

import inspect
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Union

import structlog

from ..models import Signal

AnalyzerResult = Union[Signal, dict[str, Any]]
Analyzer = Callable[[str], Union[AnalyzerResult, Awaitable[AnalyzerResult]]]


class SignalSource(ABC):
    """Base class for signal sources."""

    def __init__(self, name: str, label: Optional[str] = None):
        self.name = name
        self.label = label or name
        self.logger = structlog.get_logger(f"signal.source.{name}")
        self._call_count = 0
        self._error_count = 0

    @abstractmethod
    async def analyze(self, symbol: str) -> Signal:
        """
        Evaluate a symbol.

        Args:
            symbol: Uppercase trading symbol, e.g. BTCUSDT

        Returns:
            Signal verdict with ``source`` set to this source's label

        Raises:
            UpstreamRateLimitError: the upstream is throttling or banning us
            AnalysisError: any other failure
        """

    def get_stats(self) -> dict[str, Any]:
        """Get call statistics."""
        return {
            "name": self.name,
            "call_count": self._call_count,
            "error_count": self._error_count,
        }


class CallableSignalSource(SignalSource):
    """Adapts a plain analyzer function (sync or async) to a SignalSource."""

    def __init__(self, name: str, analyzer: Analyzer, label: Optional[str] = None):
        super().__init__(name, label)
        self._analyzer = analyzer

    async def analyze(self, symbol: str) -> Signal:
        self._call_count += 1
        try:
            result = self._analyzer(symbol)
            if inspect.isawaitable(result):
                result = await result
        except Exception:
            self._error_count += 1
            raise

        if isinstance(result, Signal):
            return result
        return Signal.from_payload(result, symbol=symbol, source=self.label)
