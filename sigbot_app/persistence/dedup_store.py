"""Dedup persistence: symbol -> last successful dispatch epoch."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import DedupRecord
from .database import Database


class DedupStore(ABC):
    """Key-value mapping from uppercase symbol to epoch seconds."""

    @abstractmethod
    def get(self, symbol: str) -> Optional[DedupRecord]:
        """Record of the last dispatch for the symbol, or None."""

    @abstractmethod
    def set(self, symbol: str, epoch: int) -> None:
        """Overwrite the record for the symbol."""

    @abstractmethod
    def count(self) -> int:
        """Number of symbols with a record."""


class InMemoryDedupStore(DedupStore):
    """Dict-backed dedup store."""

    def __init__(self, records: Optional[dict[str, int]] = None) -> None:
        self._records = {k.upper(): int(v) for k, v in (records or {}).items()}

    def get(self, symbol: str) -> Optional[DedupRecord]:
        key = symbol.upper()
        if key not in self._records:
            return None
        return DedupRecord(key, self._records[key])

    def set(self, symbol: str, epoch: int) -> None:
        self._records[symbol.upper()] = int(epoch)

    def count(self) -> int:
        return len(self._records)


class SqliteDedupStore(DedupStore):
    """SQLite-backed dedup store."""

    def __init__(self, database: Database):
        self.db = database

    def get(self, symbol: str) -> Optional[DedupRecord]:
        with self.db.lock, self.db.connection(operation="get_last_signal") as conn:
            row = conn.execute(
                "SELECT symbol, last_sent_epoch FROM last_signals WHERE symbol = ?",
                (symbol.upper(),)
            ).fetchone()
        return DedupRecord(row[0], int(row[1])) if row else None

    def set(self, symbol: str, epoch: int) -> None:
        with self.db.lock, self.db.connection(operation="set_last_signal") as conn:
            conn.execute("""
                INSERT OR REPLACE INTO last_signals (symbol, last_sent_epoch)
                VALUES (?, ?)
            """, (symbol.upper(), int(epoch)))
            conn.commit()

    def count(self) -> int:
        with self.db.lock, self.db.connection(operation="count_last_signals") as conn:
            return conn.execute("SELECT COUNT(*) FROM last_signals").fetchone()[0]
