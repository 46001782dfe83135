"""SQLite connection handling shared by the stores."""

import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

import structlog

from ..errors import PersistenceError

_SCHEMA = """
CREATE TABLE IF NOT EXISTS subscribers (
    id TEXT PRIMARY KEY,
    display_name TEXT,
    username TEXT,
    added_at TEXT NOT NULL
);

CREATE TABLE IF NOT EXISTS last_signals (
    symbol TEXT PRIMARY KEY,
    last_sent_epoch INTEGER NOT NULL
);
"""


class Database:
    """SQLite database file with the bot's schema."""

    def __init__(self, db_path: Union[str, Path] = "sigbot.db"):
        self.db_path = Path(db_path)
        self.logger = structlog.get_logger("signal.store")
        self.lock = threading.Lock()

        self._init_database()

    def _init_database(self) -> None:
        """Initialize database schema."""
        if self.db_path.parent and not self.db_path.parent.exists():
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

        with self.connection(operation="init") as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.executescript(_SCHEMA)
            conn.commit()

    @contextmanager
    def connection(self, operation: str = "query") -> Iterator[sqlite3.Connection]:
        """Get a database connection, translating sqlite errors to PersistenceError."""
        conn = None
        try:
            conn = sqlite3.connect(self.db_path, timeout=30.0)
            conn.row_factory = sqlite3.Row
            yield conn
        except sqlite3.Error as e:
            if conn:
                conn.rollback()
            self.logger.error("Database error", operation=operation, error=str(e))
            raise PersistenceError(
                f"Database error during {operation}: {str(e)}",
                operation=operation,
                target=str(self.db_path)
            ) from e
        finally:
            if conn:
                conn.close()
