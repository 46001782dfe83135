"""Subscriber persistence: recipient id -> subscriber metadata."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Optional

from ..models import Subscriber
from .database import Database


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SubscriberStore(ABC):
    """Key-value mapping from recipient identity to subscriber metadata."""

    @abstractmethod
    def list_all(self) -> list[Subscriber]:
        """All subscribers in the store's enumeration order."""

    @abstractmethod
    def get(self, subscriber_id: str) -> Optional[Subscriber]:
        """Look up one subscriber."""

    @abstractmethod
    def add(self, subscriber_id: str, metadata: Optional[dict[str, Any]] = None) -> Subscriber:
        """Insert or overwrite a subscriber."""

    @abstractmethod
    def remove(self, subscriber_id: str) -> bool:
        """Delete a subscriber. Returns False when it was not present."""

    @abstractmethod
    def count(self) -> int:
        """Number of subscribers."""

    @staticmethod
    def _build(subscriber_id: str, metadata: Optional[dict[str, Any]]) -> Subscriber:
        metadata = metadata or {}
        return Subscriber(
            id=str(subscriber_id),
            display_name=metadata.get("display_name"),
            username=metadata.get("username"),
            added_at=metadata.get("added_at") or _now_iso(),
        )


class InMemorySubscriberStore(SubscriberStore):
    """Dict-backed store; enumeration follows insertion order."""

    def __init__(self) -> None:
        self._subscribers: dict[str, Subscriber] = {}

    def list_all(self) -> list[Subscriber]:
        return list(self._subscribers.values())

    def get(self, subscriber_id: str) -> Optional[Subscriber]:
        return self._subscribers.get(str(subscriber_id))

    def add(self, subscriber_id: str, metadata: Optional[dict[str, Any]] = None) -> Subscriber:
        subscriber = self._build(subscriber_id, metadata)
        self._subscribers[subscriber.id] = subscriber
        return subscriber

    def remove(self, subscriber_id: str) -> bool:
        return self._subscribers.pop(str(subscriber_id), None) is not None

    def count(self) -> int:
        return len(self._subscribers)


class SqliteSubscriberStore(SubscriberStore):
    """SQLite-backed store; enumeration follows rowid order."""

    def __init__(self, database: Database):
        self.db = database
        self.logger = database.logger

    def list_all(self) -> list[Subscriber]:
        with self.db.lock, self.db.connection(operation="list_subscribers") as conn:
            rows = conn.execute("SELECT * FROM subscribers ORDER BY rowid").fetchall()
        return [self._row_to_subscriber(row) for row in rows]

    def get(self, subscriber_id: str) -> Optional[Subscriber]:
        with self.db.lock, self.db.connection(operation="get_subscriber") as conn:
            row = conn.execute(
                "SELECT * FROM subscribers WHERE id = ?", (str(subscriber_id),)
            ).fetchone()
        return self._row_to_subscriber(row) if row else None

    def add(self, subscriber_id: str, metadata: Optional[dict[str, Any]] = None) -> Subscriber:
        subscriber = self._build(subscriber_id, metadata)
        with self.db.lock, self.db.connection(operation="add_subscriber") as conn:
            conn.execute("""
                INSERT OR REPLACE INTO subscribers (id, display_name, username, added_at)
                VALUES (?, ?, ?, ?)
            """, (subscriber.id, subscriber.display_name, subscriber.username, subscriber.added_at))
            conn.commit()

        self.logger.info("Subscriber stored", subscriber_id=subscriber.id)
        return subscriber

    def remove(self, subscriber_id: str) -> bool:
        with self.db.lock, self.db.connection(operation="remove_subscriber") as conn:
            cursor = conn.execute("DELETE FROM subscribers WHERE id = ?", (str(subscriber_id),))
            conn.commit()
            removed = cursor.rowcount > 0

        if removed:
            self.logger.info("Subscriber removed", subscriber_id=str(subscriber_id))
        return removed

    def count(self) -> int:
        with self.db.lock, self.db.connection(operation="count_subscribers") as conn:
            return conn.execute("SELECT COUNT(*) FROM subscribers").fetchone()[0]

    @staticmethod
    def _row_to_subscriber(row) -> Subscriber:
        return Subscriber(
            id=row["id"],
            display_name=row["display_name"],
            username=row["username"],
            added_at=row["added_at"],
        )
