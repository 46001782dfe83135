"""
Subscriber and dedup persistence.

Both stores come in an in-memory flavour (tests, dry runs) and a SQLite
flavour sharing one database file. Individual operations are serialized per
store; multi-step read-modify-write sequences across await points are not.
"""

from .database import Database
from .dedup_store import DedupStore, InMemoryDedupStore, SqliteDedupStore
from .subscriber_store import (
    InMemorySubscriberStore,
    SqliteSubscriberStore,
    SubscriberStore,
)

__all__ = [
    "Database",
    "DedupStore",
    "InMemoryDedupStore",
    "InMemorySubscriberStore",
    "SqliteDedupStore",
    "SqliteSubscriberStore",
    "SubscriberStore",
]
