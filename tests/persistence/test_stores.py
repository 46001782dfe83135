"""Tests for subscriber and dedup stores."""

import pytest

from sigbot_app.errors import PersistenceError
from sigbot_app.models import DedupRecord
from sigbot_app.persistence import (
    Database,
    InMemoryDedupStore,
    InMemorySubscriberStore,
    SqliteDedupStore,
    SqliteSubscriberStore,
)


@pytest.fixture
def database(tmp_path):
    return Database(tmp_path / "data" / "sigbot.db")


@pytest.fixture(params=["memory", "sqlite"])
def subscriber_store(request, database):
    if request.param == "memory":
        return InMemorySubscriberStore()
    return SqliteSubscriberStore(database)


@pytest.fixture(params=["memory", "sqlite"])
def last_signal_store(request, database):
    if request.param == "memory":
        return InMemoryDedupStore()
    return SqliteDedupStore(database)


class TestSubscriberStore:
    """Behaviour shared by both subscriber store flavours."""

    def test_add_and_get(self, subscriber_store):
        subscriber_store.add("100", {"display_name": "Alice", "username": "alice"})

        subscriber = subscriber_store.get("100")
        assert subscriber.display_name == "Alice"
        assert subscriber.username == "alice"
        assert subscriber.added_at
        assert subscriber_store.count() == 1

    def test_add_is_idempotent(self, subscriber_store):
        subscriber_store.add("100", {"display_name": "Alice"})
        subscriber_store.add("100", {"display_name": "Alice B."})

        assert subscriber_store.count() == 1
        assert subscriber_store.get("100").display_name == "Alice B."

    def test_enumeration_order(self, subscriber_store):
        for subscriber_id in ("300", "100", "200"):
            subscriber_store.add(subscriber_id)
        assert [s.id for s in subscriber_store.list_all()] == ["300", "100", "200"]

    def test_remove(self, subscriber_store):
        subscriber_store.add("100")
        assert subscriber_store.remove("100") is True
        assert subscriber_store.remove("100") is False
        assert subscriber_store.get("100") is None
        assert subscriber_store.count() == 0

    def test_ids_are_strings(self, subscriber_store):
        subscriber_store.add(12345)
        assert subscriber_store.get("12345").id == "12345"


class TestDedupStore:
    """Behaviour shared by both dedup store flavours."""

    def test_missing_symbol(self, last_signal_store):
        assert last_signal_store.get("BTCUSDT") is None

    def test_set_overwrites(self, last_signal_store):
        last_signal_store.set("BTCUSDT", 1000)
        last_signal_store.set("BTCUSDT", 2000)
        assert last_signal_store.get("BTCUSDT").last_sent_epoch == 2000
        assert last_signal_store.count() == 1

    def test_keys_uppercased(self, last_signal_store):
        last_signal_store.set("ethusdt", 1000)
        assert last_signal_store.get("ETHUSDT").last_sent_epoch == 1000


class TestSqlitePersistence:
    """SQLite specifics."""

    def test_records_survive_reopen(self, tmp_path):
        path = tmp_path / "sigbot.db"
        SqliteSubscriberStore(Database(path)).add("100", {"username": "alice"})
        SqliteDedupStore(Database(path)).set("BTCUSDT", 1234)

        reopened = Database(path)
        assert SqliteSubscriberStore(reopened).get("100").username == "alice"
        assert SqliteDedupStore(reopened).get("BTCUSDT") == DedupRecord("BTCUSDT", 1234)

    def test_unusable_path_raises_persistence_error(self, tmp_path):
        # A directory cannot be opened as a database file
        with pytest.raises(PersistenceError) as exc_info:
            Database(tmp_path)
        assert exc_info.value.operation == "init"
        assert exc_info.value.recoverable is True
