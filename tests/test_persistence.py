from __future__ import annotations

import unittest

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from roulette.db import create_schema
from roulette.errors import DeserializationError, PersistenceError
from roulette.models import StoredRecord
from roulette.persistence import SQLAlchemyKeyValueStore


class SQLAlchemyKeyValueStoreTests(unittest.TestCase):
    def setUp(self) -> None:
        # In-memory SQLite for isolation
        self.engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        create_schema(self.engine)
        self.Session = sessionmaker(
            bind=self.engine, future=True, expire_on_commit=False
        )
        self.store = SQLAlchemyKeyValueStore(self.Session)

    def tearDown(self) -> None:
        self.engine.dispose()

    def test_missing_key_returns_none(self) -> None:
        self.assertIsNone(self.store.get("participants"))

    def test_set_then_get_round_trips(self) -> None:
        value = [{"id": "a1", "name": "João", "tags": [1, 2]}]
        self.store.set("participants", value)
        self.assertEqual(self.store.get("participants"), value)

    def test_set_overwrites_single_row(self) -> None:
        self.store.set("settings", {"show_winner_modal": True})
        self.store.set("settings", {"show_winner_modal": False})
        self.assertEqual(self.store.get("settings"), {"show_winner_modal": False})
        with self.Session() as session:
            self.assertEqual(session.query(StoredRecord).count(), 1)

    def test_corrupted_payload_raises_deserialization_error(self) -> None:
        with self.Session.begin() as session:
            session.add(StoredRecord(key="history", payload="{not json"))
        with self.assertRaises(DeserializationError) as ctx:
            self.store.get("history")
        self.assertEqual(ctx.exception.key, "history")

    def test_unserializable_value_raises_persistence_error(self) -> None:
        with self.assertRaises(PersistenceError):
            self.store.set("tasks", {"bad": object()})
        self.assertIsNone(self.store.get("tasks"))

    def test_database_failure_raises_persistence_error(self) -> None:
        broken_engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        # No schema: every write fails at the SQL layer.
        store = SQLAlchemyKeyValueStore(sessionmaker(bind=broken_engine, future=True))
        try:
            with self.assertRaises(PersistenceError):
                store.set("tasks", [])
        finally:
            broken_engine.dispose()

    def test_unreadable_store_raises_deserialization_error(self) -> None:
        bare_engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
        store = SQLAlchemyKeyValueStore(sessionmaker(bind=bare_engine, future=True))
        try:
            with self.assertLogs("roulette.persistence", level="WARNING"):
                with self.assertRaises(DeserializationError) as ctx:
                    store.get("settings")
            self.assertEqual(ctx.exception.key, "settings")
        finally:
            bare_engine.dispose()


if __name__ == "__main__":
    unittest.main()
