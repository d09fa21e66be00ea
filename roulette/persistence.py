"""Key/value persistence boundary and its SQLAlchemy implementation."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .errors import DeserializationError, PersistenceError
from .models import StoredRecord

logger = logging.getLogger(__name__)

PARTICIPANTS_KEY = "participants"
TASKS_KEY = "tasks"
SETTINGS_KEY = "settings"
HISTORY_KEY = "history"

RECORD_KEYS = (PARTICIPANTS_KEY, TASKS_KEY, SETTINGS_KEY, HISTORY_KEY)


class PersistenceAdapter(Protocol):
    """Durable store the service reads at startup and writes after mutations."""

    def get(self, key: str) -> Optional[Any]:
        """Return the decoded value for ``key`` or ``None`` when absent.

        Raises :class:`DeserializationError` when stored data cannot be decoded.
        """
        ...

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``; raises :class:`PersistenceError` on failure."""
        ...


class SQLAlchemyKeyValueStore:
    """Stores each key as one JSON row in the ``roulette_records`` table."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._session_factory = session_factory

    def get(self, key: str) -> Optional[Any]:
        try:
            with self._session_factory() as session:
                record = StoredRecord.get_by_key(session, key)
                if record is None:
                    return None
                payload = record.payload
        except SQLAlchemyError as exc:
            logger.warning(f"Failed to read record '{key}': {exc}")
            raise DeserializationError(key, f"store is unreadable: {exc}") from exc
        try:
            return json.loads(payload)
        except (TypeError, ValueError) as exc:
            raise DeserializationError(key, str(exc)) from exc

    def set(self, key: str, value: Any) -> None:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(key, f"value is not JSON serializable: {exc}") from exc
        try:
            with self._session_factory.begin() as session:
                record = StoredRecord.get_by_key(session, key)
                if record is None:
                    session.add(StoredRecord(key=key, payload=payload))
                else:
                    record.payload = payload
        except SQLAlchemyError as exc:
            logger.error(f"Failed to write record '{key}': {exc}")
            raise PersistenceError(key, str(exc)) from exc
        logger.debug(f"Stored record '{key}' ({len(payload)} bytes)")


__all__ = [
    "HISTORY_KEY",
    "PARTICIPANTS_KEY",
    "RECORD_KEYS",
    "SETTINGS_KEY",
    "TASKS_KEY",
    "PersistenceAdapter",
    "SQLAlchemyKeyValueStore",
]
