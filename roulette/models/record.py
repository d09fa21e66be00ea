"""Database model backing the key/value persistence adapter."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import DateTime, String, Text, select
from sqlalchemy.orm import Mapped, Session, mapped_column

from .base import Base


class StoredRecord(Base):
    """One persisted value addressed by its record key."""

    __tablename__ = "roulette_records"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    """Record key, e.g. ``"participants"`` or ``"settings"``."""

    payload: Mapped[str] = mapped_column(Text, nullable=False)
    """JSON document holding the record value."""

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    """Timestamp bumped on every write."""

    def __init__(
        self,
        *,
        key: str,
        payload: str,
        updated_at: Optional[datetime] = None,
    ) -> None:
        self.key = key
        self.payload = payload
        if updated_at is not None:
            self.updated_at = updated_at

    def __repr__(self) -> str:  # pragma: no cover - repr is trivial
        return "<StoredRecord(key={key}, bytes={size})>".format(
            key=self.key,
            size=len(self.payload or ""),
        )

    @classmethod
    def get_by_key(cls, session: Session, key: str) -> Optional["StoredRecord"]:
        """Return the record stored under ``key`` if it exists."""

        return session.scalar(select(cls).where(cls.key == key))


__all__ = ["StoredRecord"]
