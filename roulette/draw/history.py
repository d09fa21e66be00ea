"""Log of resolved draws, newest first."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Optional

from ..errors import InvalidStateError, ValidationError
from ..models import HistoryEntry, RouletteMode


class HistoryLog:
    def __init__(self, entries: Optional[Iterable[HistoryEntry]] = None) -> None:
        # Index 0 is the most recent entry.
        self._entries: list[HistoryEntry] = list(entries or [])

    def append(self, entry: HistoryEntry) -> None:
        self._entries.insert(0, entry)

    def list(self, mode: Optional[RouletteMode] = None) -> list[HistoryEntry]:
        """Return entries newest-first, optionally only those drawn in ``mode``.

        Raises
        ------
        ValidationError
            If ``mode`` is not a known roulette mode.
        """
        if mode is None:
            return list(self._entries)
        try:
            wanted = RouletteMode(mode)
        except ValueError as exc:
            raise ValidationError(f"unknown roulette mode: {mode!r}") from exc
        return [e for e in self._entries if e.mode is wanted]

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def mark_removed(self, entry_id: str, removed: bool) -> HistoryEntry:
        """Set the ``removed`` marker of one entry, keeping its snapshot and position."""
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                updated = replace(entry, removed=removed)
                self._entries[index] = updated
                return updated
        raise InvalidStateError(f"History entry {entry_id} not found")

    def latest(self) -> Optional[HistoryEntry]:
        return self._entries[0] if self._entries else None

    def clear(self) -> None:
        self._entries = []

    def count(self) -> int:
        return len(self._entries)


__all__ = ["HistoryLog"]
