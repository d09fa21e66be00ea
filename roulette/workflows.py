"""Command surface binding the stores, the engine and persistence together."""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Iterable, Optional, TypeVar, Union

from .config import default_settings
from .draw import (
    DrawResult,
    HistoryLog,
    ParticipantPool,
    SelectionEngine,
    SettingsStore,
    TaskQueue,
)
from .errors import DeserializationError, InvalidStateError, ValidationError
from .export import export_history_csv, export_history_json
from .models import HistoryEntry, Participant, RouletteMode, Settings, Task
from .persistence import (
    HISTORY_KEY,
    PARTICIPANTS_KEY,
    SETTINGS_KEY,
    TASKS_KEY,
    PersistenceAdapter,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _decode_list(factory: Callable[[dict], T]) -> Callable[[Any], list[T]]:
    def decode(raw: Any) -> list[T]:
        if not isinstance(raw, list):
            raise TypeError(f"expected a list, got {type(raw).__name__}")
        return [factory(item) for item in raw]

    return decode


class RouletteService:
    """One roulette instance: stores, engine and their persisted records.

    Every command is synchronous. Successful mutations are written to the
    adapter before the command returns; a failed write surfaces as
    :class:`~roulette.errors.PersistenceError`. Failed commands write nothing.
    """

    def __init__(
        self,
        adapter: PersistenceAdapter,
        *,
        rng: Optional[random.Random] = None,
        defaults: Optional[Settings] = None,
    ) -> None:
        """Load every record from ``adapter`` and build the engine.

        Parameters
        ----------
        adapter : PersistenceAdapter
            Key/value store holding ``participants``, ``tasks``, ``settings``
            and ``history``.
        rng : Optional[random.Random], default: None
            Random source shared by the engine and color assignment.
        defaults : Optional[Settings], default: None
            Settings used when none are stored. Typically omitted, in which
            case :func:`roulette.config.default_settings` is used.

        Notes
        -----
        Each key loads independently. A record that cannot be decoded is
        logged and replaced by its empty default; the other keys still load.
        """

        self._adapter = adapter
        base_settings = defaults or default_settings()

        participants = self._load(
            PARTICIPANTS_KEY, _decode_list(Participant.from_json), []
        )
        tasks = self._load(TASKS_KEY, _decode_list(Task.from_json), [])
        settings = self._load(
            SETTINGS_KEY,
            lambda raw: Settings.from_json(raw, defaults=base_settings),
            base_settings,
        )
        history = self._load(HISTORY_KEY, _decode_list(HistoryEntry.from_json), [])

        self.pool = ParticipantPool(participants, rng=rng)
        self.queue = TaskQueue(tasks, rng=rng)
        self.settings = SettingsStore(settings)
        self.history = HistoryLog(history)
        self.engine = SelectionEngine(
            self.pool, self.queue, self.settings, self.history, rng=rng
        )

    # -------- loading / saving --------
    def _load(self, key: str, decoder: Callable[[Any], T], default: T) -> T:
        try:
            raw = self._adapter.get(key)
            if raw is None:
                return default
            try:
                return decoder(raw)
            except (AttributeError, KeyError, TypeError, ValueError) as exc:
                raise DeserializationError(key, str(exc)) from exc
        except DeserializationError as exc:
            logger.warning(f"{exc}; starting with an empty default")
            return default

    def _encode(self, key: str) -> Any:
        if key == PARTICIPANTS_KEY:
            return [p.to_json() for p in self.pool.list()]
        if key == TASKS_KEY:
            return [t.to_json() for t in self.queue.list()]
        if key == SETTINGS_KEY:
            return self.settings.get().to_json()
        if key == HISTORY_KEY:
            return [e.to_json() for e in self.history.list()]
        raise KeyError(key)

    def _save(self, *keys: str) -> None:
        for key in keys:
            self._adapter.set(key, self._encode(key))

    # -------- participants --------
    def add_participant(self, name: str) -> Participant:
        participant = self.pool.add(name)
        self._save(PARTICIPANTS_KEY)
        return participant

    def add_participants_bulk(self, names: Union[str, Iterable[str]]) -> list[Participant]:
        added = self.pool.add_bulk(names)
        if added:
            self._save(PARTICIPANTS_KEY)
        return added

    def remove_participant(self, participant_id: str) -> None:
        self.pool.remove(participant_id)
        self._save(PARTICIPANTS_KEY)

    def clear_participants(self) -> None:
        self.pool.clear()
        self._save(PARTICIPANTS_KEY)

    def remove_winner(self, entry_id: str) -> HistoryEntry:
        """Take the winner of history entry ``entry_id`` out of the pool.

        Raises
        ------
        InvalidStateError
            If the entry does not exist, is already marked removed, or its
            winner is no longer in the pool.
        """
        entry = self._history_entry(entry_id)
        if entry.removed:
            raise InvalidStateError(f"Winner of entry {entry_id} was already removed")
        if self.pool.get(entry.winner_participant_id) is None:
            raise InvalidStateError(
                f"Participant {entry.winner_participant_id} is not in the pool"
            )
        self.pool.remove(entry.winner_participant_id)
        updated = self.history.mark_removed(entry_id, True)
        self._save(PARTICIPANTS_KEY, HISTORY_KEY)
        return updated

    def restore_participant(self, entry_id: str) -> Participant:
        """Put the winner removed by history entry ``entry_id`` back in the pool.

        The participant returns under its original id and name.

        Raises
        ------
        InvalidStateError
            If the entry does not exist, its winner was not removed, or the
            entry has already been restored.
        """
        entry = self._history_entry(entry_id)
        if not entry.removed:
            raise InvalidStateError(
                f"Winner of entry {entry_id} was not removed or is already restored"
            )
        participant = self.pool.restore(
            entry.winner_participant_id, entry.winner_participant_name
        )
        self.history.mark_removed(entry_id, False)
        self._save(PARTICIPANTS_KEY, HISTORY_KEY)
        return participant

    def _history_entry(self, entry_id: str) -> HistoryEntry:
        entry = self.history.get(entry_id)
        if entry is None:
            raise InvalidStateError(f"History entry {entry_id} does not exist")
        return entry

    # -------- tasks --------
    def add_task(self, name: str, description: Optional[str] = None) -> Task:
        task = self.queue.add(name, description)
        self._save(TASKS_KEY)
        return task

    def add_task_bulk(self, lines: Union[str, Iterable[str]]) -> list[Task]:
        added = self.queue.add_bulk(lines)
        if added:
            self._save(TASKS_KEY)
        return added

    def remove_task(self, task_id: str) -> None:
        self.queue.remove(task_id)
        self._save(TASKS_KEY)

    def clear_tasks(self) -> None:
        self.queue.clear()
        self._save(TASKS_KEY)

    # -------- settings --------
    def get_settings(self) -> Settings:
        return self.settings.get()

    def set_mode(self, mode: Union[RouletteMode, str]) -> Settings:
        settings = self.settings.set_mode(mode)
        self._save(SETTINGS_KEY)
        return settings

    def set_auto_remove(self, enabled: bool) -> Settings:
        settings = self.settings.set_auto_remove(enabled)
        self._save(SETTINGS_KEY)
        return settings

    def set_show_modal(self, enabled: bool) -> Settings:
        settings = self.settings.set_show_modal(enabled)
        self._save(SETTINGS_KEY)
        return settings

    def set_duration(self, seconds: float) -> Settings:
        settings = self.settings.set_duration(seconds)
        self._save(SETTINGS_KEY)
        return settings

    # -------- draw --------
    def draw(self) -> DrawResult:
        result = self.engine.draw()
        self._save(PARTICIPANTS_KEY, TASKS_KEY, HISTORY_KEY)
        return result

    def resolve(self) -> DrawResult:
        return self.engine.resolve()

    # -------- history --------
    def get_history(self, mode: Optional[RouletteMode] = None) -> list[HistoryEntry]:
        return self.history.list(mode)

    def clear_history(self) -> None:
        self.history.clear()
        self._save(HISTORY_KEY)

    def export_history(
        self, fmt: str = "csv", mode: Optional[RouletteMode] = None
    ) -> str:
        """Render the history as ``"csv"`` or ``"json"`` text.

        Raises
        ------
        ValidationError
            If ``fmt`` or ``mode`` is not recognised.
        """
        if fmt not in ("csv", "json"):
            raise ValidationError(f"Unsupported export format '{fmt}'")
        entries = self.history.list(mode)
        if fmt == "csv":
            return export_history_csv(entries)
        return export_history_json(entries)


__all__ = ["RouletteService"]
