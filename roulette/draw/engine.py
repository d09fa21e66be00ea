"""State machine that runs a draw against the pool, queue and history."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from ..errors import (
    AlreadyInProgressError,
    EmptyPoolError,
    InvalidStateError,
    NoTasksRemainingError,
)
from ..models import HistoryEntry, RouletteMode
from .history import HistoryLog
from .pool import ParticipantPool
from .settings import SettingsStore
from .tasks import TaskQueue

logger = logging.getLogger(__name__)


class EngineState(str, Enum):
    IDLE = "idle"
    DRAWING = "drawing"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class DrawnParticipant:
    id: str
    name: str


@dataclass(frozen=True)
class DrawnTask:
    id: str
    name: str
    description: Optional[str]


@dataclass(frozen=True)
class DrawResult:
    """Outcome of a single draw.

    Attributes
    ----------
    mode : RouletteMode
        Mode that was active when the draw ran.
    participant : DrawnParticipant
        Snapshot of the winner.
    task : Optional[DrawnTask]
        Snapshot of the assigned task; ``None`` in participants mode.
    history_entry : HistoryEntry
        The entry appended to the history log for this draw.
    """

    mode: RouletteMode
    participant: DrawnParticipant
    task: Optional[DrawnTask]
    history_entry: HistoryEntry

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "mode": self.mode.value,
            "participant": {"id": self.participant.id, "name": self.participant.name},
        }
        if self.task is not None:
            data["task"] = {
                "id": self.task.id,
                "name": self.task.name,
                "description": self.task.description,
            }
        return data


class SelectionEngine:
    """Engine that draws winners and applies the outcome to its stores."""

    def __init__(
        self,
        pool: ParticipantPool,
        queue: TaskQueue,
        settings: SettingsStore,
        history: HistoryLog,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        """Bind an engine to the stores it reads and mutates.

        Parameters
        ----------
        pool : ParticipantPool
            Participants eligible to win.
        queue : TaskQueue
            Tasks assigned in tasks mode.
        settings : SettingsStore
            Source of the active mode and the auto-removal flag.
        history : HistoryLog
            Log that receives one entry per successful draw.
        rng : Optional[random.Random], default: None
            Random source. Typically omitted, in which case
            :class:`random.SystemRandom` is used; tests pass a seeded
            :class:`random.Random`.
        """

        self._pool = pool
        self._queue = queue
        self._settings = settings
        self._history = history
        self._rng = rng or random.SystemRandom()
        self._state = EngineState.IDLE
        self._current: Optional[DrawResult] = None

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def current_result(self) -> Optional[DrawResult]:
        """Result awaiting :meth:`resolve`, or ``None`` when idle."""
        return self._current

    def draw(self) -> DrawResult:
        """Pick a winner (and a task in tasks mode) and record the outcome.

        Returns
        -------
        DrawResult
            Snapshot of the winner and, in tasks mode, the assigned task.

        Notes
        -----
        The draw performs the following steps:

        1. Check that the engine is idle and the active pool is not empty.
        2. Choose one participant uniformly at random; in tasks mode choose
           one pending task uniformly at random, independently.
        3. Build the history snapshot. A failure up to here leaves every
           store untouched and the engine idle.
        4. Complete the task, remove the winner when auto-removal is on
           (marking the snapshot ``removed``), and prepend the snapshot.
        5. Hold the result in the resolved state until :meth:`resolve`.

        Raises
        ------
        AlreadyInProgressError
            If a previous draw has not been resolved yet.
        EmptyPoolError
            If there are no participants.
        NoTasksRemainingError
            If tasks mode is active and no task is pending.
        """
        if self._state is not EngineState.IDLE:
            raise AlreadyInProgressError(
                f"A draw is already {self._state.value}; call resolve() first"
            )

        settings = self._settings.get()
        mode = settings.roulette_mode
        candidates = self._pool.list()
        if not candidates:
            raise EmptyPoolError("There are no participants to draw from")
        pending = self._queue.pending() if mode is RouletteMode.TASKS else []
        if mode is RouletteMode.TASKS and not pending:
            raise NoTasksRemainingError("Every task has already been assigned")

        self._state = EngineState.DRAWING
        # Nothing is mutated until both choices and the snapshot exist.
        try:
            winner = self._rng.choice(candidates)
            task = self._rng.choice(pending) if pending else None
            now = datetime.now(timezone.utc)
            entry = HistoryEntry(
                mode=mode,
                winner_participant_id=winner.id,
                winner_participant_name=winner.name,
                task_id=task.id if task is not None else None,
                task_name=task.name if task is not None else None,
                task_description=task.description if task is not None else None,
                removed=settings.auto_remove_participants,
                timestamp=now,
            )
        except Exception:
            self._state = EngineState.IDLE
            raise

        if task is not None:
            self._queue.mark_completed(task.id, completed_at=now)
        if settings.auto_remove_participants:
            self._pool.remove(winner.id)
        self._history.append(entry)

        result = DrawResult(
            mode=mode,
            participant=DrawnParticipant(id=winner.id, name=winner.name),
            task=(
                DrawnTask(id=task.id, name=task.name, description=task.description)
                if task is not None
                else None
            ),
            history_entry=entry,
        )
        self._current = result
        self._state = EngineState.RESOLVED
        logger.info(
            f"Draw resolved in {mode.value} mode: participant {winner.id}"
            + (f", task {task.id}" if task is not None else "")
        )
        return result

    def resolve(self) -> DrawResult:
        """Finish the display phase and return to idle.

        Raises
        ------
        InvalidStateError
            If there is no resolved draw waiting.
        """
        if self._state is not EngineState.RESOLVED or self._current is None:
            raise InvalidStateError("There is no resolved draw to dismiss")
        result = self._current
        self._current = None
        self._state = EngineState.IDLE
        return result


__all__ = [
    "DrawResult",
    "DrawnParticipant",
    "DrawnTask",
    "EngineState",
    "SelectionEngine",
]
