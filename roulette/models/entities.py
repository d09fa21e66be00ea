"""Domain records owned by the pool, queue, settings and history stores."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from .utils import dt_iso, generate_id, parse_dt, utcnow

MAX_PARTICIPANT_NAME_LENGTH = 50
DEFAULT_DISPLAY_SECONDS = 5.0


class RouletteMode(str, Enum):
    """Which pool the wheel draws from."""

    PARTICIPANTS = "participants"
    TASKS = "tasks"


class TaskStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Participant:
    """Someone who can win a draw.

    Attributes
    ----------
    name : str
        Display name. Not unique; two participants may share a name and are
        told apart only by ``id``.
    color : str
        Palette color used for the participant's wheel segment.
    id : str
        Opaque identifier; the only key used for lookups and removal.
    created_at : datetime
        UTC timestamp of when the participant was added.
    """

    name: str
    color: str
    id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=utcnow)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "created_at": dt_iso(self.created_at),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Participant":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            color=str(data["color"]),
            created_at=parse_dt(data["created_at"]),
        )


@dataclass(frozen=True)
class Task:
    """A unit of work handed to the winner of a task draw.

    ``status`` moves from ``PENDING`` to ``COMPLETED`` once and never back;
    ``completed_at`` is set at that moment.
    """

    name: str
    color: str
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    id: str = field(default_factory=generate_id)
    created_at: datetime = field(default_factory=utcnow)
    completed_at: Optional[datetime] = None

    @property
    def is_pending(self) -> bool:
        return self.status is TaskStatus.PENDING

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "color": self.color,
            "status": self.status.value,
            "created_at": dt_iso(self.created_at),
            "completed_at": dt_iso(self.completed_at),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Task":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            description=data.get("description"),
            color=str(data["color"]),
            status=TaskStatus(data.get("status", TaskStatus.PENDING.value)),
            created_at=parse_dt(data["created_at"]),
            completed_at=parse_dt(data.get("completed_at")),
        )


def _stored_flag(data: dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise TypeError(f"{key} must be a boolean")
    return value


@dataclass(frozen=True)
class Settings:
    """Operating mode and behavioural flags for one roulette instance."""

    roulette_mode: RouletteMode = RouletteMode.PARTICIPANTS
    auto_remove_participants: bool = False
    show_winner_modal: bool = True
    winner_display_duration_seconds: float = DEFAULT_DISPLAY_SECONDS

    def to_json(self) -> dict[str, Any]:
        return {
            "roulette_mode": self.roulette_mode.value,
            "auto_remove_participants": self.auto_remove_participants,
            "show_winner_modal": self.show_winner_modal,
            "winner_display_duration_seconds": self.winner_display_duration_seconds,
        }

    @classmethod
    def from_json(
        cls, data: dict[str, Any], *, defaults: Optional["Settings"] = None
    ) -> "Settings":
        """Build settings from a stored record, filling missing fields from ``defaults``."""
        base = defaults or cls()
        raw_duration = data.get(
            "winner_display_duration_seconds", base.winner_display_duration_seconds
        )
        if isinstance(raw_duration, bool) or not isinstance(raw_duration, (int, float)):
            raise TypeError("winner_display_duration_seconds must be a number")
        duration = float(raw_duration)
        if not math.isfinite(duration) or duration <= 0:
            raise ValueError("winner_display_duration_seconds must be positive and finite")
        return cls(
            roulette_mode=RouletteMode(
                data.get("roulette_mode", base.roulette_mode.value)
            ),
            auto_remove_participants=_stored_flag(
                data, "auto_remove_participants", base.auto_remove_participants
            ),
            show_winner_modal=_stored_flag(
                data, "show_winner_modal", base.show_winner_modal
            ),
            winner_display_duration_seconds=duration,
        )


@dataclass(frozen=True)
class HistoryEntry:
    """Snapshot of one resolved draw.

    Names and descriptions are copied at draw time, so removing or changing
    the participant or task later leaves the entry as it was. ``removed``
    is the only field that changes afterwards: it is set while the winner is
    out of the pool because of this draw and cleared when they are restored.
    """

    mode: RouletteMode
    winner_participant_id: str
    winner_participant_name: str
    task_id: Optional[str] = None
    task_name: Optional[str] = None
    task_description: Optional[str] = None
    removed: bool = False
    id: str = field(default_factory=generate_id)
    timestamp: datetime = field(default_factory=utcnow)

    def to_json(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": dt_iso(self.timestamp),
            "mode": self.mode.value,
            "winner_participant_id": self.winner_participant_id,
            "winner_participant_name": self.winner_participant_name,
            "task_id": self.task_id,
            "task_name": self.task_name,
            "task_description": self.task_description,
            "removed": self.removed,
        }

    def to_json_str(self) -> str:
        return json.dumps(self.to_json(), ensure_ascii=False)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "HistoryEntry":
        return cls(
            id=str(data["id"]),
            timestamp=parse_dt(data["timestamp"]),
            mode=RouletteMode(data["mode"]),
            winner_participant_id=str(data["winner_participant_id"]),
            winner_participant_name=str(data["winner_participant_name"]),
            task_id=data.get("task_id"),
            task_name=data.get("task_name"),
            task_description=data.get("task_description"),
            removed=_stored_flag(data, "removed", False),
        )


__all__ = [
    "DEFAULT_DISPLAY_SECONDS",
    "MAX_PARTICIPANT_NAME_LENGTH",
    "HistoryEntry",
    "Participant",
    "RouletteMode",
    "Settings",
    "Task",
    "TaskStatus",
]
