"""Stores and selection engine for the roulette draw."""

from .engine import (
    DrawnParticipant,
    DrawnTask,
    DrawResult,
    EngineState,
    SelectionEngine,
)
from .history import HistoryLog
from .pool import ParticipantPool, normalize_participant_name
from .settings import SettingsStore
from .tasks import TaskQueue

__all__ = [
    "DrawnParticipant",
    "DrawnTask",
    "DrawResult",
    "EngineState",
    "HistoryLog",
    "ParticipantPool",
    "SelectionEngine",
    "SettingsStore",
    "TaskQueue",
    "normalize_participant_name",
]
