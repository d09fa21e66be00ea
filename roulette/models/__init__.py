from .base import Base

# import models so Alembic/autoloaders can discover mappers
from .record import StoredRecord  # noqa: F401
from .entities import (  # noqa: F401
    DEFAULT_DISPLAY_SECONDS,
    MAX_PARTICIPANT_NAME_LENGTH,
    HistoryEntry,
    Participant,
    RouletteMode,
    Settings,
    Task,
    TaskStatus,
)

__all__ = [
    "Base",
    "StoredRecord",
    "DEFAULT_DISPLAY_SECONDS",
    "MAX_PARTICIPANT_NAME_LENGTH",
    "HistoryEntry",
    "Participant",
    "RouletteMode",
    "Settings",
    "Task",
    "TaskStatus",
]
