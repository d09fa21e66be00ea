"""Random selection and task assignment engine with persisted history."""

from .errors import (
    AlreadyInProgressError,
    DeserializationError,
    EmptyPoolError,
    InvalidStateError,
    NoTasksRemainingError,
    PersistenceError,
    RouletteError,
    ValidationError,
)
from .workflows import RouletteService

__all__ = [
    "AlreadyInProgressError",
    "DeserializationError",
    "EmptyPoolError",
    "InvalidStateError",
    "NoTasksRemainingError",
    "PersistenceError",
    "RouletteError",
    "RouletteService",
    "ValidationError",
]
