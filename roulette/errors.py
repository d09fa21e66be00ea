"""Exception hierarchy shared by the roulette stores, engine and service."""

from __future__ import annotations


class RouletteError(Exception):
    """Base class for every error raised by the roulette package."""


class ValidationError(RouletteError, ValueError):
    """Input was rejected; the store keeps its prior state."""


class EmptyPoolError(RouletteError):
    """A draw was requested while the participant pool is empty."""


class NoTasksRemainingError(RouletteError):
    """A task draw was requested but every task is already completed."""


class AlreadyInProgressError(RouletteError):
    """A draw was requested before the previous one was resolved."""


class InvalidStateError(RouletteError):
    """The requested transition is not allowed from the current state."""


class DeserializationError(RouletteError):
    """A persisted record could not be decoded."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"Cannot decode stored record '{key}': {message}")
        self.key = key


class PersistenceError(RouletteError):
    """A persisted record could not be written."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"Cannot store record '{key}': {message}")
        self.key = key


__all__ = [
    "RouletteError",
    "ValidationError",
    "EmptyPoolError",
    "NoTasksRemainingError",
    "AlreadyInProgressError",
    "InvalidStateError",
    "DeserializationError",
    "PersistenceError",
]
