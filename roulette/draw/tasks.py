"""Task queue with a one-way Pending -> Completed lifecycle."""

from __future__ import annotations

import logging
import random
from dataclasses import replace
from datetime import datetime, timezone
from typing import Iterable, Optional, Union

from ..errors import InvalidStateError, ValidationError
from ..models import Task, TaskStatus
from ..models.utils import pick_color
from .pool import split_lines

logger = logging.getLogger(__name__)

DESCRIPTION_SEPARATOR = "|"


def _clean_description(description: Optional[str]) -> Optional[str]:
    if description is None:
        return None
    if not isinstance(description, str):
        raise ValidationError("task description must be a string")
    return description.strip() or None


class TaskQueue:
    """Tasks kept in insertion order; completed tasks stay as part of history."""

    def __init__(
        self,
        tasks: Optional[Iterable[Task]] = None,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._tasks: list[Task] = list(tasks or [])
        self._rng = rng

    def add(self, name: str, description: Optional[str] = None) -> Task:
        if not isinstance(name, str):
            raise ValidationError("task name must be a string")
        normalized = name.strip()
        if not normalized:
            raise ValidationError("task name must not be empty")
        task = Task(
            name=normalized,
            description=_clean_description(description),
            color=pick_color(self._rng),
        )
        self._tasks.append(task)
        logger.debug(f"Added task {task.id}")
        return task

    def add_bulk(self, lines: Union[str, Iterable[str]]) -> list[Task]:
        """Add one task per line, formatted ``name`` or ``name | description``.

        Lines with an empty name are skipped.
        """
        added: list[Task] = []
        for line in split_lines(lines):
            name, sep, description = line.partition(DESCRIPTION_SEPARATOR)
            try:
                added.append(self.add(name, description if sep else None))
            except ValidationError:
                continue
        return added

    def get(self, task_id: str) -> Optional[Task]:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def remove(self, task_id: str) -> None:
        """Remove a pending task; absent ids are ignored.

        Raises
        ------
        InvalidStateError
            If the task is completed.
        """
        task = self.get(task_id)
        if task is None:
            return
        if not task.is_pending:
            raise InvalidStateError(f"Task {task_id} is completed and cannot be removed")
        self._tasks = [t for t in self._tasks if t.id != task_id]

    def clear(self) -> None:
        self._tasks = []

    def mark_completed(
        self, task_id: str, *, completed_at: Optional[datetime] = None
    ) -> Task:
        """Transition ``task_id`` to ``COMPLETED`` and return the updated task."""
        for index, task in enumerate(self._tasks):
            if task.id != task_id:
                continue
            if not task.is_pending:
                raise InvalidStateError(f"Task {task_id} is already completed")
            updated = replace(
                task,
                status=TaskStatus.COMPLETED,
                completed_at=completed_at or datetime.now(timezone.utc),
            )
            self._tasks[index] = updated
            return updated
        raise InvalidStateError(f"Task {task_id} does not exist")

    def list(self) -> list[Task]:
        return list(self._tasks)

    def pending(self) -> list[Task]:
        return [t for t in self._tasks if t.is_pending]

    def completed(self) -> list[Task]:
        return [t for t in self._tasks if not t.is_pending]

    def count(self) -> int:
        return len(self._tasks)


__all__ = ["TaskQueue"]
