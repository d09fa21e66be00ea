"""Ordered participant collection with id-keyed mutation."""

from __future__ import annotations

import logging
import random
from typing import Iterable, Optional, Union

from ..errors import InvalidStateError, ValidationError
from ..models import MAX_PARTICIPANT_NAME_LENGTH, Participant
from ..models.utils import pick_color

logger = logging.getLogger(__name__)


def normalize_participant_name(name: str) -> str:
    """Trim ``name`` and check the 1-50 character rule.

    Raises
    ------
    ValidationError
        If the name is not a string, is blank, or is too long after trimming.
    """

    if not isinstance(name, str):
        raise ValidationError("participant name must be a string")
    normalized = name.strip()
    if not normalized:
        raise ValidationError("participant name must not be empty")
    if len(normalized) > MAX_PARTICIPANT_NAME_LENGTH:
        raise ValidationError(
            f"participant name must be at most {MAX_PARTICIPANT_NAME_LENGTH} characters"
        )
    return normalized


def split_lines(lines: Union[str, Iterable[str]]) -> list[str]:
    """Accept either one multi-line string or an iterable of lines."""
    if isinstance(lines, str):
        return lines.splitlines()
    return list(lines)


class ParticipantPool:
    """Participants in insertion order.

    Names are display attributes only. Every lookup and removal goes through
    the participant ``id`` so that two people called "João" are never merged.
    """

    def __init__(
        self,
        participants: Optional[Iterable[Participant]] = None,
        *,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._participants: list[Participant] = list(participants or [])
        self._rng = rng

    def add(self, name: str) -> Participant:
        participant = Participant(
            name=normalize_participant_name(name),
            color=pick_color(self._rng),
        )
        self._participants.append(participant)
        logger.debug(f"Added participant {participant.id}")
        return participant

    def add_bulk(self, names: Union[str, Iterable[str]]) -> list[Participant]:
        """Add every valid line; blank or over-long lines are skipped."""
        added: list[Participant] = []
        skipped = 0
        for line in split_lines(names):
            try:
                added.append(self.add(line))
            except ValidationError:
                skipped += 1
        if skipped:
            logger.debug(f"Bulk import skipped {skipped} invalid line(s)")
        return added

    def restore(self, participant_id: str, name: str) -> Participant:
        """Put a removed participant back under its original id.

        Raises
        ------
        InvalidStateError
            If a participant with ``participant_id`` is already in the pool.
        """
        if self.get(participant_id) is not None:
            raise InvalidStateError(f"Participant {participant_id} is already in the pool")
        participant = Participant(
            id=participant_id,
            name=normalize_participant_name(name),
            color=pick_color(self._rng),
        )
        self._participants.append(participant)
        logger.debug(f"Restored participant {participant.id}")
        return participant

    def get(self, participant_id: str) -> Optional[Participant]:
        for participant in self._participants:
            if participant.id == participant_id:
                return participant
        return None

    def remove(self, participant_id: str) -> None:
        """Remove the participant with ``participant_id``; absent ids are ignored."""
        self._participants = [
            p for p in self._participants if p.id != participant_id
        ]

    def clear(self) -> None:
        self._participants = []

    def list(self) -> list[Participant]:
        return list(self._participants)

    def count(self) -> int:
        return len(self._participants)

    def display_names(self) -> dict[str, str]:
        """Map each id to a label that tells repeated names apart.

        The first "João" keeps its name; later ones read "João (2)",
        "João (3)" and so on. Comparison ignores case.
        """
        seen: dict[str, int] = {}
        labels: dict[str, str] = {}
        for participant in self._participants:
            folded = participant.name.casefold()
            seen[folded] = seen.get(folded, 0) + 1
            ordinal = seen[folded]
            labels[participant.id] = (
                participant.name if ordinal == 1 else f"{participant.name} ({ordinal})"
            )
        return labels

    def __len__(self) -> int:
        return len(self._participants)

    def __iter__(self):
        return iter(list(self._participants))


__all__ = ["ParticipantPool", "normalize_participant_name", "split_lines"]
