"""Validated holder for the roulette settings record."""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Optional, Union

from ..errors import ValidationError
from ..models import RouletteMode, Settings

logger = logging.getLogger(__name__)


def _require_bool(value: object, label: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"{label} must be a boolean")
    return value


class SettingsStore:
    """Holds one :class:`Settings` record and rejects invalid updates.

    Records are immutable; every setter swaps in a new one, so a value
    returned by :meth:`get` never changes underneath the caller.
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self._settings = settings or Settings()

    def get(self) -> Settings:
        return self._settings

    def set_mode(self, mode: Union[RouletteMode, str]) -> Settings:
        try:
            resolved = RouletteMode(mode)
        except ValueError as exc:
            raise ValidationError(f"Unknown roulette mode '{mode}'") from exc
        self._settings = replace(self._settings, roulette_mode=resolved)
        logger.debug(f"Roulette mode set to {resolved.value}")
        return self._settings

    def set_auto_remove(self, enabled: bool) -> Settings:
        self._settings = replace(
            self._settings,
            auto_remove_participants=_require_bool(enabled, "auto_remove_participants"),
        )
        return self._settings

    def set_show_modal(self, enabled: bool) -> Settings:
        self._settings = replace(
            self._settings,
            show_winner_modal=_require_bool(enabled, "show_winner_modal"),
        )
        return self._settings

    def set_duration(self, seconds: float) -> Settings:
        """Set how long the caller shows a winner before calling ``resolve()``.

        Raises
        ------
        ValidationError
            If ``seconds`` is not a finite number greater than zero.
        """
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            raise ValidationError("winner display duration must be a number")
        if not math.isfinite(seconds) or seconds <= 0:
            raise ValidationError("winner display duration must be greater than zero")
        self._settings = replace(
            self._settings, winner_display_duration_seconds=float(seconds)
        )
        return self._settings


__all__ = ["SettingsStore"]
