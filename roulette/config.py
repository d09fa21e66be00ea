"""Environment-driven defaults for scripts and new roulette instances."""

from __future__ import annotations

import logging
import math
import os
from typing import Optional

from dotenv import load_dotenv

from .models import DEFAULT_DISPLAY_SECONDS, Settings

logger = logging.getLogger(__name__)


def default_display_seconds() -> float:
    """Return ``ROULETTE_DISPLAY_SECONDS`` when it is a positive number."""
    load_dotenv()
    raw = os.getenv("ROULETTE_DISPLAY_SECONDS")
    if raw is None or not raw.strip():
        return DEFAULT_DISPLAY_SECONDS
    try:
        value = float(raw)
    except ValueError:
        value = -1.0
    if not math.isfinite(value) or value <= 0:
        logger.warning(
            f"Ignoring ROULETTE_DISPLAY_SECONDS={raw!r}; using {DEFAULT_DISPLAY_SECONDS}"
        )
        return DEFAULT_DISPLAY_SECONDS
    return value


def default_settings() -> Settings:
    """Settings used when nothing has been persisted yet."""
    return Settings(winner_display_duration_seconds=default_display_seconds())


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a root handler for command-line entry points."""
    load_dotenv()
    name = (level or os.getenv("ROULETTE_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


__all__ = ["configure_logging", "default_display_seconds", "default_settings"]
