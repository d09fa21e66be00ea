"""Utility helpers for the models package."""

from __future__ import annotations

import random
import secrets
import string
from datetime import datetime, timezone
from typing import Optional

BASE62_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase

# Fixed palette for wheel segments.
ROULETTE_COLORS = (
    "#FF6B6B",
    "#4ECDC4",
    "#45B7D1",
    "#96CEB4",
    "#FFEAA7",
    "#DDA0DD",
    "#FF8A80",
    "#80CBC4",
    "#81C784",
    "#FFB74D",
    "#CE93D8",
    "#F06292",
    "#64B5F6",
    "#A5D6A7",
    "#FFCC02",
    "#BA68C8",
    "#26C6DA",
    "#66BB6A",
    "#FF7043",
    "#AB47BC",
)


def generate_id(length: int = 12) -> str:
    """Return an opaque base62 identifier."""
    return "".join(secrets.choice(BASE62_ALPHABET) for _ in range(length))


def pick_color(rng: Optional[random.Random] = None) -> str:
    """Return a palette color chosen at random."""
    return (rng or random).choice(ROULETTE_COLORS)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def dt_iso(dt: Optional[datetime]) -> Optional[str]:
    """Convert a datetime to an ISO 8601 string in UTC, or return None."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc).isoformat()


def parse_dt(value: Optional[str]) -> Optional[datetime]:
    """Inverse of :func:`dt_iso`; naive values are assumed to be UTC."""
    if value is None:
        return None
    if not isinstance(value, str):
        raise TypeError("timestamp must be an ISO 8601 string")
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
