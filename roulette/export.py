"""Text exports of the draw history."""

from __future__ import annotations

import csv
import io
import json
from datetime import datetime, timezone
from typing import Iterable, Optional

from .models import HistoryEntry
from .models.utils import dt_iso

CSV_HEADERS = ("timestamp", "mode", "participant", "task", "description")


def export_history_csv(entries: Iterable[HistoryEntry]) -> str:
    """Return the entries as CSV, one row per draw, in the given order.

    An empty history still yields the header row.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADERS)
    for entry in entries:
        writer.writerow(
            (
                dt_iso(entry.timestamp),
                entry.mode.value,
                entry.winner_participant_name,
                entry.task_name or "",
                entry.task_description or "",
            )
        )
    return buffer.getvalue()


def export_history_json(
    entries: Iterable[HistoryEntry], *, exported_at: Optional[datetime] = None
) -> str:
    data = [entry.to_json() for entry in entries]
    document = {
        "exported_at": dt_iso(exported_at or datetime.now(timezone.utc)),
        "total": len(data),
        "data": data,
    }
    return json.dumps(document, ensure_ascii=False, indent=2)


__all__ = ["CSV_HEADERS", "export_history_csv", "export_history_json"]
