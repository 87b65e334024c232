# src/task_picker/tasks/models.py

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class TaskStatus(StrEnum):
    """
    Task status as surfaced by collection.

    Completed tasks are filtered out before a TaskItem is built,
    so every item produced by a run is OPEN.
    """

    OPEN = "open"


@dataclass(slots=True)
class TaskItem:
    id: str
    note: str
    text: str

    context: str | None = None
    created: str | None = None
    line: int | None = None
    status: TaskStatus = TaskStatus.OPEN

    def to_payload(self) -> dict[str, Any]:
        """JSON-ready view sent to the ranking service (no location internals)."""
        return {
            "id": self.id,
            "note": self.note,
            "text": self.text,
            "context": self.context,
            "created": self.created,
            "status": str(self.status),
        }
