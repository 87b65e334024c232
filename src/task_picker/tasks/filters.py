# src/task_picker/tasks/filters.py

"""
Heuristics over task records coming from a task-indexing service.

Records are opaque: plain dicts or objects, with field names that differ
between service versions (snake_case and camelCase are both seen).
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from collections.abc import Mapping
from typing import Any

logger = logging.getLogger(__name__)

COMPLETION_RE = re.compile(r"(done|completed|complete|cancel|🗑|✅|✔|\bx\b)", re.IGNORECASE)
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

_CREATED_FIELD_RE = re.compile(r"created::\s*(\d{4}-\d{2}-\d{2})")
_CREATED_EMOJI_RE = re.compile(r"➕\s*(\d{4}-\d{2}-\d{2})")

_MISSING = object()


def get_field(record: Any, *names: str, default: Any = None) -> Any:
    """First present (non-None) field among `names`, from a mapping or an object."""
    if record is None:
        return default
    for name in names:
        if isinstance(record, Mapping):
            value = record.get(name, _MISSING)
        else:
            value = getattr(record, name, _MISSING)
        if value is not _MISSING and value is not None:
            return value
    return default


def status_text(status: Any) -> str:
    if status is None:
        return ""
    if isinstance(status, str):
        return status
    for name in ("name", "type"):
        value = get_field(status, name)
        if value is not None:
            return str(value)
    return str(status)


def is_completed_task(task: Any) -> bool:
    """
    Any one signal marks a task completed:
    - a boolean completion flag that is exactly True,
    - a non-empty completion date,
    - a status string matching COMPLETION_RE.
    """
    if task is None:
        return False

    status = get_field(task, "status")

    flags = [
        get_field(task, "done"),
        get_field(task, "completed"),
        get_field(task, "is_done", "isDone"),
        get_field(status, "done") if status is not None and not isinstance(status, str) else None,
        get_field(status, "is_done", "isDone") if status is not None and not isinstance(status, str) else None,
    ]
    if any(flag is True for flag in flags):
        return True

    dates = [
        get_field(task, "done_date", "doneDate"),
        get_field(task, "completed_date", "completedDate"),
        get_field(task, "completion_date", "completionDate"),
    ]
    if any(bool(d) for d in dates):
        return True

    return bool(COMPLETION_RE.search(status_text(status).lower()))


def _format_date_value(value: Any) -> str | None:
    if isinstance(value, str):
        return value if ISO_DATE_RE.match(value) else None

    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()[:10]

    fmt = getattr(value, "format", None)
    if callable(fmt):
        out = fmt("YYYY-MM-DD")
        return str(out) if out else None

    year = get_field(value, "year")
    month = get_field(value, "month")
    day = get_field(value, "day")
    if year and month and day:
        return f"{year}-{int(month):02d}-{int(day):02d}"

    return None


def format_created_date(task: Any) -> str | None:
    """Created date from a structured field, as YYYY-MM-DD, or None."""
    if task is None:
        return None

    value = get_field(task, "created_date", "createdDate")
    if value is not None and not isinstance(value, (str, dt.date)):
        # Wrapper records ({"date": ...}); a callable `date` is a method, not a field.
        inner = get_field(value, "date")
        if inner is not None and not callable(inner):
            value = inner
    if value is None:
        value = get_field(task, "created")
    if not value:
        return None

    try:
        return _format_date_value(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable created date %r", value, exc_info=True)
        return None


def parse_created_date_from_line(line: str) -> str | None:
    """Inline markers: `created:: YYYY-MM-DD` or `➕ YYYY-MM-DD`."""
    m = _CREATED_FIELD_RE.search(line or "") or _CREATED_EMOJI_RE.search(line or "")
    return m.group(1) if m else None
