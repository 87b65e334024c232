# src/task_picker/host/task_index.py

"""
In-process task index over a FileVault.

Plays the role of the task-indexing service for the console host: it exposes
the plugin shape `get_tasks()` and returns one record per checklist line
(open and completed alike); filtering is left to the collector.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from ..tasks.filters import parse_created_date_from_line
from ..tasks.ids import find_block_id, split_lines, strip_block_id
from .vault import FileVault

logger = logging.getLogger(__name__)

TASK_RE = re.compile(r"^(?P<indent>\s*)(?:[-*+]|\d+[.)])\s+\[(?P<status>.)\]\s+(?P<rest>.*)$")
HEADING_RE = re.compile(r"^(?P<hashes>#{1,6})\s+(?P<title>.+?)\s*$")
DONE_RE = re.compile(r"✅\s*(\d{4}-\d{2}-\d{2})")

_STATUS_NAMES = {
    " ": "todo",
    "x": "done",
    "X": "done",
    "-": "cancelled",
    "/": "in_progress",
}


@dataclass(slots=True, frozen=True)
class TaskParent:
    heading_text: str | None


@dataclass(slots=True, frozen=True)
class IndexedTask:
    path: str
    line_number: int
    description: str
    status: str
    original_markdown: str
    block_link: str | None = None
    parent: TaskParent | None = None
    created_date: str | None = None
    done_date: str | None = None


def parse_tasks(path: str, content: str) -> list[IndexedTask]:
    records: list[IndexedTask] = []
    heading: str | None = None

    for i, line in enumerate(split_lines(content)):
        hm = HEADING_RE.match(line)
        if hm:
            heading = hm.group("title")
            continue

        tm = TASK_RE.match(line)
        if not tm:
            continue

        status_char = tm.group("status")
        done = DONE_RE.search(line)
        block_id = find_block_id(line)
        records.append(
            IndexedTask(
                path=path,
                line_number=i,
                description=strip_block_id(tm.group("rest")).strip(),
                status=_STATUS_NAMES.get(status_char, status_char),
                original_markdown=line,
                block_link=f"^{block_id}" if block_id else None,
                parent=TaskParent(heading_text=heading) if heading else None,
                created_date=parse_created_date_from_line(line),
                done_date=done.group(1) if done else None,
            )
        )

    return records


class VaultTaskIndex:
    """A task-indexing "plugin" backed by the vault on disk."""

    manifest = {"id": "obsidian-tasks-plugin", "name": "Tasks (vault index)"}

    def __init__(self, vault: FileVault) -> None:
        self._vault = vault

    async def get_tasks(self) -> list[IndexedTask]:
        records: list[IndexedTask] = []
        paths = await self._vault.list_documents("")
        for path in paths:
            records.extend(parse_tasks(path, await self._vault.read(path)))
        logger.debug("Task index: %d record(s) in %d document(s)", len(records), len(paths))
        return records
