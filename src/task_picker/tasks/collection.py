# src/task_picker/tasks/collection.py

"""
Task collection.

Two interchangeable strategies produce the same output (open TaskItems from
the configured folders, never from the active document):
- "indexed": enumerate through the task-indexing service, anchor ids via the
  BlockIdSynchronizer one task at a time,
- "direct": scan Markdown documents ourselves (see direct_collection).
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from ..config import COLLECTION_STRATEGIES, normalize_folder_roots
from ..core.errors import ConfigurationError
from ..core.ports import BlockIndex, DocumentStore
from .block_ids import BlockIdSynchronizer, same_document
from .direct_collection import collect_open_tasks_direct
from .filters import format_created_date, get_field, is_completed_task, parse_created_date_from_line
from .ids import ensure_md, normalize_block_id, strip_block_id
from .models import TaskItem
from .tasks_api import ResolvedTasksApi, fetch_all_tasks

logger = logging.getLogger(__name__)


def is_in_folders(path: str, roots: list[str]) -> bool:
    if not roots:
        return True
    return any(path == root or path.startswith(root + "/") for root in roots)


def _context_of(task: Any) -> str | None:
    parent = get_field(task, "parent")
    heading = get_field(parent, "heading_text", "headingText", "heading")
    if heading is None:
        return None
    return str(heading).strip() or None


async def collect_open_tasks_via_index(
        settings: Any,
        api: ResolvedTasksApi,
        synchronizer: BlockIdSynchronizer,
        *,
        active_path: str | None,
) -> list[TaskItem]:
    roots = normalize_folder_roots(list(getattr(settings, "folders", []) or []))
    records = await fetch_all_tasks(api)

    candidates: list[Any] = []
    for record in records:
        task_path = str(get_field(record, "path", default="") or "")
        if not task_path or not is_in_folders(task_path, roots):
            continue
        if same_document(task_path, active_path):
            continue
        candidates.append(record)

    open_tasks = [t for t in candidates if not is_completed_task(t)]
    logger.info(
        "Indexed collection: %d record(s), %d in folders, %d open",
        len(records),
        len(candidates),
        len(open_tasks),
    )

    # Ids already in the candidate documents, open or completed, are never drawn again.
    reserved: set[str] = set()
    for record in candidates:
        link = normalize_block_id(get_field(record, "block_link", "blockLink"))
        if link:
            reserved.add(link)
    if any(not get_field(record, "block_link", "blockLink") for record in open_tasks):
        await synchronizer.reserve_existing([str(get_field(record, "path")) for record in candidates], reserved)

    items: list[TaskItem] = []
    for record in open_tasks:
        anchor = await synchronizer.ensure(record, reserved)
        description = str(get_field(record, "description", default="") or "")
        created = format_created_date(record) or parse_created_date_from_line(description)
        line = get_field(record, "line_number", "lineNumber", "line_nr", "lineNr", "line")

        items.append(
            TaskItem(
                id=normalize_block_id(anchor.id),
                note=ensure_md(str(get_field(record, "path"))),
                text=strip_block_id(description).strip(),
                context=_context_of(record),
                created=created,
                line=line if isinstance(line, int) and not isinstance(line, bool) else None,
            )
        )

    return items


Collector = Callable[..., Awaitable[list[TaskItem]]]


def build_collector(
        settings: Any,
        store: DocumentStore,
        index: BlockIndex,
        *,
        tasks_api: Callable[[], ResolvedTasksApi] | None = None,
) -> Collector:
    """
    Bind the configured strategy to its collaborators.

    `tasks_api` is a factory so that an absent/incompatible task service only
    fails the run that actually needs it.
    """
    strategy = str(getattr(settings, "collection_strategy", "indexed") or "indexed").lower()
    if strategy not in COLLECTION_STRATEGIES:
        raise ConfigurationError(
            f"Unknown collection strategy {strategy!r} (expected one of: {', '.join(COLLECTION_STRATEGIES)})."
        )

    if strategy == "direct":
        async def collect_direct(*, active_path: str | None) -> list[TaskItem]:
            return await collect_open_tasks_direct(settings, store, index, active_path=active_path)

        return collect_direct

    if tasks_api is None:
        raise ConfigurationError("The indexed collection strategy needs a task-indexing service.")

    async def collect_indexed(*, active_path: str | None) -> list[TaskItem]:
        api = tasks_api()
        synchronizer = BlockIdSynchronizer.from_settings(settings, store, index, active_path=active_path)
        return await collect_open_tasks_via_index(settings, api, synchronizer, active_path=active_path)

    return collect_indexed
