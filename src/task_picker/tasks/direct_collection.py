# src/task_picker/tasks/direct_collection.py

"""
Direct-scan collection: read Markdown documents and find open checkboxes.

Every document is read before anything is written so that new ids are drawn
outside the ids already present anywhere in the scanned set. Each mutated
document is written back once, then we wait (bounded) for its new ids to be
indexed before moving on. The active document is skipped unconditionally.
"""

from __future__ import annotations

import logging
import random
import re
from typing import Any

from ..config import normalize_folder_roots
from ..core.ports import BlockIndex, DocumentStore
from ..core.retry import wait_until
from .block_ids import same_document
from .filters import parse_created_date_from_line
from .ids import (
    append_block_id,
    collect_block_ids,
    ensure_md,
    find_block_id,
    generate_block_id,
    join_lines,
    split_lines,
    strip_block_id,
)
from .models import TaskItem

logger = logging.getLogger(__name__)

OPEN_TASK_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+\[ \]\s+(.+)$")
TASK_PREFIX_RE = re.compile(r"^\s*(?:[-*+]|\d+[.)])\s+\[ \]\s+")
HEADING_RE = re.compile(r"^#{1,6}\s+")


def heading_text(line: str) -> str:
    return HEADING_RE.sub("", line).strip()


def task_display_text(line: str) -> str:
    """Strip bullet, checkbox and trailing block id."""
    return strip_block_id(TASK_PREFIX_RE.sub("", line)).strip()


def scan_document(
        path: str,
        content: str,
        reserved: set[str],
        *,
        rng: random.Random | None = None,
) -> tuple[list[TaskItem], str | None]:
    """
    Collect open tasks of one document, assigning ids in memory.

    Returns the tasks and the new document text (None when nothing changed).
    """
    lines = split_lines(content)
    mutated = False
    tasks: list[TaskItem] = []
    current_heading: str | None = None

    for i, line in enumerate(lines):
        if HEADING_RE.match(line):
            current_heading = heading_text(line)
            continue

        if not OPEN_TASK_RE.match(line):
            continue

        block_id = find_block_id(line)
        if not block_id:
            block_id = generate_block_id(reserved, rng=rng)
            line = append_block_id(line, block_id)
            lines[i] = line
            mutated = True

        tasks.append(
            TaskItem(
                id=block_id,
                note=ensure_md(path),
                text=task_display_text(line),
                context=current_heading,
                created=parse_created_date_from_line(line),
                line=i,
            )
        )

    if not mutated:
        return tasks, None

    return tasks, join_lines(lines, content)


async def _documents_to_scan(store: DocumentStore, roots: list[str], active_path: str | None) -> list[str]:
    paths: list[str] = []
    seen: set[str] = set()
    for root in roots or [""]:
        for path in await store.list_documents(root):
            if path in seen:
                continue
            seen.add(path)
            if same_document(path, active_path):
                logger.debug("Skipping active document %s", path)
                continue
            paths.append(path)
    return paths


async def collect_open_tasks_direct(
        settings: Any,
        store: DocumentStore,
        index: BlockIndex,
        *,
        active_path: str | None,
        rng: random.Random | None = None,
) -> list[TaskItem]:
    roots = normalize_folder_roots(list(getattr(settings, "folders", []) or []))
    poll_interval = float(getattr(settings, "index_poll_interval", 0.1))
    index_timeout = float(getattr(settings, "index_timeout", 2.0))

    paths = await _documents_to_scan(store, roots, active_path)

    contents: dict[str, str] = {}
    reserved: set[str] = set()
    for path in paths:
        contents[path] = await store.read(path)
        reserved |= collect_block_ids(split_lines(contents[path]))

    all_tasks: list[TaskItem] = []
    for path in paths:
        tasks, new_content = scan_document(path, contents[path], reserved, rng=rng)

        if new_content is not None:
            await store.write(path, new_content)
            new_ids = {t.id for t in tasks} - collect_block_ids(split_lines(contents[path]))
            logger.info("Wrote %d block id(s) to %s", len(new_ids), path)

            indexed = await wait_until(
                lambda: new_ids <= set(index.block_ids(path)),
                interval_seconds=poll_interval,
                timeout_seconds=index_timeout,
            )
            if not indexed:
                logger.warning("Block ids of %s not indexed within timeout", path)

        all_tasks.extend(tasks)

    logger.info("Direct scan: %d open task(s) in %d document(s)", len(all_tasks), len(paths))
    return all_tasks
