# src/task_picker/core/picker.py

"""
Pick orchestration: one user-triggered run from cursor to inserted embeds.

Sequence:
1. resolve the target document (editor-bound, else the workspace's active one),
2. snapshot cursor + full text before any prompt or async work,
3. ask for a count (the only cancellable step),
4. collect open tasks, then compare the editor text with the snapshot and
   restore it if anything changed underneath us,
5. extract priorities from the (restored) text,
6. rank, map ids back to tasks, drop unknown or unindexed anchors,
7. insert all embeds in one edit at the saved cursor.

Known residual risk: some hosts were seen mutating the active document as a
side effect of collection even though collection never writes it. The cause
is not established; ActiveDocumentGuard restores the snapshot but does not
fix the trigger.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from ..tasks.ids import ensure_md, normalize_block_id
from ..tasks.models import TaskItem
from .editor import insert_text_at_cursor
from .ports import BlockIndex, CountPrompt, Cursor, DocumentStore, Editor, Notifier, TaskCollector, TaskRanker, Workspace
from .priorities import extract_priorities

logger = logging.getLogger(__name__)


class PickOutcome(StrEnum):
    INSERTED = "inserted"
    CANCELLED = "cancelled"
    NO_TARGET = "no_target"
    NO_TASKS = "no_tasks"
    NO_PRIORITIES = "no_priorities"
    NOTHING_RANKED = "nothing_ranked"
    FAILED = "failed"


@dataclass(slots=True)
class PickResult:
    outcome: PickOutcome
    embeds: list[str] = field(default_factory=list)
    restored: bool = False
    error: str | None = None


class ActiveDocumentGuard:
    """Snapshot of the active editor; restores it if it changed unexpectedly."""

    def __init__(self, editor: Editor) -> None:
        self._editor = editor
        self.cursor: Cursor = editor.get_cursor()
        self.snapshot: str = editor.get_value()

    def verify(self) -> bool:
        """Return True if the document had to be restored."""
        if self._editor.get_value() == self.snapshot:
            return False
        logger.warning("Active file was modified during task collection! Restoring original content.")
        self._editor.set_value(self.snapshot)
        return True


def embed_for(task: TaskItem, block_id: str) -> str:
    return f"![[{ensure_md(task.note)}#^{block_id}]]"


class TaskPicker:
    def __init__(
            self,
            settings: Any,
            *,
            store: DocumentStore,
            index: BlockIndex,
            collector: TaskCollector,
            ranker: TaskRanker,
            prompt: CountPrompt,
            notifier: Notifier,
            workspace: Workspace | None = None,
            describe_error: Callable[[Exception], str] | None = None,
    ) -> None:
        self._settings = settings
        self._store = store
        self._index = index
        self._collector = collector
        self._ranker = ranker
        self._prompt = prompt
        self._notifier = notifier
        self._workspace = workspace
        self._describe_error = describe_error or (lambda e: str(e).strip())

    def _target_document(self, editor: Editor) -> str | None:
        path = editor.document_path
        if not path and self._workspace is not None:
            path = self._workspace.active_document()
        return path or None

    def _is_indexed(self, task: TaskItem, block_id: str) -> bool:
        path = self._store.resolve(task.note)
        if path is None:
            # Nothing to check against; let the host resolve it.
            return True
        return block_id in self._index.block_ids(path)

    def build_embeds(self, ranked_ids: list[str], tasks: list[TaskItem]) -> list[str]:
        tasks_by_id: dict[str, TaskItem] = {}
        for task in tasks:
            tasks_by_id.setdefault(normalize_block_id(task.id), task)

        embeds: list[str] = []
        for raw_id in ranked_ids:
            block_id = normalize_block_id(raw_id)
            task = tasks_by_id.get(block_id)
            if task is None:
                logger.debug("Ignoring unknown ranked id %r", raw_id)
                continue
            if not self._is_indexed(task, block_id):
                logger.warning("Skipping embed; block id not yet indexed (path=%s id=%s)", task.note, block_id)
                continue
            embeds.append(embed_for(task, block_id))
        return embeds

    async def run(self, editor: Editor) -> PickResult:
        target = self._target_document(editor)
        if not target:
            self._notifier.notify("Open a note first.")
            return PickResult(PickOutcome.NO_TARGET)

        guard = ActiveDocumentGuard(editor)

        count = await self._prompt.ask_count(int(getattr(self._settings, "default_count", 5)))
        if count is None:
            logger.info("Pick cancelled at the count prompt")
            return PickResult(PickOutcome.CANCELLED)

        self._notifier.notify("Collecting open tasks…")
        tasks = await self._collector(active_path=target)
        restored = guard.verify()

        if not tasks:
            self._notifier.notify("No open tasks found.")
            return PickResult(PickOutcome.NO_TASKS, restored=restored)

        self._notifier.notify("Reading priorities…")
        heading = str(getattr(self._settings, "priorities_heading", "") or "")
        priorities = extract_priorities(editor.get_value(), heading)
        if not priorities.strip():
            self._notifier.notify("No priorities found.")
            return PickResult(PickOutcome.NO_PRIORITIES, restored=restored)

        self._notifier.notify("Ranking with OpenAI…")
        ranked_ids = await self._ranker.rank(priorities, tasks, count)

        embeds = self.build_embeds(ranked_ids, tasks)
        if not embeds:
            self._notifier.notify("No tasks returned (or not yet indexed). Try again shortly.")
            return PickResult(PickOutcome.NOTHING_RANKED, restored=restored)

        insert_text_at_cursor(editor, guard.cursor, "\n".join(embeds) + "\n")
        logger.info("Inserted %d embed(s) into %s", len(embeds), target)
        self._notifier.notify("Inserted ranked task embeds ✅")
        return PickResult(PickOutcome.INSERTED, embeds=embeds, restored=restored)

    async def run_command(self, editor: Editor) -> PickResult:
        """Top-level handler: any failure becomes one notice carrying its message."""
        try:
            return await self.run(editor)
        except Exception as e:
            logger.exception("Command failure")
            msg = self._describe_error(e) or e.__class__.__name__
            self._notifier.notify(f"AI Task Picker error: {msg}")
            return PickResult(PickOutcome.FAILED, error=msg)
