# src/task_picker/tasks/block_ids.py

"""
Block-id synchronizer.

Given a task reference (an opaque record from the task index), returns an
anchor token for it, persisting new tokens into the owning document and
waiting for the host's block index to pick them up.

States, in the order they are checked:
- HasToken:        the record already carries a token -> return it, no I/O
- NoLocation:      no path / no line / unresolvable   -> random token, not persisted
- ActiveFileGuard: the document is the active one     -> random token, not persisted
- LineHasToken:    the line already ends with ^token  -> reuse, then wait
- Generate:        append a new unique token, write   -> then wait

Waiting is bounded: on timeout the token is still returned with confirmed=False.
The active document is never written, whatever the record says.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from ..core.ports import BlockIndex, DocumentStore
from ..core.retry import wait_until
from .filters import get_field
from .ids import (
    append_block_id,
    collect_block_ids,
    ensure_md,
    find_block_id,
    generate_block_id,
    join_lines,
    normalize_block_id,
    split_lines,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Anchor:
    id: str
    persisted: bool
    confirmed: bool


def _task_line(task: Any) -> int | None:
    raw = get_field(task, "line_number", "lineNumber", "line_nr", "lineNr", "line")
    # bool is an int subclass; a flag is not a line number.
    if isinstance(raw, bool) or not isinstance(raw, int):
        return None
    return raw


def same_document(a: str | None, b: str | None) -> bool:
    if not a or not b:
        return False
    return ensure_md(a) == ensure_md(b)


class BlockIdSynchronizer:
    def __init__(
            self,
            store: DocumentStore,
            index: BlockIndex,
            *,
            active_path: str | None,
            poll_interval: float = 0.1,
            new_id_timeout: float = 2.0,
            existing_id_timeout: float = 1.0,
            rng: random.Random | None = None,
    ) -> None:
        self._store = store
        self._index = index
        self._active_path = active_path
        self._poll_interval = poll_interval
        self._new_id_timeout = new_id_timeout
        self._existing_id_timeout = existing_id_timeout
        self._rng = rng

    @classmethod
    def from_settings(
            cls,
            settings: Any,
            store: DocumentStore,
            index: BlockIndex,
            *,
            active_path: str | None,
    ) -> BlockIdSynchronizer:
        return cls(
            store,
            index,
            active_path=active_path,
            poll_interval=float(getattr(settings, "index_poll_interval", 0.1)),
            new_id_timeout=float(getattr(settings, "index_timeout", 2.0)),
            existing_id_timeout=float(getattr(settings, "existing_index_timeout", 1.0)),
        )

    def _unpersisted(self, reserved: set[str]) -> Anchor:
        return Anchor(id=generate_block_id(reserved, rng=self._rng), persisted=False, confirmed=False)

    async def wait_for_index(self, path: str, block_id: str, timeout_seconds: float) -> bool:
        return await wait_until(
            lambda: block_id in self._index.block_ids(path),
            interval_seconds=self._poll_interval,
            timeout_seconds=timeout_seconds,
        )

    async def reserve_existing(self, paths: Iterable[str], reserved: set[str]) -> None:
        """Add the ids already written in `paths` to `reserved`, reading each document once."""
        seen: set[str] = set()
        for raw_path in paths:
            path = self._store.resolve(raw_path) if raw_path else None
            if path is None or path in seen:
                continue
            seen.add(path)
            reserved |= collect_block_ids(split_lines(await self._store.read(path)))

    async def ensure(self, task: Any, reserved: set[str] | None = None) -> Anchor:
        """
        Return an anchor for `task`.

        `reserved` collects every id handed out during one collection run;
        new ids are drawn outside of it so they stay unique across documents.
        """
        if reserved is None:
            reserved = set()

        existing = normalize_block_id(get_field(task, "block_link", "blockLink"))
        if existing:
            reserved.add(existing)
            return Anchor(id=existing, persisted=True, confirmed=False)

        raw_path = get_field(task, "path")
        line_number = _task_line(task)
        path = self._store.resolve(str(raw_path)) if isinstance(raw_path, str) and raw_path else None
        if path is None or line_number is None:
            logger.debug("Task without resolvable location (path=%r line=%r)", raw_path, line_number)
            return self._unpersisted(reserved)

        if same_document(path, self._active_path):
            logger.warning("Refusing to modify active file %s", path)
            return self._unpersisted(reserved)

        content = await self._store.read(path)
        lines = split_lines(content)
        if not lines:
            lines = [""]
        line_index = min(max(0, line_number), len(lines) - 1)
        current_line = lines[line_index]

        line_id = find_block_id(current_line)
        if line_id:
            reserved.add(line_id)
            confirmed = await self.wait_for_index(path, line_id, self._existing_id_timeout)
            return Anchor(id=line_id, persisted=True, confirmed=confirmed)

        taken = collect_block_ids(lines) | reserved
        new_id = generate_block_id(taken, rng=self._rng)
        reserved.add(new_id)

        lines[line_index] = append_block_id(current_line, new_id)
        await self._store.write(path, join_lines(lines, content))
        logger.info("Wrote block id ^%s to %s:%d", new_id, path, line_index + 1)

        confirmed = await self.wait_for_index(path, new_id, self._new_id_timeout)
        if not confirmed:
            logger.warning(
                "Block id not indexed within timeout; embed may briefly appear unresolved (path=%s id=%s)",
                path,
                new_id,
            )
        return Anchor(id=new_id, persisted=True, confirmed=confirmed)
