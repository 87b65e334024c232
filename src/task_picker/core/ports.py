# src/task_picker/core/ports.py

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the host (vault on disk, editor, prompt), the task index and the
ranking provider swappable and makes testing easier.
"""

from __future__ import annotations

from collections.abc import Collection
from dataclasses import dataclass
from typing import TYPE_CHECKING, Awaitable, Protocol

if TYPE_CHECKING:
    from ..tasks.models import TaskItem


@dataclass(slots=True, frozen=True)
class Cursor:
    """Editor position, 0-based line and character offset."""

    line: int
    ch: int


class DocumentStore(Protocol):
    """
    Host document storage.

    Paths are vault-relative and use "/" separators (e.g. "Work/todo.md").
    """

    def resolve(self, path: str) -> str | None:
        """Return the canonical path of an existing document, or None."""
        ...

    def read(self, path: str) -> Awaitable[str]: ...

    def write(self, path: str, text: str) -> Awaitable[None]: ...

    def list_documents(self, folder: str) -> Awaitable[list[str]]:
        """Markdown documents under folder, recursively ("" means the whole vault)."""
        ...


class BlockIndex(Protocol):
    """
    Host background index of resolvable anchors.

    Eventually consistent: a freshly written anchor may take a moment to appear.
    """

    def block_ids(self, path: str) -> Collection[str]: ...


class Editor(Protocol):
    """The editing surface bound to one open document."""

    @property
    def document_path(self) -> str | None: ...

    def get_cursor(self) -> Cursor: ...
    def set_cursor(self, pos: Cursor) -> None: ...
    def get_value(self) -> str: ...
    def set_value(self, text: str) -> None: ...
    def line_count(self) -> int: ...
    def get_line(self, line: int) -> str: ...
    def replace_range(self, text: str, pos: Cursor) -> None: ...


class Workspace(Protocol):
    def active_document(self) -> str | None: ...


class CountPrompt(Protocol):
    """Interactive "how many tasks?" prompt. None means the user cancelled."""

    def ask_count(self, initial: int) -> Awaitable[int | None]: ...


class Notifier(Protocol):
    """Transient user-visible status/error notices."""

    def notify(self, message: str) -> None: ...


class TaskRanker(Protocol):
    def rank(
            self,
            priorities_text: str,
            tasks: list[TaskItem],
            max_count: int,
    ) -> Awaitable[list[str]]: ...


class TaskCollector(Protocol):
    """A configured collection strategy: open tasks, never from active_path."""

    def __call__(self, *, active_path: str | None) -> Awaitable[list[TaskItem]]: ...

