# src/task_picker/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..host.console import ConsoleEditor, ConsoleWorkspace
from .picker import TaskPicker
from .ports import BlockIndex, DocumentStore, Notifier


@dataclass
class AppState:
    # Store Settings on the state for easy access in command handlers.
    settings: Any

    store: DocumentStore
    index: BlockIndex
    picker: TaskPicker
    notifier: Notifier
    workspace: ConsoleWorkspace

    @property
    def editor(self) -> ConsoleEditor | None:
        return self.workspace.current
