# src/task_picker/core/errors.py

"""
Error taxonomy.

Components raise these; the single top-level handler (TaskPicker.run_command)
turns any of them into one user-visible notice. Empty outcomes (no tasks,
no priorities, nothing ranked) are not errors and never raise.
"""

from __future__ import annotations


class TaskPickerError(RuntimeError):
    """Base class for failures that abort a pick run."""


class ConfigurationError(TaskPickerError):
    """Missing credential, unknown collection strategy, unusable settings."""


class CollaboratorIncompatibleError(TaskPickerError):
    """The task-indexing service is absent or exposes no known API shape."""


class RankingServiceError(TaskPickerError):
    """The ranking endpoint answered with a non-success status or could not be reached."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
