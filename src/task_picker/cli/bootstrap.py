# src/task_picker/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (vault, index, collector, ranker, console).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.picker import TaskPicker
from ..core.state import AppState
from ..host.console import ConsoleNotifier, ConsolePrompt, ConsoleWorkspace
from ..host.task_index import VaultTaskIndex
from ..host.vault import FileVault, MarkdownBlockIndex
from ..llm.client import friendly_llm_error_message
from ..llm.ranker import OpenAIRanker
from ..tasks.collection import build_collector
from ..tasks.tasks_api import ResolvedTasksApi, find_tasks_plugin, require_tasks_api

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    vault = FileVault(settings.vault_dir)
    index = MarkdownBlockIndex(vault)
    plugins = {VaultTaskIndex.manifest["id"]: VaultTaskIndex(vault)}

    def tasks_api() -> ResolvedTasksApi:
        return require_tasks_api(find_tasks_plugin(plugins))

    notifier = ConsoleNotifier()
    workspace = ConsoleWorkspace()

    picker = TaskPicker(
        settings,
        store=vault,
        index=index,
        collector=build_collector(settings, vault, index, tasks_api=tasks_api),
        ranker=OpenAIRanker(settings),
        prompt=ConsolePrompt(notifier),
        notifier=notifier,
        workspace=workspace,
        describe_error=friendly_llm_error_message,
    )

    logger.info(
        "State ready vault=%s strategy=%s folders=%s",
        vault.root,
        settings.collection_strategy,
        settings.folders,
    )
    return AppState(
        settings=settings,
        store=vault,
        index=index,
        picker=picker,
        notifier=notifier,
        workspace=workspace,
    )
