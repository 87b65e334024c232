# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from task_picker.config import DEFAULT_RANKING_PROMPT
from task_picker.core.picker import TaskPicker
from task_picker.core.state import AppState
from task_picker.host.console import ConsoleWorkspace
from task_picker.host.vault import FileVault, MarkdownBlockIndex

from .fakes import FakeNotifier, FakePrompt, FakeRanker


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the core modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and .env files.
    """
    vault_dir = tmp_path / "vault"
    vault_dir.mkdir()
    return SimpleNamespace(
        app_name="task-picker-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        vault_dir=vault_dir,
        folders=["Work"],
        priorities_heading="🎯 Next Week's Priorities",
        collection_strategy="direct",
        default_count=5,
        # Keep index polling fast in tests.
        index_poll_interval=0.0,
        index_timeout=0.05,
        existing_index_timeout=0.05,
        openai_api_key="sk-test",
        openai_base_url="https://api.openai.com/v1",
        model="gpt-4o-mini",
        ranking_prompt=DEFAULT_RANKING_PROMPT,
        connect_timeout=5.0,
        read_timeout=60.0,
    )


@pytest.fixture()
def vault(settings: SimpleNamespace) -> FileVault:
    return FileVault(settings.vault_dir)


@pytest.fixture()
def state(settings: SimpleNamespace, vault: FileVault) -> AppState:
    """
    AppState wired with a real vault on tmp_path and deterministic fakes
    for the prompt, the notifier and the ranker.
    """
    index = MarkdownBlockIndex(vault)
    notifier = FakeNotifier()
    workspace = ConsoleWorkspace()

    async def no_tasks(*, active_path):
        return []

    picker = TaskPicker(
        settings,
        store=vault,
        index=index,
        collector=no_tasks,
        ranker=FakeRanker(),
        prompt=FakePrompt(),
        notifier=notifier,
        workspace=workspace,
    )
    return AppState(
        settings=settings,
        store=vault,
        index=index,
        picker=picker,
        notifier=notifier,
        workspace=workspace,
    )
