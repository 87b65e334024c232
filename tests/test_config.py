# tests/test_config.py

from __future__ import annotations

import logging
import os
from pathlib import Path

from task_picker.config import DEFAULT_FOLDERS, DEFAULT_RANKING_PROMPT, Settings, normalize_folder_roots
from task_picker.logging_setup import _ConsoleNoiseFilter


def _clear_env(monkeypatch) -> None:
    for name in list(os.environ):
        if name.startswith("TASK_PICKER_") or name == "OPENAI_API_KEY":
            monkeypatch.delenv(name, raising=False)


def test_defaults_without_environment(monkeypatch) -> None:
    _clear_env(monkeypatch)

    s = Settings.from_env()

    assert s.folders == DEFAULT_FOLDERS
    assert s.priorities_heading == "🎯 Next Week's Priorities"
    assert s.collection_strategy == "indexed"
    assert s.default_count == 5
    assert s.openai_api_key is None
    assert s.model == "gpt-4o-mini"
    assert s.ranking_prompt == DEFAULT_RANKING_PROMPT
    assert s.index_timeout == 2.0
    assert s.existing_index_timeout == 1.0


def test_environment_overrides(monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("TASK_PICKER_FOLDERS", "Daily Notes, /Work/\n  ")
    monkeypatch.setenv("TASK_PICKER_VAULT_DIR", "~/notes")
    monkeypatch.setenv("TASK_PICKER_COLLECTION_STRATEGY", "Direct")
    monkeypatch.setenv("TASK_PICKER_DEFAULT_COUNT", "0")
    monkeypatch.setenv("TASK_PICKER_INDEX_TIMEOUT_SECONDS", "not-a-number")
    monkeypatch.setenv("TASK_PICKER_MODEL", "   ")
    monkeypatch.setenv("OPENAI_API_KEY", "sk-fallback")

    s = Settings.from_env()

    assert s.folders == ["Daily Notes", "Work"]
    assert s.vault_dir == Path("~/notes").expanduser()
    assert s.collection_strategy == "direct"
    assert s.default_count == 1
    assert s.index_timeout == 2.0
    assert s.model == "gpt-4o-mini"
    assert s.openai_api_key == "sk-fallback"


def test_prefixed_key_wins_over_generic_one(monkeypatch) -> None:
    _clear_env(monkeypatch)
    monkeypatch.setenv("OPENAI_API_KEY", "sk-generic")
    monkeypatch.setenv("TASK_PICKER_OPENAI_API_KEY", "sk-own")

    assert Settings.from_env().openai_api_key == "sk-own"


def test_normalize_folder_roots() -> None:
    assert normalize_folder_roots([" /a/ ", "", "b/c/", None]) == ["a", "b/c"]
    assert normalize_folder_roots(None) == []


def test_console_filter_keeps_own_logs_and_quiets_libraries() -> None:
    f = _ConsoleNoiseFilter()

    def rec(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert f.filter(rec("task_picker.core.picker", logging.DEBUG)) is True
    assert f.filter(rec("httpx", logging.WARNING)) is False
    assert f.filter(rec("openai", logging.ERROR)) is True
    assert f.filter(rec("py.warnings", logging.WARNING)) is False
