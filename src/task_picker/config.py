# src/task_picker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- Core components receive Settings explicitly; only the composition root calls get_settings().
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

ENV_PREFIX = "TASK_PICKER"

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_PRIORITIES_HEADING = "🎯 Next Week's Priorities"
DEFAULT_FOLDERS = ["Daily Notes", "1 Projects"]

DEFAULT_RANKING_PROMPT = "\n".join(
    [
        "You are my executive assistant. Rank my tasks against the supplied priorities.",
        "",
        "Constraints:",
        '- Return STRICT JSON: { "ranked_task_ids": ["id1", "id2", ...] }',
        "- Only include ids that exist in the provided tasks array.",
        "- Prefer tasks that advance the stated priorities.",
        "- Balance urgency (older created dates), unblockers, external visibility / consequence of delay.",
        "- Avoid picking near-duplicates unless they are different concrete steps.",
        "",
        "Output must be valid JSON only. No commentary.",
    ]
)

COLLECTION_STRATEGIES = ("indexed", "direct")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    # Folder names contain spaces ("Daily Notes"), so only commas/newlines separate items.
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace("\n", ",").split(",") if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def normalize_folder_roots(folders: List[str] | None) -> List[str]:
    """Strip whitespace and leading/trailing slashes; drop blanks."""
    roots: List[str] = []
    for folder in folders or []:
        root = (folder or "").strip().strip("/")
        if root:
            roots.append(root)
    return roots


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str
    data_dir: Path

    # ---- Vault / collection ----
    vault_dir: Path
    folders: List[str]
    priorities_heading: str
    collection_strategy: str
    default_count: int

    # ---- Block index confirmation ----
    index_poll_interval: float
    index_timeout: float
    existing_index_timeout: float

    # ---- LLM / OpenAI ----
    openai_api_key: Optional[str]
    openai_base_url: str
    model: str
    ranking_prompt: str
    connect_timeout: float
    read_timeout: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "task-picker").strip() or "task-picker"
        log_level = _env(_k("LOG_LEVEL"), "INFO")
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/task_picker"))

        vault_dir = _env_path(_k("VAULT_DIR"), Path("."))
        folders = normalize_folder_roots(_env_list(_k("FOLDERS"), DEFAULT_FOLDERS))
        priorities_heading = _env(_k("PRIORITIES_HEADING"), DEFAULT_PRIORITIES_HEADING).strip()
        collection_strategy = _env(_k("COLLECTION_STRATEGY"), "indexed").strip().lower() or "indexed"
        default_count = max(1, _env_int(_k("DEFAULT_COUNT"), 5))

        index_poll_interval = _env_float(_k("INDEX_POLL_INTERVAL_SECONDS"), 0.1)
        index_timeout = _env_float(_k("INDEX_TIMEOUT_SECONDS"), 2.0)
        existing_index_timeout = _env_float(_k("EXISTING_INDEX_TIMEOUT_SECONDS"), 1.0)

        openai_api_key = _first_env(_k("OPENAI_API_KEY"), "OPENAI_API_KEY", default=None)
        openai_base_url = _env(_k("OPENAI_BASE_URL"), "https://api.openai.com/v1")
        model = _env(_k("MODEL"), DEFAULT_MODEL).strip() or DEFAULT_MODEL
        ranking_prompt = _env(_k("RANKING_PROMPT"), "").strip() or DEFAULT_RANKING_PROMPT

        connect_timeout = _env_float(_k("LLM_CONNECT_TIMEOUT_SECONDS"), 5.0)
        read_timeout = _env_float(_k("LLM_READ_TIMEOUT_SECONDS"), 60.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            vault_dir=vault_dir,
            folders=folders,
            priorities_heading=priorities_heading,
            collection_strategy=collection_strategy,
            default_count=default_count,
            index_poll_interval=index_poll_interval,
            index_timeout=index_timeout,
            existing_index_timeout=existing_index_timeout,
            openai_api_key=openai_api_key,
            openai_base_url=openai_base_url,
            model=model,
            ranking_prompt=ranking_prompt,
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Load settings once (reads .env on first call, never at import time)."""
    global _settings
    if _settings is None:
        load_dotenv(override=False)
        _settings = Settings.from_env()
    return _settings
