# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASK_PICKER_APP_NAME": "App display name (default: task-picker).",
    "TASK_PICKER_LOG_LEVEL": "Console logging level (default: INFO). The log file always gets DEBUG.",
    "TASK_PICKER_DATA_DIR": "Local data directory for logs (default: .local/task_picker).",
    # Vault / collection
    "TASK_PICKER_VAULT_DIR": "Directory holding the Markdown notes (default: current directory).",
    "TASK_PICKER_FOLDERS": (
        "Comma or newline separated folder prefixes to scan "
        "(default: Daily Notes, 1 Projects). Empty list => whole vault."
    ),
    "TASK_PICKER_PRIORITIES_HEADING": "Heading whose section holds your priorities (default: 🎯 Next Week's Priorities).",
    "TASK_PICKER_COLLECTION_STRATEGY": "indexed (task index + per-task block ids) or direct (raw scan). Default: indexed.",
    "TASK_PICKER_DEFAULT_COUNT": "Count offered by the prompt (default: 5).",
    # Block index confirmation
    "TASK_PICKER_INDEX_POLL_INTERVAL_SECONDS": "Poll interval while waiting for new block ids (default: 0.1).",
    "TASK_PICKER_INDEX_TIMEOUT_SECONDS": "Max wait for a newly written block id (default: 2.0).",
    "TASK_PICKER_EXISTING_INDEX_TIMEOUT_SECONDS": "Max wait for an already present block id (default: 1.0).",
    # LLM / OpenAI
    "TASK_PICKER_OPENAI_API_KEY": "OpenAI API key (OPENAI_API_KEY is accepted as a fallback).",
    "TASK_PICKER_OPENAI_BASE_URL": "Chat completions base URL (default: https://api.openai.com/v1).",
    "TASK_PICKER_MODEL": "Model used for ranking (default: gpt-4o-mini).",
    "TASK_PICKER_RANKING_PROMPT": "System prompt override. Blank => built-in prompt.",
    "TASK_PICKER_LLM_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout (default: 5).",
    "TASK_PICKER_LLM_READ_TIMEOUT_SECONDS": "HTTP read timeout (default: 60).",
}
