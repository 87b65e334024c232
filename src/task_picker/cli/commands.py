# src/task_picker/cli/commands.py

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.picker import PickOutcome
from ..core.ports import Cursor
from ..core.state import AppState
from ..host.console import ConsoleEditor

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /pick, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """Handle "/command args"; None means the line is not a command."""
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            h3 = cast(CommandHandler3, handler)
            return h3(state, args, emit)

        h2 = cast(CommandHandler2, handler)
        return h2(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def cmd_help(
    state: AppState,
    args: list[str],
) -> str:
    return registry.build_help()


def cmd_status(
    state: AppState,
    args: list[str],
) -> str:
    s = state.settings
    folders = ", ".join(list(getattr(s, "folders", []) or [])) or "(whole vault)"
    key = "set" if getattr(s, "openai_api_key", None) else "MISSING"
    editor = state.editor
    note = editor.document_path if editor is not None else "(none)"
    return (
        "Status:\n"
        f"  Vault: {getattr(s, 'vault_dir', '?')}\n"
        f"  Open note: {note}\n"
        f"  Folders: {folders}\n"
        f"  Priorities heading: {getattr(s, 'priorities_heading', '')}\n"
        f"  Collection: {getattr(s, 'collection_strategy', 'indexed')}\n"
        f"  Model: {getattr(s, 'model', '')} (API key: {key})"
    )


def cmd_open(
    state: AppState,
    args: list[str],
) -> str:
    """
    /open <note>  -> open a note (vault-relative path, ".md" optional)
    """
    if not args:
        return "Usage: /open <note path>"

    path = " ".join(args)
    try:
        state.workspace.current = asyncio.run(ConsoleEditor.open(state.store, path))
    except FileNotFoundError as e:
        return str(e)

    editor = state.workspace.current
    cur = editor.get_cursor()
    return f"Opened {editor.document_path} ({editor.line_count()} lines, cursor at {cur.line + 1}:{cur.ch})."


def cmd_cursor(
    state: AppState,
    args: list[str],
) -> str:
    """
    /cursor              -> show cursor
    /cursor <line> [ch]  -> move cursor (1-based line; ch defaults to end of line)
    """
    editor = state.editor
    if editor is None:
        return "Open a note first."

    if not args:
        cur = editor.get_cursor()
        return f"Cursor at {cur.line + 1}:{cur.ch}."

    try:
        line = int(args[0]) - 1
        ch = int(args[1]) if len(args) > 1 else None
    except ValueError:
        return "Usage: /cursor <line> [ch]"

    line = min(max(0, line), editor.line_count() - 1)
    text = editor.get_line(line)
    ch = len(text) if ch is None else min(max(0, ch), len(text))
    editor.set_cursor(Cursor(line=line, ch=ch))
    return f"Cursor at {line + 1}:{ch}."


def cmd_show(
    state: AppState,
    args: list[str],
) -> str:
    editor = state.editor
    if editor is None:
        return "Open a note first."

    cur = editor.get_cursor()
    out = [f"{editor.document_path}:"]
    for i in range(editor.line_count()):
        marker = ">" if i == cur.line else " "
        out.append(f"{marker}{i + 1:4d} | {editor.get_line(i)}")
    return "\n".join(out)


def cmd_pick(
    state: AppState,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    """
    /pick -> rank open tasks against the open note's priorities and insert
             embeds at the cursor (the count is asked interactively)
    """
    editor = state.editor
    if editor is None:
        return "Open a note first."

    result = asyncio.run(state.picker.run_command(editor))
    logger.debug("Pick finished outcome=%s embeds=%d", result.outcome, len(result.embeds))

    if editor.dirty:
        if emit is not None:
            emit(f"Saving {editor.document_path}…")
        asyncio.run(editor.save(state.store))

    if result.outcome == PickOutcome.INSERTED:
        return f"Saved {editor.document_path} with {len(result.embeds)} embed(s)."
    return f"Pick finished: {result.outcome.value}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show current settings (vault/folders/model).")
registry.register("open", cmd_open, help_text="Open a note: /open <path>.")
registry.register("cursor", cmd_cursor, help_text="Show or move the cursor: /cursor <line> [ch].")
registry.register("show", cmd_show, help_text="Print the open note with the cursor line marked.")
registry.register(
    "pick", cmd_pick, help_text="AI: insert ranked tasks at cursor (asks how many)."
)
