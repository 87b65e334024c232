# src/task_picker/host/console.py

"""
Console host.

- ConsoleEditor: an in-memory editing buffer bound to one note (cursor, text,
  single-edit insertion), saved back to the vault explicitly.
- ConsoleWorkspace: tracks which note is open (the "active document").
- ConsolePrompt / ConsoleNotifier: the count prompt and user-visible notices.
- run_console_loop: REPL that routes slash commands (/open, /pick, ...).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from ..core.ports import Cursor, DocumentStore

if TYPE_CHECKING:
    from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsoleEditor:
    def __init__(self, path: str, text: str, cursor: Cursor | None = None) -> None:
        self._path = path
        self._lines = text.split("\n")
        self._saved = text
        if cursor is None:
            cursor = Cursor(line=len(self._lines) - 1, ch=len(self._lines[-1]))
        self._cursor = cursor

    @classmethod
    async def open(cls, store: DocumentStore, path: str) -> ConsoleEditor:
        resolved = store.resolve(path)
        if resolved is None:
            raise FileNotFoundError(f"Note not found: {path}")
        # The buffer works in "\n" lines, like an editor buffer.
        return cls(resolved, (await store.read(resolved)).replace("\r\n", "\n"))

    @property
    def document_path(self) -> str | None:
        return self._path

    @property
    def dirty(self) -> bool:
        return self.get_value() != self._saved

    def get_cursor(self) -> Cursor:
        return self._cursor

    def set_cursor(self, pos: Cursor) -> None:
        self._cursor = pos

    def get_value(self) -> str:
        return "\n".join(self._lines)

    def set_value(self, text: str) -> None:
        self._lines = text.split("\n")

    def line_count(self) -> int:
        return len(self._lines)

    def get_line(self, line: int) -> str:
        return self._lines[line]

    def replace_range(self, text: str, pos: Cursor) -> None:
        current = self._lines[pos.line]
        merged = current[:pos.ch] + text + current[pos.ch:]
        self._lines[pos.line:pos.line + 1] = merged.split("\n")

    async def save(self, store: DocumentStore) -> bool:
        if not self.dirty:
            return False
        value = self.get_value()
        await store.write(self._path, value)
        self._saved = value
        return True


class ConsoleWorkspace:
    def __init__(self) -> None:
        self.current: ConsoleEditor | None = None

    def active_document(self) -> str | None:
        return self.current.document_path if self.current is not None else None


class ConsoleNotifier:
    def __init__(self, out: Callable[[str], None] = print) -> None:
        self._out = out

    def notify(self, message: str) -> None:
        logger.debug("Notice: %s", message)
        self._out(f"[{_ts_local()}] {message}")


class ConsolePrompt:
    """Ask "how many tasks?" on stdin. Empty input keeps the default; q / EOF cancels."""

    def __init__(self, notifier: ConsoleNotifier, read_line: Callable[[str], str] = input) -> None:
        self._notifier = notifier
        self._read_line = read_line

    def _ask(self, initial: int) -> int | None:
        while True:
            try:
                raw = self._read_line(f"How many tasks should I surface? [{initial}] ").strip()
            except (EOFError, KeyboardInterrupt):
                return None

            if not raw:
                return initial
            if raw.lower() in ("q", "quit", "cancel"):
                return None
            try:
                count = int(raw)
            except ValueError:
                count = 0
            if count >= 1:
                return count
            self._notifier.notify("Please enter a number ≥ 1")

    async def ask_count(self, initial: int) -> int | None:
        return await asyncio.to_thread(self._ask, initial)


def run_console_loop(state: AppState) -> None:
    from ..cli.commands import registry as command_registry

    logger.info("Console connector started (vault=%s).", getattr(state.settings, "vault_dir", "?"))
    state.notifier.notify("[CONSOLE] Use /open <note> then /pick. Use /help for commands. Use /exit to quit.\n")

    while True:
        try:
            user_input = input(">>> ").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = command_registry.handle(state, user_input, emit=state.notifier.notify)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Not a command. Use /help to list available commands."
        print(f"[{_ts_local()}] {reply}")
