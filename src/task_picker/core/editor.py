# src/task_picker/core/editor.py

from __future__ import annotations

from .ports import Cursor, Editor


def clamp_cursor(editor: Editor, pos: Cursor) -> Cursor:
    """Clamp a (possibly stale) position into the current document bounds."""
    last_line = max(0, editor.line_count() - 1)
    line = min(max(0, pos.line), last_line)
    ch = min(max(0, pos.ch), len(editor.get_line(line)))
    return Cursor(line=line, ch=ch)


def insert_text_at_cursor(editor: Editor, pos: Cursor, text: str) -> Cursor:
    """Insert `text` at `pos` in one edit and move the cursor to the end of it."""
    at = clamp_cursor(editor, pos)
    editor.replace_range(text, at)

    inserted = text.split("\n")
    end_line = at.line + len(inserted) - 1
    end_ch = at.ch + len(text) if len(inserted) == 1 else len(inserted[-1])

    end = Cursor(line=end_line, ch=end_ch)
    editor.set_cursor(end)
    return end
