# src/task_picker/tasks/ids.py

"""Anchor (block id) tokens: normalize, find, generate, append."""

from __future__ import annotations

import random
import re
import string
from collections.abc import Iterable
from typing import Any, Collection

# Only \n and \r\n end a line (not U+2028, \x0c, ...).
LINE_BREAK_RE = re.compile(r"\r?\n")
BLOCK_ID_RE = re.compile(r"\^([A-Za-z0-9\-_]+)\s*$")
_LEADING_MARKER_RE = re.compile(r"^[\^\s]+")
_MD_SUFFIX_RE = re.compile(r"\.md$", re.IGNORECASE)

BLOCK_ID_PREFIX = "t-"
_ALPHABET = string.ascii_lowercase + string.digits
_RANDOM_LEN = 6


def split_lines(text: str) -> list[str]:
    """Lines of a document; a final line break does not start an extra empty line."""
    if not text:
        return []
    lines = LINE_BREAK_RE.split(text)
    if lines[-1] == "":
        lines.pop()
    return lines


def join_lines(lines: Iterable[str], like: str) -> str:
    """Join `lines` with the line break style of `like`, keeping its final line break."""
    newline = "\r\n" if "\r\n" in like else "\n"
    out = newline.join(lines)
    if like.endswith("\n"):
        out += newline
    return out


def normalize_block_id(raw: Any) -> str:
    """Strip surrounding whitespace and any leading '^' markers. None -> ''."""
    if raw is None:
        return ""
    return _LEADING_MARKER_RE.sub("", str(raw).strip()).strip()


def ensure_md(path: str) -> str:
    return path if _MD_SUFFIX_RE.search(path) else f"{path}.md"


def find_block_id(line: str | None) -> str | None:
    m = BLOCK_ID_RE.search(line or "")
    if m and m.group(1):
        return m.group(1)
    return None


def strip_block_id(line: str) -> str:
    return BLOCK_ID_RE.sub("", line).rstrip()


def collect_block_ids(lines: Iterable[str]) -> set[str]:
    found: set[str] = set()
    for line in lines:
        block_id = find_block_id(line)
        if block_id:
            found.add(block_id)
    return found


def random_block_id(rng: random.Random | None = None) -> str:
    r = rng or random
    return BLOCK_ID_PREFIX + "".join(r.choice(_ALPHABET) for _ in range(_RANDOM_LEN))


def generate_block_id(existing: Collection[str], *, rng: random.Random | None = None) -> str:
    """
    Draw candidates until one is not in `existing`.

    When `existing` is a set, the new id is added to it so repeated calls
    against the same set never hand out the same id twice.
    """
    while True:
        candidate = random_block_id(rng)
        if candidate not in existing:
            break
    if isinstance(existing, set):
        existing.add(candidate)
    return candidate


def append_block_id(line: str, block_id: str) -> str:
    return line.rstrip() + "  ^" + block_id
