# src/task_picker/core/priorities.py

"""
Priorities section extraction.

Finds a heading in a Markdown document by fuzzy comparison and returns the
body of its section. A missing heading is a normal outcome (empty string).

Section rules:
- the section ends at a horizontal rule or at a heading of the same or a
  shallower depth (sibling headings end it, sub-headings are included),
- leading blank lines are skipped, trailing blank lines are trimmed.
"""

from __future__ import annotations

import logging
import re
import unicodedata

from ..tasks.ids import split_lines

logger = logging.getLogger(__name__)

HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
HORIZONTAL_RULE_RE = re.compile(r"^\s*([-*_])\1{2,}\s*$")

_TRAILING_PAREN_RE = re.compile(r"\(.+?\)\s*$")
_POSSESSIVE_RE = re.compile(r"(\w)['’]s\b")
_QUOTES_RE = re.compile(r"['‘’`\"“”]")
_PUNCT_RE = re.compile(r"[.:•\-–—,;!?]")
_SPACES_RE = re.compile(r"\s+")

# Emoji modifiers that are not "symbols" by category: ZWJ, variation selectors, keycap.
_EMOJI_JOINERS = {"‍", "︎", "️", "⃣"}


def _is_leading_decoration(ch: str) -> bool:
    if ch.isspace() or ch in _EMOJI_JOINERS:
        return True
    category = unicodedata.category(ch)
    # So/Sm/Sc/Sk: emoji and pictographs are "So"; skin tones are "Sk".
    return category.startswith("S")


def _strip_leading_decoration(text: str) -> str:
    i = 0
    while i < len(text) and _is_leading_decoration(text[i]):
        i += 1
    return text[i:]


def normalize_heading_text(text: str | None) -> str:
    out = _strip_leading_decoration(text or "")
    out = _TRAILING_PAREN_RE.sub("", out)
    out = out.replace("+", " plus ")
    out = _POSSESSIVE_RE.sub(r"\1", out)
    out = _QUOTES_RE.sub("", out)
    out = _PUNCT_RE.sub(" ", out)
    return _SPACES_RE.sub(" ", out.lower()).strip()


def extract_priorities(text: str, desired_heading: str) -> str:
    lines = split_lines(text or "")
    wanted = normalize_heading_text(desired_heading)

    start = -1
    start_depth = 0
    for i, line in enumerate(lines):
        m = HEADING_RE.match(line)
        if not m:
            continue
        if normalize_heading_text(m.group(2)) == wanted:
            start = i
            start_depth = len(m.group(1))
            break

    if start == -1:
        logger.debug("Priorities heading not found: %r", desired_heading)
        return ""

    buffer: list[str] = []
    for line in lines[start + 1:]:
        if HORIZONTAL_RULE_RE.match(line):
            break

        m = HEADING_RE.match(line)
        if m and len(m.group(1)) <= start_depth:
            break

        if not buffer and not line.strip():
            continue
        buffer.append(line)

    while buffer and not buffer[-1].strip():
        buffer.pop()

    return "\n".join(buffer)

