# tests/test_priorities.py

from __future__ import annotations

from task_picker.core.priorities import extract_priorities, normalize_heading_text


def test_section_stops_before_sibling_heading_and_keeps_inner_blanks() -> None:
    text = "\n".join(
        [
            "# Week",
            "## Heading A",
            "",
            "first",
            "",
            "second",
            "",
            "## Heading B",
            "other",
        ]
    )
    assert extract_priorities(text, "Heading A") == "first\n\nsecond"


def test_deeper_heading_is_part_of_the_section() -> None:
    text = "\n".join(
        [
            "## Heading A",
            "intro",
            "### Sub",
            "- detail",
            "## Heading B",
            "after",
        ]
    )
    assert extract_priorities(text, "Heading A") == "intro\n### Sub\n- detail"


def test_shallower_heading_ends_the_section() -> None:
    text = "### Heading A\nkeep\n# Top\nnope"
    assert extract_priorities(text, "Heading A") == "keep"


def test_horizontal_rule_ends_the_section() -> None:
    text = "## Heading A\nkeep\n\n---\nnope"
    assert extract_priorities(text, "Heading A") == "keep"


def test_missing_heading_yields_empty_string() -> None:
    assert extract_priorities("## Something else\ntext", "Heading A") == ""
    assert extract_priorities("", "Heading A") == ""


def test_emoji_and_possessive_are_folded() -> None:
    assert normalize_heading_text("🎯 Next Week's Priorities") == normalize_heading_text("Next Week Priorities")
    assert normalize_heading_text("🎯 Next Week’s Priorities") == "next week priorities"

    text = "## 🎯 Next Week's Priorities\nShip the report\n## Notes"
    assert extract_priorities(text, "Next Week Priorities") == "Ship the report"


def test_normalization_rules() -> None:
    assert normalize_heading_text("Goals (draft)") == "goals"
    assert normalize_heading_text("Health + Fitness") == "health plus fitness"
    assert normalize_heading_text("Q3: Ship — now!") == "q3 ship now"
    assert normalize_heading_text('"Big" Rocks') == "big rocks"
    assert normalize_heading_text("👨‍👩‍👧 Family") == "family"


def test_first_matching_heading_wins() -> None:
    text = "## Plan\none\n## Plan\ntwo"
    assert extract_priorities(text, "plan") == "one"


def test_only_newlines_split_sections() -> None:
    text = "## Focus\nShip it\u2028# not a heading\n## Other\nrest\n"
    assert extract_priorities(text, "Focus") == "Ship it\u2028# not a heading"
