# tests/test_commands.py

from __future__ import annotations

from task_picker.cli.commands import CommandRegistry, registry
from task_picker.core.picker import TaskPicker
from task_picker.tasks.collection import build_collector

from .fakes import FakePrompt, write_note


def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b", aliases=["bee"])

    notes: list[str] = []
    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/bee y", emit=notes.append) == "h3"
    assert called["h2"] == 1
    assert called["h3"] == 1
    assert notes == ["note"]


def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")
    assert "Empty command" in (reg.handle(state, "/") or "")


def test_help_lists_registered_commands(state) -> None:
    reply = registry.handle(state, "/help") or ""
    for name in ("/pick", "/open", "/cursor", "/show", "/status"):
        assert name in reply


def test_open_cursor_and_show(state, vault) -> None:
    write_note(vault.root, "Weekly.md", "## Focus\nShip it\n")

    assert registry.handle(state, "/open Missing") == "Note not found: Missing"
    assert registry.handle(state, "/open Weekly").startswith("Opened Weekly.md (3 lines")
    assert state.workspace.active_document() == "Weekly.md"

    assert registry.handle(state, "/cursor 2") == "Cursor at 2:7."
    assert registry.handle(state, "/cursor 1 3") == "Cursor at 1:3."
    assert registry.handle(state, "/cursor x") == "Usage: /cursor <line> [ch]"

    shown = registry.handle(state, "/show") or ""
    assert ">   1 | ## Focus" in shown


def test_pick_without_open_note(state) -> None:
    assert registry.handle(state, "/pick") == "Open a note first."


class _ReverseRanker:
    """Ranks by reversing the collected order."""

    async def rank(self, priorities_text, tasks, max_count):
        return [t.id for t in reversed(tasks)][:max_count]


def test_pick_inserts_embeds_and_saves(state, settings, vault) -> None:
    write_note(vault.root, "Weekly.md", "## 🎯 Next Week's Priorities\nShip the report\n\n## Picks\n")
    write_note(vault.root, "Work/tasks.md", "- [ ] Buy milk\n- [ ] Write report\n")
    state.picker = TaskPicker(
        settings,
        store=vault,
        index=state.index,
        collector=build_collector(settings, vault, state.index),
        ranker=_ReverseRanker(),
        prompt=FakePrompt(5),
        notifier=state.notifier,
        workspace=state.workspace,
    )
    registry.handle(state, "/open Weekly.md")

    emitted: list[str] = []
    reply = registry.handle(state, "/pick", emit=emitted.append)

    assert reply == "Saved Weekly.md with 2 embed(s)."
    assert emitted == ["Saving Weekly.md…"]

    tasks_text = (vault.root / "Work/tasks.md").read_text(encoding="utf-8")
    milk_id, report_id = [line.rsplit("^", 1)[1] for line in tasks_text.splitlines()]
    weekly = (vault.root / "Weekly.md").read_text(encoding="utf-8")
    assert weekly == (
        "## 🎯 Next Week's Priorities\nShip the report\n\n## Picks\n"
        f"![[Work/tasks.md#^{report_id}]]\n![[Work/tasks.md#^{milk_id}]]\n"
    )
    assert state.editor is not None and not state.editor.dirty


def test_pick_with_no_tasks_reports_outcome(state, vault) -> None:
    write_note(vault.root, "Weekly.md", "## Focus\n")
    registry.handle(state, "/open Weekly.md")

    assert registry.handle(state, "/pick") == "Pick finished: no_tasks."
    assert state.notifier.messages[-1] == "No open tasks found."
