# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import SimpleNamespace
from typing import Any

from task_picker.tasks.ids import collect_block_ids, split_lines


class FakeDocumentStore:
    """
    In-memory DocumentStore.

    - Paths are vault-relative keys of `docs`
    - Captures writes for assertions
    """

    def __init__(self, docs: dict[str, str] | None = None) -> None:
        self.docs: dict[str, str] = dict(docs or {})
        self.writes: list[tuple[str, str]] = []
        self.reads: list[str] = []

    def resolve(self, path: str) -> str | None:
        if path in self.docs:
            return path
        if f"{path}.md" in self.docs:
            return f"{path}.md"
        return None

    async def read(self, path: str) -> str:
        self.reads.append(path)
        return self.docs[path]

    async def write(self, path: str, text: str) -> None:
        self.writes.append((path, text))
        self.docs[path] = text

    async def list_documents(self, folder: str) -> list[str]:
        root = folder.strip("/")
        return sorted(p for p in self.docs if not root or p.startswith(root + "/"))


class FakeBlockIndex:
    """
    BlockIndex over a FakeDocumentStore.

    live=True:  every persisted id is visible immediately
    live=False: only ids listed in `known` are visible (simulates index lag)
    """

    def __init__(self, store: FakeDocumentStore, *, live: bool = True) -> None:
        self._store = store
        self.live = live
        self.known: dict[str, set[str]] = {}
        self.queries = 0

    def block_ids(self, path: str) -> set[str]:
        self.queries += 1
        if not self.live:
            return set(self.known.get(path, set()))
        text = self._store.docs.get(path)
        if text is None:
            return set()
        return collect_block_ids(split_lines(text))


@dataclass(slots=True)
class FakeNotifier:
    messages: list[str] = field(default_factory=list)

    def notify(self, message: str) -> None:
        self.messages.append(message)


class FakePrompt:
    """CountPrompt returning a fixed answer (None simulates cancel)."""

    def __init__(self, answer: int | None = 5) -> None:
        self.answer = answer
        self.asked: list[int] = []

    async def ask_count(self, initial: int) -> int | None:
        self.asked.append(initial)
        return self.answer


class FakeRanker:
    """Deterministic TaskRanker capturing its inputs."""

    def __init__(self, ranked_ids: list[str] | None = None, error: Exception | None = None) -> None:
        self.ranked_ids = list(ranked_ids or [])
        self.error = error
        self.calls: list[tuple[str, list[Any], int]] = []

    async def rank(self, priorities_text: str, tasks: list[Any], max_count: int) -> list[str]:
        self.calls.append((priorities_text, list(tasks), max_count))
        if self.error is not None:
            raise self.error
        return self.ranked_ids[:max_count]


class FakeWorkspace:
    def __init__(self, active: str | None = None) -> None:
        self.active = active

    def active_document(self) -> str | None:
        return self.active


class FakeCompletions:
    """Stands in for AsyncOpenAI().chat.completions."""

    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeChatClient:
    def __init__(self, content: str | None = None, error: Exception | None = None) -> None:
        self.completions = FakeCompletions(content=content, error=error)
        self.chat = SimpleNamespace(completions=self.completions)


def record(path: str, line_number: int | None, description: str, **extra: Any) -> dict[str, Any]:
    """A task-index record in the plain-dict shape."""
    out: dict[str, Any] = {"path": path, "description": description, "status": "todo"}
    if line_number is not None:
        out["line_number"] = line_number
    out.update(extra)
    return out


def write_note(root: Path, path: str, text: str) -> None:
    target = root / path
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(text, encoding="utf-8")
