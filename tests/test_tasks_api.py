# tests/test_tasks_api.py

from __future__ import annotations

from types import SimpleNamespace

import pytest

from task_picker.core.errors import CollaboratorIncompatibleError
from task_picker.tasks.tasks_api import fetch_all_tasks, find_tasks_plugin, require_tasks_api, resolve_tasks_api


def _getter(value):
    return SimpleNamespace(get_tasks=lambda: value)


def test_find_tasks_plugin_prefers_exact_id_then_manifest() -> None:
    exact = SimpleNamespace(manifest={"id": "obsidian-tasks-plugin"})
    other = SimpleNamespace(manifest={"id": "calendar", "name": "Calendar"})
    by_name = SimpleNamespace(manifest=SimpleNamespace(id="x", name="My Tasks"))

    assert find_tasks_plugin({"calendar": other, "obsidian-tasks-plugin": exact}) is exact
    assert find_tasks_plugin({"calendar": other, "x": by_name}) is by_name
    assert find_tasks_plugin({"calendar": other}) is None
    assert find_tasks_plugin(None) is None


def test_probe_order_prefers_api_attribute() -> None:
    plugin = SimpleNamespace(
        api=_getter(["from-api"]),
        get_api=lambda: _getter(["from-factory"]),
        get_tasks=lambda: ["from-plugin"],
    )
    api = resolve_tasks_api(plugin)
    assert api is not None
    assert api.shape == "api"
    assert api.get_all_tasks() == ["from-api"]


@pytest.mark.parametrize(
    ("plugin", "shape", "expected"),
    [
        (SimpleNamespace(get_api=lambda: _getter(["f"])), "get_api", ["f"]),
        (SimpleNamespace(api=SimpleNamespace(v1=SimpleNamespace(tasks=_getter(["v"])))), "v1.tasks", ["v"]),
        (SimpleNamespace(v1=_getter(["w"])), "v1", ["w"]),
        (SimpleNamespace(api_v1=SimpleNamespace(tasks=_getter(["z"]))), "v1.tasks", ["z"]),
        (SimpleNamespace(get_tasks=lambda: ["p"]), "plugin", ["p"]),
    ],
)
def test_each_known_shape_resolves(plugin, shape, expected) -> None:
    api = resolve_tasks_api(plugin)
    assert api is not None
    assert api.shape == shape
    assert api.get_all_tasks() == expected


def test_unknown_shape_is_an_error_not_an_empty_list() -> None:
    assert resolve_tasks_api(SimpleNamespace(api=SimpleNamespace())) is None

    with pytest.raises(CollaboratorIncompatibleError, match="Tasks plugin missing or incompatible."):
        require_tasks_api(SimpleNamespace())
    with pytest.raises(CollaboratorIncompatibleError):
        require_tasks_api(None)


@pytest.mark.asyncio
async def test_fetch_all_tasks_accepts_sync_and_async_results() -> None:
    async def get_tasks():
        return [{"path": "a.md"}]

    async_api = require_tasks_api(SimpleNamespace(get_tasks=get_tasks))
    sync_api = require_tasks_api(SimpleNamespace(get_tasks=lambda: ({"path": "b.md"},)))
    odd_api = require_tasks_api(SimpleNamespace(get_tasks=lambda: {"path": "c.md"}))

    assert await fetch_all_tasks(async_api) == [{"path": "a.md"}]
    assert await fetch_all_tasks(sync_api) == [{"path": "b.md"}]
    assert await fetch_all_tasks(odd_api) == []
