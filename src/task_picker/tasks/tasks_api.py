# src/task_picker/tasks/tasks_api.py

"""
Adapter over the task-indexing service.

Different service versions expose their task list through different shapes.
We probe the known shapes in a fixed order and return one canonical
capability (get_all_tasks). Unknown shapes are an error, not an empty list.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from ..core.errors import CollaboratorIncompatibleError

logger = logging.getLogger(__name__)

TASKS_PLUGIN_ID = "obsidian-tasks-plugin"


@dataclass(slots=True, frozen=True)
class ResolvedTasksApi:
    get_all_tasks: Callable[[], Any]
    shape: str


def find_tasks_plugin(plugins: Mapping[str, Any] | None) -> Any | None:
    """Pick the task-indexing plugin from an id -> plugin mapping."""
    if not plugins:
        return None

    if plugins.get(TASKS_PLUGIN_ID) is not None:
        return plugins[TASKS_PLUGIN_ID]

    for plugin in plugins.values():
        manifest = getattr(plugin, "manifest", None)
        if isinstance(manifest, Mapping):
            plugin_id = str(manifest.get("id") or "").lower()
            plugin_name = str(manifest.get("name") or "").lower()
        else:
            plugin_id = str(getattr(manifest, "id", "") or "").lower()
            plugin_name = str(getattr(manifest, "name", "") or "").lower()
        if "tasks" in plugin_id or "tasks" in plugin_name:
            return plugin

    return None


def _has_get_tasks(obj: Any) -> bool:
    return obj is not None and callable(getattr(obj, "get_tasks", None))


def resolve_tasks_api(plugin: Any) -> ResolvedTasksApi | None:
    if plugin is None:
        return None

    direct_api = getattr(plugin, "api", None)
    if _has_get_tasks(direct_api):
        return ResolvedTasksApi(get_all_tasks=direct_api.get_tasks, shape="api")

    get_api = getattr(plugin, "get_api", None)
    if callable(get_api):
        factory_api = get_api()
        if _has_get_tasks(factory_api):
            return ResolvedTasksApi(get_all_tasks=factory_api.get_tasks, shape="get_api")

    legacy_api = (
        getattr(direct_api, "v1", None)
        or getattr(plugin, "v1", None)
        or getattr(plugin, "api_v1", None)
    )
    if legacy_api is not None:
        legacy_tasks = getattr(legacy_api, "tasks", None)
        if _has_get_tasks(legacy_tasks):
            return ResolvedTasksApi(get_all_tasks=legacy_tasks.get_tasks, shape="v1.tasks")
        if _has_get_tasks(legacy_api):
            return ResolvedTasksApi(get_all_tasks=legacy_api.get_tasks, shape="v1")

    if _has_get_tasks(plugin):
        return ResolvedTasksApi(get_all_tasks=plugin.get_tasks, shape="plugin")

    logger.warning("No known tasks API shape found on %s", type(plugin).__name__)
    return None


def require_tasks_api(plugin: Any) -> ResolvedTasksApi:
    api = resolve_tasks_api(plugin)
    if api is None:
        raise CollaboratorIncompatibleError("Tasks plugin missing or incompatible.")
    logger.debug("Tasks API resolved via shape=%s", api.shape)
    return api


async def fetch_all_tasks(api: ResolvedTasksApi) -> list[Any]:
    """Call get_all_tasks (sync or async); anything that is not a list yields []."""
    result = api.get_all_tasks()
    if inspect.isawaitable(result):
        result = await result
    if isinstance(result, (list, tuple)):
        return list(result)
    logger.warning("Tasks API returned %s instead of a list; treating as empty", type(result).__name__)
    return []
