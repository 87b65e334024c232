# src/task_picker/llm/ranker.py

"""
Ranking adapter.

Sends priorities + open tasks to a chat-completions endpoint and reads back
{"ranked_task_ids": [...]}. The result is truncated and stringified but not
checked against the known ids: the orchestrator drops unknown ids, so a
confused response can only lose entries, never act on an unknown task.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import openai
from openai import AsyncOpenAI

from ..config import DEFAULT_MODEL, DEFAULT_RANKING_PROMPT
from ..tasks.models import TaskItem
from .client import create_client, require_api_key, to_ranking_error

logger = logging.getLogger(__name__)

_FENCE_START_RE = re.compile(r"^\s*```(?:json)?", re.IGNORECASE)
_FENCE_END_RE = re.compile(r"```\s*$")


def build_messages(system_prompt: str, priorities_text: str, tasks: list[TaskItem], max_count: int) -> list[dict[str, str]]:
    payload = {
        "priorities_text": priorities_text or "",
        "tasks": [t.to_payload() for t in tasks],
        "max_tasks": max_count,
    }
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": json.dumps(payload, ensure_ascii=False)},
    ]


def _loads_object(raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        stripped = _FENCE_END_RE.sub("", _FENCE_START_RE.sub("", raw)).strip()
        try:
            return json.loads(stripped)
        except ValueError:
            logger.warning("Ranking response is not JSON; treating as empty (len=%d)", len(raw))
            return None


def parse_ranked_ids(content: str | None, max_count: int) -> list[str]:
    """Read ranked_task_ids from a model reply; malformed replies yield []."""
    limit = max(0, int(max_count))
    parsed = _loads_object(content or "")
    if not isinstance(parsed, dict):
        return []

    ranked = parsed.get("ranked_task_ids")
    if not isinstance(ranked, list):
        logger.warning("Ranking response has no ranked_task_ids list")
        return []

    return [str(task_id) for task_id in ranked][:limit]


def _response_content(response: Any) -> str:
    try:
        content = response.choices[0].message.content
    except (AttributeError, IndexError, TypeError):
        return ""
    return content or ""


class OpenAIRanker:
    """TaskRanker over an OpenAI-compatible chat completions API."""

    def __init__(self, settings: Any, client: AsyncOpenAI | None = None) -> None:
        self._settings = settings
        self._client = client

    @property
    def model(self) -> str:
        return str(getattr(self._settings, "model", "") or "").strip() or DEFAULT_MODEL

    @property
    def system_prompt(self) -> str:
        return str(getattr(self._settings, "ranking_prompt", "") or "").strip() or DEFAULT_RANKING_PROMPT

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = create_client(self._settings)
        return self._client

    async def rank(self, priorities_text: str, tasks: list[TaskItem], max_count: int) -> list[str]:
        # Fail fast: no network call without a credential.
        require_api_key(self._settings)
        client = self._get_client()

        messages = build_messages(self.system_prompt, priorities_text, tasks, max_count)
        logger.info("Ranking %d task(s) with model=%s (max=%d)", len(tasks), self.model, max_count)

        try:
            response = await client.chat.completions.create(
                model=self.model,
                response_format={"type": "json_object"},
                messages=messages,
            )
        except openai.OpenAIError as e:
            raise to_ranking_error(e) from e

        ranked = parse_ranked_ids(_response_content(response), max_count)
        logger.info("Ranking returned %d id(s)", len(ranked))
        return ranked
