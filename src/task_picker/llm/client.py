# src/task_picker/llm/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI

from ..core.errors import ConfigurationError, RankingServiceError

logger = logging.getLogger(__name__)

_MISSING_KEY_MESSAGE = "OpenAI API key is not set."


def _is_auth_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        return True
    return exc.__class__.__name__ in {"UnauthorizedError"}


def _is_rate_limit_error(exc: Exception) -> bool:
    if isinstance(exc, openai.RateLimitError):
        return True
    return exc.__class__.__name__ in {"TooManyRequestsError"}


def _is_connection_error(exc: Exception) -> bool:
    if isinstance(exc, (openai.APIConnectionError, httpx.TimeoutException)):
        return True
    return exc.__class__.__name__ in {"Timeout", "ConnectTimeout", "ReadTimeout", "WriteTimeout"}


def make_timeout(settings: Any) -> httpx.Timeout:
    connect_s = float(getattr(settings, "connect_timeout", 5.0))
    read_s = float(getattr(settings, "read_timeout", 60.0))
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


def require_api_key(settings: Any) -> str:
    api_key = getattr(settings, "openai_api_key", None)
    if not api_key or not str(api_key).strip():
        raise ConfigurationError(_MISSING_KEY_MESSAGE)
    return str(api_key).strip()


def create_client(settings: Any) -> AsyncOpenAI:
    """
    Build the OpenAI-compatible async client.

    Automatic retries are disabled: a run either gets an answer or fails once.
    """
    api_key = require_api_key(settings)
    base_url = str(getattr(settings, "openai_base_url", "") or "").strip()
    if not base_url:
        raise ConfigurationError("OpenAI base URL is not set. Set TASK_PICKER_OPENAI_BASE_URL in your .env.")

    return AsyncOpenAI(
        base_url=base_url,
        api_key=api_key,
        timeout=make_timeout(settings),
        max_retries=0,
    )


def _status_error_text(exc: openai.APIStatusError) -> str:
    try:
        text = exc.response.text.strip()
    except (AttributeError, httpx.ResponseNotRead):
        text = ""
    return text or f"OpenAI error {exc.status_code}"


def to_ranking_error(exc: Exception) -> RankingServiceError:
    """Map an SDK exception onto RankingServiceError, keeping the service's own text."""
    if _is_auth_error(exc):
        status = getattr(exc, "status_code", None)
        return RankingServiceError(
            "OpenAI authentication failed. Check your API key (TASK_PICKER_OPENAI_API_KEY).",
            status_code=status,
        )

    if isinstance(exc, openai.APIStatusError):
        if _is_rate_limit_error(exc):
            logger.info("Ranking request rate-limited (status=%s)", exc.status_code)
        return RankingServiceError(_status_error_text(exc), status_code=exc.status_code)

    if _is_connection_error(exc):
        detail = str(exc).strip()
        return RankingServiceError(f"OpenAI network/timeout error: {detail}" if detail else "OpenAI network/timeout error.")

    return RankingServiceError(str(exc).strip() or exc.__class__.__name__)


def friendly_llm_error_message(err: Exception) -> str:
    msg = str(err).strip() or "LLM error."
    if _MISSING_KEY_MESSAGE in msg:
        return "OpenAI is not configured (missing API key). Set TASK_PICKER_OPENAI_API_KEY in .env."
    return msg
