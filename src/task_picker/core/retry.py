# src/task_picker/core/retry.py

from __future__ import annotations

import asyncio
import inspect
import time
from collections.abc import Awaitable, Callable

Check = Callable[[], bool | Awaitable[bool]]


async def wait_until(
        check: Check,
        *,
        interval_seconds: float = 0.1,
        timeout_seconds: float = 2.0,
) -> bool:
    """
    Poll `check` until it returns True or the deadline passes.

    The check runs at least once, even with a zero timeout.
    Returns False on timeout; never raises for it.
    """
    sleep_s = max(0.0, float(interval_seconds))
    deadline = time.monotonic() + max(0.0, float(timeout_seconds))

    while True:
        result = check()
        if inspect.isawaitable(result):
            result = await result
        if result:
            return True
        if time.monotonic() >= deadline:
            return False
        await asyncio.sleep(sleep_s)
