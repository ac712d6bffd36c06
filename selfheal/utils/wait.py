from __future__ import annotations

import asyncio
import time


async def wait_until(predicate, timeout: float, interval: float = 0.2):
    """Awaits an async predicate until it returns a truthy value."""

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        result = await predicate()
        if result:
            return result
        await asyncio.sleep(interval)
    return await predicate()
