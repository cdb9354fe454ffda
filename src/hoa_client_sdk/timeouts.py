from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

from .exceptions import RequestTimeoutError

T = TypeVar("T")


async def with_timeout(awaitable: Awaitable[T], seconds: float, label: str) -> T:
    """Await ``awaitable`` for at most ``seconds``; the pending call is cancelled on expiry."""
    try:
        async with asyncio.timeout(seconds):
            return await awaitable
    except TimeoutError as exc:
        raise RequestTimeoutError(
            code="TIMEOUT",
            message=f"{label} timed out after {seconds:g}s",
            details={"label": label, "seconds": seconds},
            status_code=0,
        ) from exc
