from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from typing import Protocol

# Suspends the caller for the given number of seconds.
Sleeper = Callable[[float], Awaitable[None]]


class Clock(Protocol):
    """Monotonic clock abstraction.

    Core logic depends on this interface rather than calling real time directly.
    """

    def now(self) -> float:
        """Return monotonic seconds."""


class RealClock:
    """Production clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


async def asyncio_sleeper(seconds: float) -> None:
    """Production sleeper backed by the running event loop."""

    await asyncio.sleep(max(0.0, float(seconds)))
