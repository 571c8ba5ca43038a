from __future__ import annotations

import itertools
from dataclasses import dataclass
from enum import StrEnum

from .clock import Sleeper, asyncio_sleeper
from .errors import StaleIterationError


class IterationPhase(StrEnum):
    WAITING = "waiting"
    SHOWING = "showing"
    ACTIVE = "active"


@dataclass(frozen=True, slots=True)
class SleepResult:
    """Outcome of an iteration-scoped sleep: either ok or stale."""

    ok: bool
    token: int
    iteration_id: int

    @property
    def stale(self) -> bool:
        return not self.ok

    def unwrap(self) -> None:
        if not self.ok:
            raise StaleIterationError(self.token, self.iteration_id)


class IterationSleep:
    """Sleep primitive bound to the generation that was current when it was created."""

    def __init__(self, clock: IterationClock, token: int, sleeper: Sleeper) -> None:
        self._clock = clock
        self._token = token
        self._sleeper = sleeper

    @property
    def token(self) -> int:
        return self._token

    async def __call__(self, delay_ms: float) -> SleepResult:
        await self._sleeper(float(delay_ms) / 1000.0)
        return SleepResult(
            ok=self._clock.is_current(self._token),
            token=self._token,
            iteration_id=self._clock.id,
        )


class IterationClock:
    """Iteration identity and phase.

    ``id`` is the public counter: -1 while not running, then 0, 1, 2, ...
    Sleeps are bound to a private generation token instead, which changes on
    every ``next()`` and ``break_cycle()`` and is never reused, so a restart
    that reaches the same ``id`` again cannot revive an old sleep.
    """

    def __init__(self, *, sleeper: Sleeper = asyncio_sleeper) -> None:
        self._sleeper = sleeper
        self._generations = itertools.count()
        self._token = next(self._generations)
        self._id = -1
        self._phase = IterationPhase.WAITING

    @property
    def id(self) -> int:
        return self._id

    @property
    def phase(self) -> IterationPhase:
        return self._phase

    def next(self) -> None:
        self._id += 1
        self._phase = IterationPhase.WAITING
        self._token = next(self._generations)

    def break_cycle(self) -> None:
        self._id = -1
        self._token = next(self._generations)

    def set_waiting(self) -> None:
        self._phase = IterationPhase.WAITING

    def set_showing(self) -> None:
        self._phase = IterationPhase.SHOWING

    def set_active(self) -> None:
        self._phase = IterationPhase.ACTIVE

    def is_waiting(self) -> bool:
        return self._phase is IterationPhase.WAITING

    def is_showing(self) -> bool:
        return self._phase is IterationPhase.SHOWING

    def is_active(self) -> bool:
        return self._phase is IterationPhase.ACTIVE

    def is_current(self, token: int) -> bool:
        return token == self._token

    def create_sleep(self) -> IterationSleep:
        return IterationSleep(self, self._token, self._sleeper)
