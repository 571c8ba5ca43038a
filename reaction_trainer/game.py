from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from .clock import Clock, Sleeper, asyncio_sleeper
from .elements import ElementPair, ElementRenderer, RandomSource, SeededRng
from .errors import StaleIterationError
from .iteration import IterationClock, IterationPhase, IterationSleep
from .results import ResultRecord, ResultSink, build_result_record
from .scoring import ReactionStopwatch, ScoreTracker

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReactionTestConfig:
    show_delay_ms: float = 200.0
    activate_delay_ms: float = 500.0
    hide_delay_ms: float = 2500.0
    auto_stop_ms: float = 5.0 * 60.0 * 1000.0

    failure_penalty: float = 50.0
    winner_threshold: float = 450.0

    def __post_init__(self) -> None:
        for name in ("show_delay_ms", "activate_delay_ms", "hide_delay_ms", "auto_stop_ms"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")
        if self.failure_penalty < 0:
            raise ValueError("failure_penalty must be >= 0")


class GameMode(StrEnum):
    UNIFORM = "UNI"
    CROSS = "CROSS"

    def toggled(self) -> GameMode:
        return GameMode.CROSS if self is GameMode.UNIFORM else GameMode.UNIFORM


class Outcome(StrEnum):
    PASS = "pass"
    FAIL = "fail"


class ControlPanel(Protocol):
    """User-facing controls supplied by the host UI."""

    def on_start(self, callback: Callable[[], object]) -> None: ...
    def on_enter(self, callback: Callable[[], object]) -> None: ...
    def on_stop(self, callback: Callable[[], object]) -> None: ...
    def on_mode_change(self, callback: Callable[[GameMode], object]) -> None: ...
    def set_running(self, running: bool) -> None: ...
    def set_mode_label(self, label: str) -> None: ...


class GameController:
    """One reaction-test session: start -> iterate/enter -> stop.

    Each iteration runs as its own asyncio task. Passing, failing or stopping
    moves the IterationClock on, so whatever task was suspended in a sleep
    wakes up stale and exits without touching the new iteration.
    """

    def __init__(
        self,
        *,
        renderer: ElementRenderer,
        sink: ResultSink,
        clock: Clock,
        rng: RandomSource,
        config: ReactionTestConfig | None = None,
        sleeper: Sleeper = asyncio_sleeper,
        mode: GameMode = GameMode.UNIFORM,
    ) -> None:
        self._config = config or ReactionTestConfig()
        self._sink = sink
        self._elements = ElementPair(renderer=renderer, rng=rng)
        self._iteration = IterationClock(sleeper=sleeper)
        self._stopwatch = ReactionStopwatch(clock)
        self._score = ScoreTracker()
        self._mode = mode
        self._panel: ControlPanel | None = None

        self._running = False
        self._auto_stop: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def config(self) -> ReactionTestConfig:
        return self._config

    @property
    def running(self) -> bool:
        return self._running

    @property
    def mode(self) -> GameMode:
        return self._mode

    @property
    def phase(self) -> IterationPhase:
        return self._iteration.phase

    @property
    def iteration(self) -> IterationClock:
        return self._iteration

    @property
    def elements(self) -> ElementPair:
        return self._elements

    @property
    def score(self) -> ScoreTracker:
        return self._score

    @property
    def stopwatch(self) -> ReactionStopwatch:
        return self._stopwatch

    def attach_panel(self, panel: ControlPanel) -> None:
        self._panel = panel
        panel.set_running(self._running)
        panel.set_mode_label(self._mode.value)

    def set_mode(self, mode: GameMode) -> bool:
        # The mode is fixed for the duration of a session.
        if self._running:
            logger.debug("Mode change to %s ignored while running", mode)
            return False
        self._mode = GameMode(mode)
        if self._panel is not None:
            self._panel.set_mode_label(self._mode.value)
        return True

    def start(self) -> bool:
        if self._running:
            return False

        loop = asyncio.get_running_loop()
        self._score.clear()
        self._stopwatch.reset()
        self._iteration.set_waiting()
        self._running = True
        if self._auto_stop is not None:
            self._auto_stop.cancel()
        self._auto_stop = loop.call_later(self._config.auto_stop_ms / 1000.0, self._auto_stop_fired)
        if self._panel is not None:
            self._panel.set_running(True)
        self._elements.hide()

        logger.info("Session started (mode=%s)", self._mode.value)
        self._begin_iteration()
        return True

    def next_iteration(self, preserve_state: bool = True) -> None:
        self._elements.hide()
        self._elements.deactivate(preserve_state)
        self._stopwatch.reset()
        self._begin_iteration()

    def enter(self) -> Outcome | None:
        if not self._running:
            logger.debug("Enter ignored: no session running")
            return None

        self._stopwatch.record_action()

        # Nothing can be lit yet, so any reaction is premature.
        if self._iteration.is_waiting() or self._iteration.is_showing():
            self.fail()
            return Outcome.FAIL

        if self._elements.check_correct_sequence():
            self.pass_()
            return Outcome.PASS
        self.fail()
        return Outcome.FAIL

    def fail(self) -> None:
        self._score.add_failure()
        logger.debug("Iteration %d failed", self._iteration.id)
        self.next_iteration(preserve_state=False)

    def pass_(self) -> None:
        latency_ms = self._stopwatch.reaction_time_ms()
        self._score.add_success()
        if latency_ms is not None:
            self._score.record_latency(latency_ms)
        logger.debug("Iteration %d passed in %s ms", self._iteration.id, latency_ms)
        self.next_iteration(preserve_state=False)

    def stop(self) -> ResultRecord | None:
        if not self._running:
            return None

        self._running = False
        record = build_result_record(
            self._score,
            iterations=self._iteration.id,
            failure_penalty=self._config.failure_penalty,
            winner_threshold=self._config.winner_threshold,
            mode=self._mode.value,
        )
        self._iteration.break_cycle()
        self._stopwatch.reset()
        if self._auto_stop is not None:
            self._auto_stop.cancel()
            self._auto_stop = None

        # Session state is torn down before any collaborator can raise.
        if self._panel is not None:
            self._panel.set_running(False)
        self._elements.deactivate(False)
        self._elements.show()
        self._sink.publish(record)

        logger.info(
            "Session stopped: %d passes, %d failures, %.1f points",
            record.successes,
            record.failures,
            record.points,
        )
        return record

    async def wait_idle(self) -> None:
        """Wait for every iteration task that is currently in flight."""

        pending = list(self._tasks)
        if pending:
            await asyncio.gather(*pending)

    def _auto_stop_fired(self) -> None:
        self._auto_stop = None
        logger.info("Auto-stop ceiling of %.0f ms reached", self._config.auto_stop_ms)
        self.stop()

    def _begin_iteration(self) -> None:
        self._iteration.next()
        sleep = self._iteration.create_sleep()
        task = asyncio.get_running_loop().create_task(self._iterate(sleep))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _iterate(self, sleep: IterationSleep) -> None:
        try:
            (await sleep(self._config.show_delay_ms)).unwrap()
            self._show_elements()
            (await sleep(self._config.activate_delay_ms)).unwrap()
            self._activate_elements()
            (await sleep(self._config.hide_delay_ms)).unwrap()
            self._hide_elements()
        except StaleIterationError as exc:
            logger.debug("Abandoned iteration: %s", exc)
        except Exception:
            logger.exception("Iteration %d failed unexpectedly, stopping session", self._iteration.id)
            self.stop()

    def _show_elements(self) -> None:
        self._elements.show()
        self._iteration.set_showing()

    def _activate_elements(self) -> None:
        self._elements.activate()
        self._iteration.set_active()
        self._stopwatch.record_activation()

    def _hide_elements(self) -> None:
        # An unanswered correct sequence counts as a miss.
        if self._elements.check_correct_sequence():
            self.fail()
        else:
            self.next_iteration()


def bind_controls(controller: GameController, panel: ControlPanel) -> None:
    """Route the panel's user actions into the controller."""

    panel.on_start(controller.start)
    panel.on_enter(controller.enter)
    panel.on_stop(controller.stop)
    panel.on_mode_change(controller.set_mode)
    controller.attach_panel(panel)


def build_reaction_test(
    *,
    renderer: ElementRenderer,
    sink: ResultSink,
    clock: Clock,
    seed: int,
    config: ReactionTestConfig | None = None,
    sleeper: Sleeper = asyncio_sleeper,
    mode: GameMode = GameMode.UNIFORM,
) -> GameController:
    return GameController(
        renderer=renderer,
        sink=sink,
        clock=clock,
        rng=SeededRng(seed),
        config=config,
        sleeper=sleeper,
        mode=mode,
    )
