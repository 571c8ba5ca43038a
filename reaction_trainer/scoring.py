from __future__ import annotations

from .clock import Clock


def calc_points(*, average_latency_ms: float | None, failures: int, failure_penalty: float) -> float:
    """Average latency plus a fixed penalty per failure.

    A session with no latency samples contributes 0 for the average.
    """

    base = 0.0 if average_latency_ms is None else float(average_latency_ms)
    return base + int(failures) * float(failure_penalty)


def is_winner(points: float, *, threshold: float) -> bool:
    return points <= threshold


class ReactionStopwatch:
    """Timestamps for element activation and the player's action."""

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._activation_s: float | None = None
        self._action_s: float | None = None

    @property
    def activation_s(self) -> float | None:
        return self._activation_s

    @property
    def action_s(self) -> float | None:
        return self._action_s

    def record_activation(self) -> None:
        self._activation_s = self._clock.now()

    def record_action(self) -> None:
        self._action_s = self._clock.now()

    def reaction_time_ms(self) -> int | None:
        if self._activation_s is None or self._action_s is None:
            return None
        return int(round(max(0.0, self._action_s - self._activation_s) * 1000.0))

    def reset(self) -> None:
        self._activation_s = None
        self._action_s = None


class ScoreTracker:
    """Pass/fail counts and latency samples for one session."""

    def __init__(self) -> None:
        self.failures = 0
        self.successes = 0
        self._latencies_ms: list[int] = []

    @property
    def latencies_ms(self) -> list[int]:
        return list(self._latencies_ms)

    def add_failure(self) -> None:
        self.failures += 1

    def add_success(self) -> None:
        self.successes += 1

    def record_latency(self, latency_ms: int) -> None:
        self._latencies_ms.append(int(latency_ms))

    def average_latency_ms(self) -> float | None:
        if not self._latencies_ms:
            return None
        return float(sum(self._latencies_ms)) / float(len(self._latencies_ms))

    def points(self, *, failure_penalty: float) -> float:
        return calc_points(
            average_latency_ms=self.average_latency_ms(),
            failures=self.failures,
            failure_penalty=failure_penalty,
        )

    def clear(self) -> None:
        self.failures = 0
        self.successes = 0
        self._latencies_ms.clear()
