from __future__ import annotations

from dataclasses import dataclass

import pytest

from reaction_trainer.scoring import ReactionStopwatch, ScoreTracker, calc_points, is_winner


@dataclass
class FakeClock:
    t: float = 0.0

    def now(self) -> float:
        return self.t

    def advance(self, dt: float) -> None:
        self.t += float(dt)


def test_three_passes_average_latency_and_win() -> None:
    score = ScoreTracker()
    for latency in (200, 300, 400):
        score.add_success()
        score.record_latency(latency)

    assert score.average_latency_ms() == pytest.approx(300.0)
    assert score.failures == 0
    points = score.points(failure_penalty=50)
    assert points == pytest.approx(300.0)
    assert is_winner(points, threshold=450) is True


def test_failures_add_penalty_to_average() -> None:
    score = ScoreTracker()
    score.add_failure()
    score.add_failure()
    score.add_success()
    score.record_latency(100)

    points = score.points(failure_penalty=50)
    assert points == pytest.approx(200.0)
    assert is_winner(points, threshold=450) is True


def test_threshold_is_inclusive() -> None:
    assert is_winner(450.0, threshold=450) is True
    assert is_winner(450.5, threshold=450) is False


def test_zero_samples_contribute_nothing_to_points() -> None:
    score = ScoreTracker()
    assert score.average_latency_ms() is None
    assert score.points(failure_penalty=50) == 0.0

    for _ in range(10):
        score.add_failure()
    assert score.average_latency_ms() is None
    points = score.points(failure_penalty=50)
    assert points == pytest.approx(500.0)
    assert is_winner(points, threshold=450) is False


def test_calc_points_matches_tracker() -> None:
    assert calc_points(average_latency_ms=None, failures=3, failure_penalty=50) == pytest.approx(150.0)
    assert calc_points(average_latency_ms=250.0, failures=1, failure_penalty=50) == pytest.approx(300.0)


def test_clear_resets_session_state() -> None:
    score = ScoreTracker()
    score.add_failure()
    score.add_success()
    score.record_latency(120)

    score.clear()

    assert (score.failures, score.successes, score.latencies_ms) == (0, 0, [])


def test_latencies_are_returned_as_a_copy() -> None:
    score = ScoreTracker()
    score.record_latency(150)
    score.latencies_ms.append(999)
    assert score.latencies_ms == [150]


def test_stopwatch_measures_whole_milliseconds() -> None:
    clock = FakeClock(t=12.0)
    stopwatch = ReactionStopwatch(clock)

    stopwatch.record_activation()
    clock.advance(0.2)
    stopwatch.record_action()

    assert stopwatch.reaction_time_ms() == 200


def test_stopwatch_needs_both_stamps() -> None:
    clock = FakeClock()
    stopwatch = ReactionStopwatch(clock)
    assert stopwatch.reaction_time_ms() is None

    stopwatch.record_action()
    assert stopwatch.reaction_time_ms() is None

    stopwatch.record_activation()
    stopwatch.reset()
    assert stopwatch.activation_s is None
    assert stopwatch.action_s is None
