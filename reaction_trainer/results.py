from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from typing import Protocol

from .scoring import ScoreTracker, is_winner


@dataclass(frozen=True, slots=True)
class ResultRecord:
    """Published summary of a finished session.

    ``average_latency_ms`` is None when no pass was ever recorded; the points
    then carry only the failure penalty.
    """

    failures: int
    successes: int
    iterations: int
    latencies_ms: tuple[int, ...]
    points: float
    winner: bool
    average_latency_ms: float | None = None
    mode: str = "UNI"

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["latencies_ms"] = list(self.latencies_ms)
        return data


class ResultSink(Protocol):
    def publish(self, record: ResultRecord) -> None: ...


class ResultBoard:
    """Keeps published records and renders the latest one as JSON."""

    def __init__(self) -> None:
        self._records: list[ResultRecord] = []

    @property
    def latest(self) -> ResultRecord | None:
        return self._records[-1] if self._records else None

    def records(self) -> list[ResultRecord]:
        return list(self._records)

    def publish(self, record: ResultRecord) -> None:
        self._records.append(record)

    def to_json(self) -> str:
        if self.latest is None:
            return "{}"
        return json.dumps(self.latest.to_dict())


def build_result_record(
    score: ScoreTracker,
    *,
    iterations: int,
    failure_penalty: float,
    winner_threshold: float,
    mode: str,
) -> ResultRecord:
    """Build a ResultRecord from the session's score state."""

    points = score.points(failure_penalty=failure_penalty)
    return ResultRecord(
        failures=int(score.failures),
        successes=int(score.successes),
        iterations=int(iterations),
        latencies_ms=tuple(score.latencies_ms),
        points=float(points),
        winner=is_winner(points, threshold=winner_threshold),
        average_latency_ms=score.average_latency_ms(),
        mode=str(mode),
    )
