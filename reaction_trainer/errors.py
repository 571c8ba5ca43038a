from __future__ import annotations


class ReactionTrainerError(Exception):
    """Base class for reaction trainer errors."""


class StaleIterationError(ReactionTrainerError):
    """A sleep woke up after its iteration was superseded."""

    def __init__(self, token: int, iteration_id: int) -> None:
        self.token = token
        self.iteration_id = iteration_id
        super().__init__(f"Sleep from generation {token} is stale (iteration is now {iteration_id})")
