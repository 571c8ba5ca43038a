from __future__ import annotations

import os

from reaction_trainer.game import ReactionTestConfig
from reaction_trainer.results import ResultBoard


def test_ui_smoke_toggle_mode_start_react_and_stop() -> None:
    # Headless SDL for CI.
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

    import pygame

    from reaction_trainer.app import run

    def key(k: int) -> None:
        pygame.event.post(pygame.event.Event(pygame.KEYDOWN, {"key": k, "unicode": ""}))

    def inject(frame: int) -> None:
        # Mode -> start -> react twice -> stop -> quit
        if frame == 1:
            key(pygame.K_m)
        elif frame == 2:
            key(pygame.K_s)
        elif frame == 4:
            key(pygame.K_RETURN)
        elif frame == 8:
            key(pygame.K_SPACE)
        elif frame == 12:
            key(pygame.K_ESCAPE)
        elif frame == 14:
            key(pygame.K_ESCAPE)

    config = ReactionTestConfig(show_delay_ms=20, activate_delay_ms=20, hide_delay_ms=40)
    board = ResultBoard()
    assert run(max_frames=40, event_injector=inject, seed=11, config=config, board=board) == 0

    # Esc published exactly one record for the session started with S after M.
    assert len(board.records()) == 1
    record = board.records()[0]
    assert record.mode == "CROSS"
    assert record.failures >= 1
    assert record.iterations >= 1
