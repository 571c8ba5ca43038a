"""Pygame UI shell for the Reaction Trainer.

The screen draws the square and the circle and forwards key presses to the
GameController. Timing, randomness and scoring live in the core modules; the
frame loop runs as a coroutine so the controller's iteration tasks share its
event loop.
"""

from __future__ import annotations

import asyncio
import random
from collections.abc import Callable
from typing import Protocol

import pygame

from .clock import RealClock
from .elements import ElementId
from .game import GameMode, ReactionTestConfig, bind_controls, build_reaction_test
from .results import ResultBoard

WINDOW_SIZE = (960, 540)
TARGET_FPS = 60

ENTER_KEYS = (pygame.K_RETURN, pygame.K_KP_ENTER, pygame.K_SPACE)


class Screen(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def render(self, surface: pygame.Surface) -> None: ...


class App:
    def __init__(self, surface: pygame.Surface) -> None:
        self._surface = surface
        self._screens: list[Screen] = []
        self._running = True

    @property
    def running(self) -> bool:
        return self._running

    def push(self, screen: Screen) -> None:
        self._screens.append(screen)

    def quit(self) -> None:
        self._running = False

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.QUIT:
            self.quit()
            return
        if not self._screens:
            return
        self._screens[-1].handle_event(event)

    def render(self) -> None:
        if not self._screens:
            return
        self._screens[-1].render(self._surface)


class ReactionTestScreen:
    """Renderer and control panel for one GameController."""

    def __init__(self, app: App, *, board: ResultBoard) -> None:
        self._app = app
        self._board = board
        self._visible = {element: True for element in ElementId}
        self._active = {element: False for element in ElementId}
        self._running = False
        self._mode_label = GameMode.UNIFORM.value

        self._start_cb: Callable[[], object] | None = None
        self._enter_cb: Callable[[], object] | None = None
        self._stop_cb: Callable[[], object] | None = None
        self._mode_cb: Callable[[GameMode], object] | None = None

        self._title_font = pygame.font.Font(None, 42)
        self._hint_font = pygame.font.Font(None, 22)
        self._result_font = pygame.font.Font(None, 24)

    # Renderer

    def show(self, element: ElementId) -> None:
        self._visible[element] = True

    def hide(self, element: ElementId) -> None:
        self._visible[element] = False

    def set_active(self, element: ElementId, active: bool) -> None:
        self._active[element] = bool(active)

    # Control panel

    def on_start(self, callback: Callable[[], object]) -> None:
        self._start_cb = callback

    def on_enter(self, callback: Callable[[], object]) -> None:
        self._enter_cb = callback

    def on_stop(self, callback: Callable[[], object]) -> None:
        self._stop_cb = callback

    def on_mode_change(self, callback: Callable[[GameMode], object]) -> None:
        self._mode_cb = callback

    def set_running(self, running: bool) -> None:
        self._running = bool(running)

    def set_mode_label(self, label: str) -> None:
        self._mode_label = str(label)

    # Events

    def handle_event(self, event: pygame.event.Event) -> None:
        if event.type == pygame.KEYDOWN:
            self._handle_key(event.key)
            return

        if event.type == pygame.JOYBUTTONDOWN:
            # Common mapping: 0 = enter, 1 = stop.
            if event.button == 0:
                self._enter()
            elif event.button == 1:
                self._stop_or_quit()

    def _handle_key(self, key: int) -> None:
        if key in ENTER_KEYS:
            self._enter()
        elif key == pygame.K_s:
            if not self._running and self._start_cb is not None:
                self._start_cb()
        elif key == pygame.K_m:
            # Mode toggle is disabled while a session runs.
            if not self._running and self._mode_cb is not None:
                self._mode_cb(GameMode(self._mode_label).toggled())
        elif key in (pygame.K_ESCAPE, pygame.K_BACKSPACE):
            self._stop_or_quit()

    def _enter(self) -> None:
        if self._running and self._enter_cb is not None:
            self._enter_cb()

    def _stop_or_quit(self) -> None:
        if self._running and self._stop_cb is not None:
            self._stop_cb()
        else:
            self._app.quit()

    def render(self, surface: pygame.Surface) -> None:
        w, h = surface.get_size()
        bg = (3, 9, 78)
        border = (226, 236, 255)
        text_main = (238, 245, 255)
        text_muted = (186, 200, 224)
        lit = (70, 214, 120)
        unlit = (120, 132, 157)

        surface.fill(bg)

        status = "RUNNING" if self._running else "IDLE"
        title = self._title_font.render(f"Reaction Test  [{self._mode_label}]  {status}", True, text_main)
        surface.blit(title, title.get_rect(midtop=(w // 2, 18)))

        size = max(60, min(160, h // 4))
        cy = h // 2 - size // 4
        square = pygame.Rect(0, 0, size, size)
        square.center = (w // 3, cy)
        if self._visible[ElementId.SQUARE]:
            color = lit if self._active[ElementId.SQUARE] else unlit
            pygame.draw.rect(surface, color, square)
            pygame.draw.rect(surface, border, square, 2)

        if self._visible[ElementId.CIRCLE]:
            color = lit if self._active[ElementId.CIRCLE] else unlit
            center = ((w * 2) // 3, cy)
            pygame.draw.circle(surface, color, center, size // 2)
            pygame.draw.circle(surface, border, center, size // 2, 2)

        record = self._board.latest
        if not self._running and record is not None:
            lines = [f"{key}: {value}" for key, value in record.to_dict().items()]
            y = max(cy + size // 2 + 12, h - 40 - 18 * len(lines))
            for line in lines:
                text = self._result_font.render(line, True, text_main)
                surface.blit(text, (24, y))
                y += 18

        footer = "S: Start  |  Enter/Space: React  |  M: Mode  |  Esc: Stop/Quit"
        foot = self._hint_font.render(footer, True, text_muted)
        surface.blit(foot, foot.get_rect(midbottom=(w // 2, h - 10)))


def _new_seed() -> int:
    return random.SystemRandom().randint(1, 2**31 - 1)


async def run_async(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    seed: int | None = None,
    config: ReactionTestConfig | None = None,
    board: ResultBoard | None = None,
) -> int:
    pygame.init()

    pygame.display.set_caption("Reaction Trainer")
    surface = pygame.display.set_mode(WINDOW_SIZE, pygame.RESIZABLE)

    app = App(surface=surface)
    board = ResultBoard() if board is None else board
    screen = ReactionTestScreen(app, board=board)
    controller = build_reaction_test(
        renderer=screen,
        sink=board,
        clock=RealClock(),
        seed=_new_seed() if seed is None else seed,
        config=config,
    )
    bind_controls(controller, screen)
    app.push(screen)

    frame = 0
    try:
        while app.running:
            if event_injector is not None:
                event_injector(frame)

            for event in pygame.event.get():
                app.handle_event(event)

            app.render()

            pygame.display.flip()

            frame += 1
            if max_frames is not None and frame >= max_frames:
                break

            # Yield to the controller's timers instead of blocking in Clock.tick().
            await asyncio.sleep(1.0 / TARGET_FPS)
    finally:
        controller.stop()
        pygame.quit()

    return 0


def run(
    *,
    max_frames: int | None = None,
    event_injector: Callable[[int], None] | None = None,
    seed: int | None = None,
    config: ReactionTestConfig | None = None,
    board: ResultBoard | None = None,
) -> int:
    return asyncio.run(
        run_async(max_frames=max_frames, event_injector=event_injector, seed=seed, config=config, board=board)
    )
