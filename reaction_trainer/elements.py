from __future__ import annotations

import random
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol


class ElementState(StrEnum):
    ACTIVE = "active"
    STATIC = "static"


class ElementId(StrEnum):
    SQUARE = "square"
    CIRCLE = "circle"


class RandomSource(Protocol):
    def random(self) -> float: ...


class ElementRenderer(Protocol):
    """Visibility/activation primitives supplied by the host UI."""

    def show(self, element: ElementId) -> None: ...
    def hide(self, element: ElementId) -> None: ...
    def set_active(self, element: ElementId, active: bool) -> None: ...


class SeededRng:
    """Seeded RNG wrapper to keep the element state stream explicit."""

    def __init__(self, seed: int) -> None:
        self._rng = random.Random(int(seed))

    def random(self) -> float:
        return self._rng.random()


def random_element_state(rng: RandomSource) -> ElementState:
    """Draw ACTIVE or STATIC with equal probability."""

    return ElementState.ACTIVE if rng.random() < 0.5 else ElementState.STATIC


@dataclass(slots=True)
class ElementSlot:
    """State of one visual element across consecutive cycles."""

    element: ElementId
    renderer: ElementRenderer
    last_state: ElementState | None = None
    current_state: ElementState | None = None
    visible: bool = True
    activated: bool = False

    def show(self) -> None:
        self.visible = True
        self.renderer.show(self.element)

    def hide(self) -> None:
        self.visible = False
        self.renderer.hide(self.element)

    def next_state(self, rng: RandomSource) -> None:
        self.current_state = random_element_state(rng)

    def activate(self) -> None:
        # Static elements are never lit.
        if self.is_current_active():
            self.activated = True
            self.renderer.set_active(self.element, True)

    def deactivate(self, preserve_state: bool) -> None:
        self.activated = False
        self.renderer.set_active(self.element, False)
        self.last_state = self.current_state if preserve_state else None
        self.current_state = None

    def is_current_active(self) -> bool:
        return self.current_state is ElementState.ACTIVE

    def are_both_active(self) -> bool:
        return self.last_state is self.current_state and self.is_current_active()


class ElementPair:
    """The square and the circle, driven together."""

    def __init__(
        self,
        *,
        renderer: ElementRenderer,
        rng: RandomSource,
        first: ElementId = ElementId.SQUARE,
        second: ElementId = ElementId.CIRCLE,
    ) -> None:
        self._rng = rng
        self.first = ElementSlot(element=first, renderer=renderer)
        self.second = ElementSlot(element=second, renderer=renderer)

    @property
    def slots(self) -> tuple[ElementSlot, ElementSlot]:
        return (self.first, self.second)

    def reset_cycle(self) -> None:
        # One draw per slot, first slot first, from the shared stream.
        for slot in self.slots:
            slot.next_state(self._rng)

    def show(self) -> None:
        for slot in self.slots:
            slot.show()

    def hide(self) -> None:
        for slot in self.slots:
            slot.hide()

    def activate(self) -> None:
        self.reset_cycle()
        for slot in self.slots:
            slot.activate()

    def deactivate(self, preserve_state: bool) -> None:
        for slot in self.slots:
            slot.deactivate(preserve_state)

    def check_correct_sequence(self) -> bool:
        return any(slot.are_both_active() for slot in self.slots)
