from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

import pygame  # type: ignore[import-not-found]


@dataclass
class SceneTransition:
    next_scene: "Scene"


class Scene(Protocol):
    """A screen of the game.

    `update` receives the frame delta in seconds; the table scene feeds it to
    the engine's deferred scheduler so the opponent's throw lands on time.
    `caption` is mirrored into the window title whenever it changes.
    """

    @property
    def caption(self) -> str: ...

    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self, dt: float) -> SceneTransition | None: ...
    def render(self, screen: pygame.Surface) -> None: ...
