from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import pygame  # type: ignore[import-not-found]

from pogslam.engine.match import MatchConfig
from pogslam.engine.types import Striker
from pogslam.paths import Paths
from pogslam.services.rules import RulesService
from pogslam.services.telemetry import TelemetryService

from .asset_manager import AssetManager
from .scene_base import Scene


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    paths: Paths
    assets: AssetManager
    rules: RulesService
    telemetry: TelemetryService
    seed: int | None = None

    # Loaded at boot
    config: Optional[MatchConfig] = None
    striker: Optional[Striker] = None


class App:
    def __init__(self, ctx: GameContext, initial_scene: Scene) -> None:
        self.ctx = ctx
        self.scene: Scene = initial_scene
        self.running = True
        self._caption = ""

    def _sync_caption(self) -> None:
        caption = self.scene.caption
        if caption != self._caption:
            pygame.display.set_caption(caption)
            self._caption = caption

    def run(self) -> int:
        while self.running:
            dt = self.ctx.clock.tick(60) / 1000.0
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.running = False
                    break
                self.scene.handle_event(event)

            tr = self.scene.update(dt)
            if tr is not None:
                self.scene = tr.next_scene

            self._sync_caption()
            self.scene.render(self.ctx.screen)
            pygame.display.flip()

        pygame.quit()
        return 0
