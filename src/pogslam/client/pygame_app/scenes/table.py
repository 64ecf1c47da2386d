from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from pogslam.engine.match import MatchController, Snapshot
from pogslam.engine.scheduler import FrameScheduler
from pogslam.engine.types import SIDE_A, SIDE_B, SIDE_NAMES

from ..app import GameContext
from ..scene_base import SceneTransition
from ..ui import Button, draw_text


class TableScene:
    """Renders snapshots and turns clicks/keys into engine commands."""

    def __init__(self, ctx: GameContext) -> None:
        self.ctx = ctx
        self.scheduler = FrameScheduler()
        self.game = MatchController(
            ctx.config,
            scheduler=self.scheduler,
            seed=ctx.seed,
            striker=ctx.striker,
        )
        self._log = self.game.event_log
        self._logged = len(self._log)
        self.snap: Snapshot = self.game.snapshot()
        self.game.subscribe(self._on_state_changed)

        w, h = ctx.screen.get_size()
        self.btn_main = Button(
            rect=pygame.Rect(w // 2 - 120, h - 90, 240, 56),
            text="Throw Slammer",
            on_click=self._on_main_button,
        )

    @property
    def caption(self) -> str:
        s = self.snap
        return f"Pog Slam - Round {s.round_number} ({s.rounds_won[SIDE_A]}-{s.rounds_won[SIDE_B]})"

    def _on_state_changed(self, snap: Snapshot) -> None:
        self.snap = snap
        if self.game.event_log is not self._log:
            # a new match started with a fresh log
            self._log = self.game.event_log
            self._logged = 0
        fresh = self._log[self._logged:]
        self._logged = len(self._log)
        self.ctx.telemetry.log_engine_events(fresh)

    def _on_main_button(self) -> None:
        if self.snap.is_match_over or self.snap.is_round_over:
            self.game.advance()
        else:
            self.game.throw()

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.btn_main.handle_event(event):
            return
        if event.type == pygame.KEYDOWN and event.key in (pygame.K_SPACE, pygame.K_RETURN):
            self._on_main_button()

    def update(self, dt: float) -> SceneTransition | None:
        self.scheduler.advance(dt)
        return None

    def _button_label(self) -> str:
        if self.snap.is_match_over:
            return "Start New Match"
        if self.snap.is_round_over:
            return "Start Next Round"
        return "Throw Slammer"

    def _status_line(self) -> str:
        s = self.snap
        if s.is_match_over and s.match_winner is not None:
            a, b = s.rounds_won
            return f"{SIDE_NAMES[s.match_winner]} wins the match {a} to {b}!"
        if s.is_round_over:
            a, b = s.tallies
            if s.last_round_winner is None:
                return f"It's a tie this round! ({a} vs {b})"
            return f"{SIDE_NAMES[s.last_round_winner]} wins this round! ({a} vs {b})"
        if s.phase == "awaiting_computer":
            return "Opponent is lining up a throw..."
        return f"{SIDE_NAMES[s.active_side]}'s turn."

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((14, 16, 24))
        fonts = self.ctx.assets.fonts
        s = self.snap
        w, _h = screen.get_size()

        draw_text(screen, fonts.big, f"Round {s.round_number}", (20, 16))
        draw_text(
            screen,
            fonts.small,
            f"First to {s.rounds_to_win} rounds (best of {s.best_of})",
            (20, 56),
        )
        for side, x in ((SIDE_A, 20), (SIDE_B, w - 260)):
            color = (240, 220, 120) if side == s.active_side and not s.is_round_over else (220, 220, 220)
            draw_text(screen, fonts.ui, SIDE_NAMES[side], (x, 96), color=color)
            draw_text(screen, fonts.small, f"Pogs this round: {s.tallies[side]}", (x, 126))
            draw_text(screen, fonts.small, f"Rounds won: {s.rounds_won[side]}", (x, 148))
            draw_text(screen, fonts.small, f"Collection: {s.collection_sizes[side]}", (x, 170))

        self._draw_stack(screen, s)
        draw_text(screen, fonts.ui, self._status_line(), (20, 420), color=(200, 220, 255))

        self.btn_main.text = self._button_label()
        self.btn_main.enabled = s.is_round_over or s.is_match_over or s.phase == "awaiting_human"
        self.btn_main.draw(screen, fonts.ui)

    def _draw_stack(self, screen: pygame.Surface, s: Snapshot) -> None:
        cx = screen.get_width() // 2
        base_y = 360
        live = not (s.is_round_over or s.is_match_over)
        face = (70, 140, 220) if live else (90, 90, 90)
        for i in range(s.stack_size):
            rect = pygame.Rect(cx - 60, base_y - i * 12, 120, 28)
            pygame.draw.ellipse(screen, face, rect)
            pygame.draw.ellipse(screen, (0, 0, 0), rect, width=2)
        draw_text(screen, self.ctx.assets.fonts.small, f"Pog Stack ({s.stack_size})", (cx - 50, base_y + 36))
