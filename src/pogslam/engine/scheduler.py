from __future__ import annotations

import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, Protocol

from .round import RoundState
from .types import SIDE_B, TurnPhase, opponent

Callback = Callable[[], None]


class DeferredScheduler(Protocol):
    def call_later(self, delay: float, callback: Callback) -> None: ...


@dataclass(order=True)
class _Pending:
    due: float
    seq: int
    callback: Callback = field(compare=False)


class FrameScheduler:
    """Single-threaded deferred-callback queue on a virtual clock.

    The owner advances time explicitly (the pygame client by its frame delta,
    tests by hand), so callbacks always run on the caller's thread.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: list[_Pending] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callback) -> None:
        heapq.heappush(self._queue, _Pending(self.now + max(0.0, delay), next(self._seq), callback))

    def pending(self) -> int:
        return len(self._queue)

    def advance(self, dt: float) -> int:
        """Move the clock forward by `dt` and fire everything now due."""
        self.now += max(0.0, dt)
        fired = 0
        while self._queue and self._queue[0].due <= self.now:
            item = heapq.heappop(self._queue)
            item.callback()
            fired += 1
        return fired


class TurnScheduler:
    def __init__(
        self,
        deferred: DeferredScheduler,
        computer_delay: float = 1.5,
        computer_side: int = SIDE_B,
    ) -> None:
        self.deferred = deferred
        self.computer_delay = computer_delay
        self.computer_side = computer_side
        self.phase: TurnPhase = "awaiting_human"

    def is_computer(self, side: int) -> bool:
        return side == self.computer_side

    def reset(self) -> None:
        self.phase = "awaiting_human"

    def pass_turn(
        self,
        state: RoundState,
        generation: int,
        computer_throw: Callable[[int], None],
    ) -> TurnPhase:
        state.active_side = opponent(state.active_side)
        if self.is_computer(state.active_side):
            self.phase = "awaiting_computer"
            self.deferred.call_later(self.computer_delay, lambda: computer_throw(generation))
        else:
            self.phase = "awaiting_human"
        return self.phase

    def end_round(self) -> None:
        self.phase = "round_over"
