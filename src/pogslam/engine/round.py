from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Sequence

from .flip import count_face_up, resolve
from .types import SIDE_A, SIDE_B, KeptToken, Striker, Token


@dataclass
class RoundState:
    stack: list[Token]
    striker: Striker
    initial_count_per_side: int
    tallies: list[int] = field(default_factory=lambda: [0, 0])
    active_side: int = SIDE_A
    is_round_over: bool = False

    @property
    def wager_size(self) -> int:
        return 2 * self.initial_count_per_side

    def tokens_accounted(self) -> int:
        # stack + tallies must always equal the wager size
        return len(self.stack) + sum(self.tallies)


@dataclass(frozen=True)
class ThrowResult:
    flipped_count: int = 0
    round_ended: bool = False
    side: int | None = None
    wagered: tuple[Token, ...] = ()

    @property
    def ok(self) -> bool:
        return self.side is not None


NO_THROW = ThrowResult()


@dataclass(frozen=True)
class RoundOutcome:
    winner: int | None  # None on a tie
    tallies: tuple[int, int]
    awarded: tuple[KeptToken, ...]

    @property
    def is_tie(self) -> bool:
        return self.winner is None


class RoundEngine:
    """Owns the wagered stack and per-round tallies of the current round."""

    def __init__(self, rng: random.Random) -> None:
        self.rng = rng
        self.state: RoundState | None = None

    def begin_round(self, initial_count_per_side: int, striker: Striker) -> RoundState:
        if initial_count_per_side < 1:
            raise ValueError(f"initial_count_per_side must be at least 1, got {initial_count_per_side}")
        stack = [Token() for _ in range(2 * initial_count_per_side)]
        self.state = RoundState(
            stack=stack,
            striker=striker,
            initial_count_per_side=initial_count_per_side,
        )
        return self.state

    def throw(self, probability: float) -> ThrowResult:
        state = self.state
        if state is None or state.is_round_over or not state.stack:
            return NO_THROW

        side = state.active_side
        wagered = tuple(state.stack)
        resolve(wagered, probability, self.rng)
        flipped = count_face_up(wagered)
        state.tallies[side] += flipped

        remaining = [t for t in wagered if not t.is_face_up]
        self.rng.shuffle(remaining)
        state.stack = remaining

        if not remaining:
            state.is_round_over = True
            return ThrowResult(flipped_count=flipped, round_ended=True, side=side, wagered=wagered)
        return ThrowResult(flipped_count=flipped, round_ended=False, side=side)


def adjudicate(tallies: Sequence[int], wagered: Sequence[Token]) -> RoundOutcome:
    """Decide a finished round. The winner keeps a copy of every wagered token.

    `wagered` is the stack as it stood before the throw that emptied it. On a
    tie nothing is awarded and those tokens leave play.
    """
    a, b = tallies[0], tallies[1]
    if a > b:
        winner: int | None = SIDE_A
    elif b > a:
        winner = SIDE_B
    else:
        winner = None
    awarded = tuple(t.keep() for t in wagered) if winner is not None else ()
    return RoundOutcome(winner=winner, tallies=(a, b), awarded=awarded)
