from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Callable

from .round import NO_THROW, RoundEngine, RoundOutcome, RoundState, ThrowResult, adjudicate
from .scheduler import DeferredScheduler, FrameScheduler, TurnScheduler
from .types import SIDE_A, SIDE_B, KeptToken, Striker, TurnPhase, default_striker

Event = dict[str, object]
Listener = Callable[["Snapshot"], None]


class MatchConfigError(ValueError):
    pass


@dataclass(frozen=True)
class MatchConfig:
    initial_count_per_side: int = 5
    rounds_to_win: int = 3
    human_probability: float = 0.5
    computer_probability: float = 0.45
    computer_delay: float = 1.5
    auto_advance: bool = False

    def probability_for(self, side: int) -> float:
        return self.human_probability if side == SIDE_A else self.computer_probability

    def validate(self) -> None:
        if self.initial_count_per_side < 1:
            raise MatchConfigError(
                f"initial_count_per_side must be at least 1, got {self.initial_count_per_side}"
            )
        if self.rounds_to_win < 1:
            raise MatchConfigError(f"rounds_to_win must be at least 1, got {self.rounds_to_win}")
        for name in ("human_probability", "computer_probability"):
            p = getattr(self, name)
            if not 0.0 <= p <= 1.0:
                raise MatchConfigError(f"{name} must be within [0, 1], got {p}")
        if self.computer_delay < 0:
            raise MatchConfigError(f"computer_delay must not be negative, got {self.computer_delay}")


@dataclass(frozen=True)
class MatchOutcome:
    winner: int
    rounds_won: tuple[int, int]
    collection_sizes: tuple[int, int]


@dataclass(frozen=True)
class Snapshot:
    stack_size: int
    tallies: tuple[int, int]
    rounds_won: tuple[int, int]
    collection_sizes: tuple[int, int]
    active_side: int
    phase: TurnPhase
    is_round_over: bool
    is_match_over: bool
    round_number: int
    rounds_to_win: int
    last_round_winner: int | None = None
    match_winner: int | None = None

    @property
    def best_of(self) -> int:
        return self.rounds_to_win * 2 - 1


@dataclass
class MatchState:
    rounds_to_win: int
    rounds_won: list[int] = field(default_factory=lambda: [0, 0])
    collections: list[list[KeptToken]] = field(default_factory=lambda: [[], []])
    is_match_over: bool = False
    round_number: int = 0
    last_round: RoundOutcome | None = None
    outcome: MatchOutcome | None = None
    event_log: list[Event] = field(default_factory=list)


class MatchController:
    """Command/query surface of the game.

    Commands (`throw`, `advance`) that arrive in a state where they do not
    apply are ignored; the only hard failures are configuration errors raised
    when a match starts.
    """

    def __init__(
        self,
        config: MatchConfig | None = None,
        *,
        scheduler: DeferredScheduler | None = None,
        seed: int | None = None,
        striker: Striker | None = None,
    ) -> None:
        self.config = config or MatchConfig()
        self.scheduler = scheduler if scheduler is not None else FrameScheduler()
        self.seed = seed
        self.rng = random.Random(seed)
        self.striker = striker or default_striker()
        self.rounds = RoundEngine(self.rng)
        self.turns = TurnScheduler(self.scheduler, computer_delay=self.config.computer_delay)
        self.generation = 0
        self._listeners: list[Listener] = []
        self.match = MatchState(rounds_to_win=self.config.rounds_to_win)
        self.start_match()

    # -- queries -----------------------------------------------------------

    @property
    def round(self) -> RoundState:
        if self.rounds.state is None:
            raise RuntimeError("No round in progress; start_match has not run")
        return self.rounds.state

    @property
    def event_log(self) -> list[Event]:
        return self.match.event_log

    @property
    def phase(self) -> TurnPhase:
        return self.turns.phase

    def snapshot(self) -> Snapshot:
        rs = self.round
        ms = self.match
        return Snapshot(
            stack_size=len(rs.stack),
            tallies=(rs.tallies[0], rs.tallies[1]),
            rounds_won=(ms.rounds_won[0], ms.rounds_won[1]),
            collection_sizes=(len(ms.collections[0]), len(ms.collections[1])),
            active_side=rs.active_side,
            phase=self.turns.phase,
            is_round_over=rs.is_round_over,
            is_match_over=ms.is_match_over,
            round_number=ms.round_number,
            rounds_to_win=ms.rounds_to_win,
            last_round_winner=ms.last_round.winner if ms.last_round is not None else None,
            match_winner=ms.outcome.winner if ms.outcome is not None else None,
        )

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _emit(self) -> None:
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            listener(snap)

    # -- commands ----------------------------------------------------------

    def start_match(self, rounds_to_win: int | None = None) -> None:
        target = self.config.rounds_to_win if rounds_to_win is None else rounds_to_win
        if rounds_to_win is not None and rounds_to_win < 1:
            raise MatchConfigError(f"rounds_to_win must be at least 1, got {rounds_to_win}")
        self.config.validate()
        try:
            self.striker.validate()
        except ValueError as e:
            raise MatchConfigError(str(e)) from e

        self.match = MatchState(rounds_to_win=target)
        self.event_log.append({"type": "MATCH_STARTED", "rounds_to_win": target})
        self._begin_round()
        self._emit()

    def replace_striker(self, striker: Striker) -> None:
        """Swap the striker; it is used from the next round on."""
        try:
            striker.validate()
        except ValueError as e:
            raise MatchConfigError(str(e)) from e
        self.striker = striker

    def throw(self) -> ThrowResult:
        """Human throw. Ignored unless it is the human's turn in a live round."""
        if self.match.is_match_over or self.round.is_round_over:
            return NO_THROW
        if self.turns.phase != "awaiting_human":
            return NO_THROW
        result = self._throw(self.round.active_side)
        self._emit()
        return result

    def advance(self) -> None:
        if self.match.is_match_over:
            self.start_match(self.match.rounds_to_win)
            return
        if not self.round.is_round_over:
            return
        self._begin_round()
        self._emit()

    def on_round_adjudicated(self, outcome: RoundOutcome) -> None:
        ms = self.match
        ms.last_round = outcome
        self.event_log.append(
            {
                "type": "ROUND_ENDED",
                "round": ms.round_number,
                "winner": outcome.winner,
                "tallies": list(outcome.tallies),
                "awarded": len(outcome.awarded),
            }
        )
        if outcome.winner is not None:
            ms.collections[outcome.winner].extend(outcome.awarded)
            ms.rounds_won[outcome.winner] += 1

        for side in (SIDE_A, SIDE_B):
            if ms.rounds_won[side] >= ms.rounds_to_win:
                ms.is_match_over = True
                ms.outcome = MatchOutcome(
                    winner=side,
                    rounds_won=(ms.rounds_won[0], ms.rounds_won[1]),
                    collection_sizes=(len(ms.collections[0]), len(ms.collections[1])),
                )
                self.event_log.append(
                    {
                        "type": "MATCH_ENDED",
                        "winner": side,
                        "rounds_won": list(ms.outcome.rounds_won),
                        "collection_sizes": list(ms.outcome.collection_sizes),
                    }
                )
                return

        if self.config.auto_advance:
            self._begin_round()

    # -- internals ---------------------------------------------------------

    def _begin_round(self) -> None:
        # Any deferred computer throw still queued now belongs to a dead round.
        self.generation += 1
        self.match.round_number += 1
        self.rounds.begin_round(self.config.initial_count_per_side, self.striker)
        self.turns.reset()
        self.event_log.append(
            {
                "type": "ROUND_STARTED",
                "round": self.match.round_number,
                "stack": len(self.round.stack),
                "striker": self.striker.id,
            }
        )

    def _throw(self, side: int) -> ThrowResult:
        result = self.rounds.throw(self.config.probability_for(side))
        if not result.ok:
            return result
        self.event_log.append(
            {"type": "THROW", "side": side, "flipped": result.flipped_count, "stack": len(self.round.stack)}
        )
        if result.round_ended:
            self.turns.end_round()
            self.on_round_adjudicated(adjudicate(self.round.tallies, result.wagered))
        else:
            self.turns.pass_turn(self.round, self.generation, self._computer_throw)
            self.event_log.append({"type": "TURN_PASSED", "side": self.round.active_side})
        return result

    def _computer_throw(self, generation: int) -> None:
        if generation != self.generation or self.turns.phase != "awaiting_computer":
            return
        if self.match.is_match_over:
            return
        self._throw(self.round.active_side)
        self._emit()
