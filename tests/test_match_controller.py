from __future__ import annotations

import pytest

from pogslam.engine.match import MatchConfig, MatchConfigError, MatchController, Snapshot
from pogslam.engine.round import RoundOutcome, adjudicate
from pogslam.engine.scheduler import FrameScheduler
from pogslam.engine.types import SIDE_A, SIDE_B, Striker, Token


def _game(**overrides: object) -> tuple[MatchController, FrameScheduler]:
    sched = FrameScheduler()
    cfg = MatchConfig(**overrides)  # type: ignore[arg-type]
    return MatchController(cfg, scheduler=sched, seed=1234), sched


def _a_wins() -> RoundOutcome:
    return adjudicate([6, 4], [Token() for _ in range(10)])


def _b_wins() -> RoundOutcome:
    return adjudicate([3, 7], [Token() for _ in range(10)])


def _tie() -> RoundOutcome:
    return adjudicate([5, 5], [Token() for _ in range(10)])


def test_new_match_setup() -> None:
    game, _ = _game()
    snap = game.snapshot()
    assert snap.stack_size == 10
    assert snap.tallies == (0, 0)
    assert snap.rounds_won == (0, 0)
    assert snap.collection_sizes == (0, 0)
    assert snap.active_side == SIDE_A
    assert snap.phase == "awaiting_human"
    assert not snap.is_round_over
    assert not snap.is_match_over
    assert snap.round_number == 1
    assert snap.rounds_to_win == 3


def test_player_always_flips_wins_round_for_keeps() -> None:
    game, sched = _game(human_probability=1.0)
    res = game.throw()
    assert res.round_ended
    snap = game.snapshot()
    assert snap.tallies == (10, 0)
    assert snap.stack_size == 0
    assert snap.is_round_over
    assert snap.phase == "round_over"
    assert snap.rounds_won == (1, 0)
    assert snap.collection_sizes == (10, 0)
    assert snap.last_round_winner == SIDE_A
    assert sched.pending() == 0


def test_player_never_flips_hands_turn_to_computer() -> None:
    game, sched = _game(human_probability=0.0, computer_probability=0.0)
    res = game.throw()
    assert res.ok
    assert res.flipped_count == 0
    snap = game.snapshot()
    assert snap.stack_size == 10
    assert snap.tallies == (0, 0)
    assert not snap.is_round_over
    assert snap.active_side == SIDE_B
    assert snap.phase == "awaiting_computer"
    assert sched.pending() == 1


def test_human_throw_rejected_during_computer_turn() -> None:
    game, _ = _game(human_probability=0.0)
    game.throw()
    before = game.snapshot()
    res = game.throw()
    assert not res.ok
    assert game.snapshot() == before


def test_computer_throws_after_delay() -> None:
    game, sched = _game(human_probability=0.0, computer_probability=0.0, computer_delay=1.5)
    game.throw()
    assert sched.advance(1.0) == 0
    assert game.snapshot().active_side == SIDE_B
    assert sched.advance(0.5) == 1
    snap = game.snapshot()
    assert snap.active_side == SIDE_A
    assert snap.phase == "awaiting_human"


def test_computer_can_win_round() -> None:
    game, sched = _game(human_probability=0.0, computer_probability=1.0)
    game.throw()
    sched.advance(1.5)
    snap = game.snapshot()
    assert snap.is_round_over
    assert snap.tallies == (0, 10)
    assert snap.rounds_won == (0, 1)
    assert snap.collection_sizes == (0, 10)


def test_listeners_notified_after_commands_and_deferred_throw() -> None:
    game, sched = _game(human_probability=0.0, computer_probability=0.0)
    seen: list[Snapshot] = []
    game.subscribe(seen.append)
    game.throw()
    assert seen[-1].phase == "awaiting_computer"
    sched.advance(1.5)
    assert len(seen) == 2
    assert seen[-1].phase == "awaiting_human"


def test_stale_computer_throw_is_discarded_after_new_match() -> None:
    game, sched = _game(human_probability=0.0, computer_probability=1.0)
    game.throw()
    assert sched.pending() == 1
    game.start_match()
    before = game.snapshot()
    seen: list[Snapshot] = []
    game.subscribe(seen.append)
    sched.advance(5.0)
    assert game.snapshot() == before
    assert seen == []
    assert before.tallies == (0, 0)


def test_advance_is_noop_while_round_active() -> None:
    game, _ = _game()
    before = game.snapshot()
    game.advance()
    assert game.snapshot() == before


def test_advance_starts_next_round_keeping_match_state() -> None:
    game, _ = _game(human_probability=1.0)
    game.throw()
    game.advance()
    snap = game.snapshot()
    assert snap.round_number == 2
    assert snap.stack_size == 10
    assert snap.tallies == (0, 0)
    assert snap.rounds_won == (1, 0)
    assert snap.collection_sizes == (10, 0)
    assert snap.phase == "awaiting_human"


def test_auto_advance_begins_next_round() -> None:
    game, _ = _game(human_probability=1.0, auto_advance=True)
    game.throw()
    snap = game.snapshot()
    assert snap.round_number == 2
    assert not snap.is_round_over
    assert snap.rounds_won == (1, 0)


def test_round_adjudication_a_wins() -> None:
    game, _ = _game()
    game.on_round_adjudicated(_a_wins())
    snap = game.snapshot()
    assert snap.collection_sizes == (10, 0)
    assert snap.rounds_won == (1, 0)


def test_round_adjudication_tie_changes_nothing() -> None:
    game, _ = _game()
    game.on_round_adjudicated(_tie())
    snap = game.snapshot()
    assert snap.collection_sizes == (0, 0)
    assert snap.rounds_won == (0, 0)


def test_match_completion_after_three_a_wins() -> None:
    game, _ = _game()
    for outcome in (_a_wins(), _tie(), _b_wins(), _a_wins(), _b_wins()):
        game.on_round_adjudicated(outcome)
        assert not game.snapshot().is_match_over
    game.on_round_adjudicated(_a_wins())
    snap = game.snapshot()
    assert snap.is_match_over
    assert snap.match_winner == SIDE_A
    assert snap.rounds_won == (3, 2)
    assert game.match.outcome is not None
    assert game.match.outcome.collection_sizes == (30, 20)
    assert not game.throw().ok


def test_played_match_blocks_throws_until_new_match() -> None:
    game, _ = _game(human_probability=1.0)
    for _ in range(3):
        game.throw()
        if game.snapshot().is_match_over:
            break
        game.advance()
    snap = game.snapshot()
    assert snap.is_match_over
    assert snap.rounds_won == (3, 0)
    assert snap.collection_sizes == (30, 0)
    assert not game.throw().ok
    assert game.snapshot() == snap

    game.advance()
    fresh = game.snapshot()
    assert not fresh.is_match_over
    assert fresh.rounds_won == (0, 0)
    assert fresh.collection_sizes == (0, 0)
    assert fresh.round_number == 1


def test_new_match_resets_after_b_victory() -> None:
    game, _ = _game(rounds_to_win=1)
    game.on_round_adjudicated(_b_wins())
    assert game.snapshot().match_winner == SIDE_B
    game.start_match()
    snap = game.snapshot()
    assert snap.rounds_won == (0, 0)
    assert snap.collection_sizes == (0, 0)
    assert snap.match_winner is None


def test_start_match_with_custom_threshold() -> None:
    game, _ = _game()
    game.start_match(rounds_to_win=1)
    game.on_round_adjudicated(_a_wins())
    assert game.snapshot().is_match_over


def test_conservation_over_a_full_seeded_match() -> None:
    game, sched = _game()
    steps = 0
    while not game.snapshot().is_match_over:
        snap = game.snapshot()
        if snap.phase == "awaiting_human":
            game.throw()
        elif snap.phase == "awaiting_computer":
            sched.advance(1.5)
        else:
            game.advance()
        if not game.snapshot().is_round_over:
            assert game.round.tokens_accounted() == 10
        steps += 1
        assert steps < 10_000
    assert max(game.snapshot().rounds_won) == 3


@pytest.mark.parametrize(
    "overrides",
    [
        {"initial_count_per_side": 0},
        {"rounds_to_win": 0},
        {"human_probability": 1.5},
        {"computer_probability": -0.1},
        {"computer_delay": -1.0},
    ],
)
def test_misconfiguration_fails_fast(overrides: dict[str, object]) -> None:
    with pytest.raises(MatchConfigError):
        MatchController(MatchConfig(**overrides))  # type: ignore[arg-type]


def test_bad_striker_fails_fast() -> None:
    with pytest.raises(MatchConfigError):
        MatchController(striker=Striker(id="s", weight=-1.0, material="metal"))
    game, _ = _game()
    with pytest.raises(MatchConfigError):
        game.replace_striker(Striker(id="s", weight=0.0, material="rubber"))


def test_replaced_striker_used_next_round() -> None:
    game, _ = _game(human_probability=1.0)
    rubber = Striker(id="rubber_slammer", weight=30.0, material="rubber")
    game.replace_striker(rubber)
    assert game.round.striker.id == "default_slammer"
    game.throw()
    game.advance()
    assert game.round.striker == rubber


def test_start_match_rejects_zero_rounds() -> None:
    game, _ = _game()
    with pytest.raises(MatchConfigError):
        game.start_match(rounds_to_win=0)


def test_event_log_records_round_flow() -> None:
    game, _ = _game(human_probability=1.0)
    game.throw()
    kinds = [e["type"] for e in game.event_log]
    assert kinds == ["MATCH_STARTED", "ROUND_STARTED", "THROW", "ROUND_ENDED"]
    assert game.event_log[-1]["winner"] == SIDE_A


def test_each_match_starts_a_fresh_event_log() -> None:
    game, _ = _game(human_probability=1.0, rounds_to_win=1)
    for _ in range(3):
        assert [e["type"] for e in game.event_log] == ["MATCH_STARTED", "ROUND_STARTED"]
        game.throw()
        assert len(game.event_log) == 5
        assert game.event_log[-1]["type"] == "MATCH_ENDED"
        game.advance()


def test_start_match_notifies_listeners() -> None:
    game, _ = _game(human_probability=1.0)
    game.throw()
    seen: list[Snapshot] = []
    game.subscribe(seen.append)
    game.start_match()
    assert len(seen) == 1
    assert seen[0] == game.snapshot()
    assert seen[0].rounds_won == (0, 0)
    assert seen[0].collection_sizes == (0, 0)
    assert seen[0].round_number == 1


def test_advance_into_new_match_notifies_once() -> None:
    game, _ = _game(human_probability=1.0, rounds_to_win=1)
    game.throw()
    seen: list[Snapshot] = []
    game.subscribe(seen.append)
    game.advance()
    assert len(seen) == 1
    assert not seen[0].is_match_over


def test_snapshot_reports_best_of() -> None:
    game, _ = _game()
    assert game.snapshot().best_of == 5
    game.start_match(rounds_to_win=1)
    assert game.snapshot().best_of == 1


def test_round_query_without_round_raises() -> None:
    game, _ = _game()
    game.rounds.state = None
    with pytest.raises(RuntimeError):
        game.snapshot()
