from __future__ import annotations

from dataclasses import asdict

from .match import MatchOutcome, Snapshot
from .round import RoundOutcome


def snapshot_to_dict(snap: Snapshot) -> dict[str, object]:
    """Return a JSON-serializable canonical view of a snapshot."""
    d = asdict(snap)
    for key in ("tallies", "rounds_won", "collection_sizes"):
        d[key] = list(d[key])
    return d


def round_outcome_to_dict(outcome: RoundOutcome) -> dict[str, object]:
    return {
        "winner": outcome.winner,
        "tallies": list(outcome.tallies),
        "awarded": [t.id for t in outcome.awarded],
    }


def match_outcome_to_dict(outcome: MatchOutcome) -> dict[str, object]:
    return {
        "winner": outcome.winner,
        "rounds_won": list(outcome.rounds_won),
        "collection_sizes": list(outcome.collection_sizes),
    }
