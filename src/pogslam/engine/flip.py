from __future__ import annotations

import random
from typing import Iterable

from .types import Token


def resolve(tokens: Iterable[Token], probability: float, rng: random.Random) -> list[Token]:
    """Strike every token once; each lands face-up independently with `probability`.

    Orientation is mutated in place and the same tokens are returned. One draw
    is taken per token even at p=0 or p=1 so the rng stream does not depend on
    the probability in use.
    """
    out = list(tokens)
    for token in out:
        token.is_face_up = rng.random() < probability
    return out


def count_face_up(tokens: Iterable[Token]) -> int:
    return sum(1 for t in tokens if t.is_face_up)
