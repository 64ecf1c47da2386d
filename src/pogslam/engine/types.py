from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Literal

StrikerMaterial = Literal["metal", "plastic", "rubber"]
TurnPhase = Literal["awaiting_human", "awaiting_computer", "round_over"]

SIDE_A = 0  # human, always throws first
SIDE_B = 1  # computer
SIDE_NAMES = ("Player", "Opponent")

MATERIAL_MULTIPLIERS: dict[str, float] = {
    "metal": 1.5,
    "plastic": 1.0,
    "rubber": 1.2,
}


def opponent(side: int) -> int:
    return 1 - side


def _new_token_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Token:
    id: str = field(default_factory=_new_token_id)
    is_face_up: bool = False

    def __setattr__(self, name: str, value: object) -> None:
        if name == "id" and "id" in self.__dict__:
            raise AttributeError("Token id is immutable")
        super().__setattr__(name, value)

    def keep(self) -> "KeptToken":
        return KeptToken(id=self.id, is_face_up=self.is_face_up)


@dataclass(frozen=True)
class KeptToken:
    """A token permanently owned by one side's collection."""

    id: str
    is_face_up: bool


@dataclass(frozen=True)
class Striker:
    id: str
    weight: float
    material: StrikerMaterial

    @property
    def impact_modifier(self) -> float:
        return self.weight * MATERIAL_MULTIPLIERS[self.material]

    def validate(self) -> None:
        if self.material not in MATERIAL_MULTIPLIERS:
            raise ValueError(f"Unknown striker material: {self.material!r}")
        if self.weight <= 0:
            raise ValueError(f"Striker weight must be positive, got {self.weight}")


def default_striker() -> Striker:
    return Striker(id="default_slammer", weight=50.0, material="metal")
