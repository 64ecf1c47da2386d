"""Headless rules engine for pogslam.

IMPORTANT: This package must never import pygame.
"""

from .match import MatchConfig, MatchConfigError, MatchController, MatchOutcome, Snapshot
from .round import RoundEngine, RoundOutcome, RoundState, ThrowResult, adjudicate
from .scheduler import DeferredScheduler, FrameScheduler, TurnScheduler
from .types import SIDE_A, SIDE_B, KeptToken, Striker, StrikerMaterial, Token, TurnPhase

__all__ = [
    "DeferredScheduler",
    "FrameScheduler",
    "KeptToken",
    "MatchConfig",
    "MatchConfigError",
    "MatchController",
    "MatchOutcome",
    "RoundEngine",
    "RoundOutcome",
    "RoundState",
    "SIDE_A",
    "SIDE_B",
    "Snapshot",
    "Striker",
    "StrikerMaterial",
    "ThrowResult",
    "Token",
    "TurnPhase",
    "TurnScheduler",
    "adjudicate",
]
